from django.db import models
from imagekit.models import ImageSpecField, ProcessedImageField
from imagekit.processors import ResizeToFill, ResizeToFit


class ProductImage(models.Model):
    """
    Image owned by a product.

    An image is either uploaded (resized on save, thumbnail generated on
    demand) or referenced by ``image_url``, which holds an absolute URL or a
    path inside the product-image storage bucket. Variants may point at one
    of these images as their color swatch.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='images',
        verbose_name='Product'
    )
    image = ProcessedImageField(
        upload_to='products/%Y/%m/',
        processors=[ResizeToFit(1600, 1600)],
        format='JPEG',
        options={'quality': 85},
        blank=True,
        verbose_name='Uploaded image'
    )
    thumbnail = ImageSpecField(
        source='image',
        processors=[ResizeToFill(400, 533)],
        format='JPEG',
        options={'quality': 70}
    )
    image_url = models.CharField(
        max_length=500,
        blank=True,
        verbose_name='Image URL or storage path'
    )
    alt_text = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Alt text'
    )
    is_primary = models.BooleanField(
        default=False,
        verbose_name='Primary image'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )

    class Meta:
        ordering = ['-is_primary', 'created_at', 'id']
        verbose_name = 'Product image'
        verbose_name_plural = 'Product images'

    def __str__(self):
        return f"{self.product.name} - image {self.pk}"

    @property
    def url(self):
        """Uploaded file URL when present, otherwise the stored URL/path."""
        if self.image:
            return self.image.url
        return self.image_url

    def save(self, *args, **kwargs):
        # Only one primary image per product
        if self.is_primary:
            ProductImage.objects.filter(
                product=self.product,
                is_primary=True
            ).exclude(pk=self.pk).update(is_primary=False)

        if not self.alt_text:
            self.alt_text = self.product.name

        super().save(*args, **kwargs)
