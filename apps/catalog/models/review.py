from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class ProductReview(models.Model):
    """Customer review; approved reviews feed the rating shown on cards."""
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='reviews',
        verbose_name='Product'
    )
    author_name = models.CharField(
        max_length=120,
        verbose_name='Author'
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        verbose_name='Rating'
    )
    comment = models.TextField(
        blank=True,
        verbose_name='Comment'
    )
    is_approved = models.BooleanField(
        default=True,
        verbose_name='Approved'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Product review'
        verbose_name_plural = 'Product reviews'

    def __str__(self):
        return f"{self.product.name} - {self.rating}/5 by {self.author_name}"
