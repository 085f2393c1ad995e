from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from simple_history.models import HistoricalRecords


class Variant(models.Model):
    """
    A size/color combination of a product.

    ``price_adjustment`` is the variant's own selling price when positive;
    zero or empty means the variant sells at the product price.
    Stock is not stored here but in ``InventoryRecord`` rows scoped to the
    variant.
    """
    hex_color_validator = RegexValidator(
        regex=r'^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$',
        message='Color must be a hex value (#RRGGBB)'
    )

    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name='Product'
    )
    sku = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='SKU'
    )
    size = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Size'
    )
    color = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Color'
    )
    color_hex = models.CharField(
        max_length=7,
        blank=True,
        validators=[hex_color_validator],
        verbose_name='Color hex',
        help_text='Used to render a swatch when no swatch image exists'
    )
    price_adjustment = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Variant price'
    )

    # Swatch image: a weak reference into the product's own images
    swatch_image = models.ForeignKey(
        'catalog.ProductImage',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='swatch_variants',
        verbose_name='Swatch image'
    )
    swatch_reference = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Imported swatch reference',
        help_text='Swatch identifier carried over from catalog imports'
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ['product', 'sku']
        verbose_name = 'Variant'
        verbose_name_plural = 'Variants'
        indexes = [
            models.Index(fields=['product', 'is_active'], name='idx_variant_product_active'),
        ]

    def __str__(self):
        label = ' / '.join(part for part in (self.size, self.color) if part)
        return f"{self.sku} ({label})" if label else self.sku

    @property
    def swatch_key(self):
        """Reference handed to the swatch matcher, or None."""
        if self.swatch_image_id:
            return str(self.swatch_image_id)
        return self.swatch_reference.strip() or None
