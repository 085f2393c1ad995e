from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.text import slugify
from simple_history.models import HistoricalRecords


class Product(models.Model):
    """
    Base apparel product.
    Example: "Banarasi Silk Saree", sold as-is or through size/color variants.

    The base price and sale price apply only while no variant carries a
    positive price adjustment; see ``apps.catalog.services.pricing``.
    """
    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=255,
        unique=True,
        blank=True,
        verbose_name='Slug'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )
    category = models.ForeignKey(
        'catalog.Category',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
        verbose_name='Category'
    )

    # Pricing
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Base price'
    )
    sale_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Sale price'
    )

    # Descriptive attributes used by storefront filters
    fabric = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Fabric'
    )
    color = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Colors',
        help_text='Comma-separated colors for products sold without variants'
    )
    occasion = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Occasions',
        help_text='List of occasions, e.g. ["Wedding", "Festive"]'
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )
    is_featured = models.BooleanField(
        default=False,
        verbose_name='Featured'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # Price and catalog edits are audited
    history = HistoricalRecords()

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        indexes = [
            models.Index(fields=['is_active', 'created_at'], name='idx_product_active_created'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    @property
    def has_variants(self):
        return self.variants.filter(is_active=True).exists()

    @property
    def category_label(self):
        return self.category.full_path if self.category_id else None
