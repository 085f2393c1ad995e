from django.db import models


class InventoryRecord(models.Model):
    """
    Stock count for a product.

    Records with a variant count only while the product has variants;
    records without one count only while it has none. The two pools are
    never mixed when stock status is derived.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='inventory',
        verbose_name='Product'
    )
    variant = models.ForeignKey(
        'catalog.Variant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='inventory',
        verbose_name='Variant'
    )
    quantity = models.IntegerField(
        default=0,
        verbose_name='Quantity'
    )
    low_stock_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        default=10,
        verbose_name='Low stock threshold'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    class Meta:
        ordering = ['product', 'variant', 'id']
        verbose_name = 'Inventory record'
        verbose_name_plural = 'Inventory records'

    def __str__(self):
        scope = self.variant.sku if self.variant_id else 'product'
        return f"{self.product.name} [{scope}]: {self.quantity}"

    def save(self, *args, **kwargs):
        if self.variant_id and not self.product_id:
            self.product_id = self.variant.product_id
        super().save(*args, **kwargs)
