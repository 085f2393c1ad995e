from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import (
    Category,
    Product,
    ProductImage,
    Variant,
    InventoryRecord,
    ProductReview,
)
from .services.repository import product_to_row
from .services.resolver import resolve_product
from .services.stock import StockStatus

STOCK_COLORS = {
    StockStatus.IN_STOCK: 'green',
    StockStatus.LOW_STOCK: 'orange',
    StockStatus.OUT_OF_STOCK: 'red',
}


# =============================================================================
# Import/Export Resources
# =============================================================================

class VariantResource(resources.ModelResource):
    """Resource for importing/exporting variants."""

    product = fields.Field(
        column_name='product_slug',
        attribute='product',
        widget=ForeignKeyWidget(Product, 'slug')
    )

    class Meta:
        model = Variant
        import_id_fields = ['sku']
        fields = (
            'sku', 'product', 'size', 'color', 'color_hex',
            'price_adjustment', 'swatch_reference', 'is_active'
        )
        export_order = fields


class InventoryRecordResource(resources.ModelResource):
    """
    Resource for importing/exporting stock counts.
    Leave variant_sku empty for product-level stock.
    """

    product = fields.Field(
        column_name='product_slug',
        attribute='product',
        widget=ForeignKeyWidget(Product, 'slug')
    )
    variant = fields.Field(
        column_name='variant_sku',
        attribute='variant',
        widget=ForeignKeyWidget(Variant, 'sku')
    )

    class Meta:
        model = InventoryRecord
        import_id_fields = ['product', 'variant']
        fields = ('product', 'variant', 'quantity', 'low_stock_threshold')
        export_order = fields


# =============================================================================
# Inlines
# =============================================================================

class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 1
    fields = ['image', 'image_url', 'alt_text', 'is_primary', 'image_preview']
    readonly_fields = ['image_preview']

    def image_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                obj.thumbnail.url
            )
        if obj.image_url:
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                obj.image_url
            )
        return '-'
    image_preview.short_description = 'Preview'


class VariantInline(admin.TabularInline):
    model = Variant
    extra = 0
    fields = ['sku', 'size', 'color', 'price_adjustment', 'is_active']
    show_change_link = True


class InventoryRecordInline(admin.TabularInline):
    model = InventoryRecord
    extra = 0
    fields = ['variant', 'quantity', 'low_stock_threshold', 'updated_at']
    readonly_fields = ['updated_at']
    raw_id_fields = ['variant']


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Category)
class CategoryAdmin(SortableAdminMixin, admin.ModelAdmin):
    list_display = ['display_order', 'name', 'slug', 'parent', 'product_count', 'is_active']
    list_filter = ['is_active', 'parent']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = 'Products'


@admin.register(Product)
class ProductAdmin(SimpleHistoryAdmin):
    list_display = [
        'name', 'category', 'price', 'sale_price', 'display_price',
        'stock_status', 'is_featured', 'is_active', 'created_at'
    ]
    list_filter = ['is_active', 'is_featured', 'category', 'created_at']
    search_fields = ['name', 'slug', 'description', 'fabric']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['display_price', 'stock_status', 'created_at', 'updated_at']
    autocomplete_fields = ['category']
    inlines = [ProductImageInline, VariantInline, InventoryRecordInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'slug', 'category', 'description', 'is_active', 'is_featured')
        }),
        ('Pricing', {
            'fields': ('price', 'sale_price', 'display_price')
        }),
        ('Attributes', {
            'fields': ('fabric', 'color', 'occasion')
        }),
        ('Info', {
            'fields': ('stock_status', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('category').prefetch_related(
            'images', 'variants', 'inventory'
        )

    def _resolved(self, obj):
        if not hasattr(obj, '_resolved_view'):
            obj._resolved_view = resolve_product(product_to_row(obj))
        return obj._resolved_view

    def display_price(self, obj):
        if obj.pk is None:
            return '-'
        return self._resolved(obj).price
    display_price.short_description = 'Display price'

    def stock_status(self, obj):
        if obj.pk is None:
            return '-'
        view = self._resolved(obj)
        return format_html(
            '<span style="color: {};">{} ({})</span>',
            STOCK_COLORS[view.stock_status],
            view.stock_status.value,
            view.available_quantity
        )
    stock_status.short_description = 'Stock'


@admin.register(Variant)
class VariantAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = VariantResource
    list_display = [
        'sku', 'product', 'size', 'color', 'color_swatch',
        'price_adjustment', 'is_active'
    ]
    list_filter = ['is_active', 'size', 'product__category']
    list_editable = ['price_adjustment', 'is_active']
    search_fields = ['sku', 'product__name', 'color']
    autocomplete_fields = ['product']
    raw_id_fields = ['swatch_image']
    readonly_fields = ['created_at', 'updated_at']
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('product', 'sku', 'is_active')
        }),
        ('Options', {
            'fields': ('size', 'color', 'color_hex', 'price_adjustment')
        }),
        ('Swatch', {
            'fields': ('swatch_image', 'swatch_reference')
        }),
        ('Info', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['activate_variants', 'deactivate_variants']

    def color_swatch(self, obj):
        if obj.color_hex:
            value = obj.color_hex if obj.color_hex.startswith('#') else f'#{obj.color_hex}'
            return format_html(
                '<div style="width: 20px; height: 20px; background-color: {}; '
                'border: 1px solid #ccc; border-radius: 3px;"></div>',
                value
            )
        return '-'
    color_swatch.short_description = 'Swatch'

    @admin.action(description='Activate selected variants')
    def activate_variants(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'{count} variants activated.')

    @admin.action(description='Deactivate selected variants')
    def deactivate_variants(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'{count} variants deactivated.')


@admin.register(InventoryRecord)
class InventoryRecordAdmin(ImportExportModelAdmin):
    resource_class = InventoryRecordResource
    list_display = ['product', 'variant', 'quantity', 'low_stock_threshold', 'updated_at']
    list_filter = ['product__category']
    list_editable = ['quantity', 'low_stock_threshold']
    search_fields = ['product__name', 'variant__sku']
    raw_id_fields = ['product', 'variant']

    actions = ['mark_out_of_stock']

    @admin.action(description='Set quantity to zero')
    def mark_out_of_stock(self, request, queryset):
        count = queryset.update(quantity=0)
        self.message_user(request, f'{count} inventory records updated.')


@admin.register(ProductReview)
class ProductReviewAdmin(admin.ModelAdmin):
    list_display = ['product', 'author_name', 'rating', 'is_approved', 'created_at']
    list_filter = ['is_approved', 'rating', 'created_at']
    list_editable = ['is_approved']
    search_fields = ['product__name', 'author_name', 'comment']
    raw_id_fields = ['product']
    date_hierarchy = 'created_at'

    actions = ['approve_reviews', 'hide_reviews']

    @admin.action(description='Approve selected reviews')
    def approve_reviews(self, request, queryset):
        count = queryset.update(is_approved=True)
        self.message_user(request, f'{count} reviews approved.')

    @admin.action(description='Hide selected reviews')
    def hide_reviews(self, request, queryset):
        count = queryset.update(is_approved=False)
        self.message_user(request, f'{count} reviews hidden.')


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Storefront Catalog Admin'
admin.site.site_title = 'Storefront Catalog'
admin.site.index_title = 'Catalog administration'
