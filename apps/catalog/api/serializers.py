from rest_framework import serializers

from apps.catalog.conf import get_catalog_setting
from apps.catalog.models import Category
from apps.catalog.services import CatalogQuery, SortKey


# =============================================================================
# Query Serializers
# =============================================================================

class CatalogQuerySerializer(serializers.Serializer):
    """Listing query parameters."""
    category = serializers.CharField(required=False, allow_blank=True)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    fabric = serializers.CharField(required=False, allow_blank=True)
    occasion = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.ChoiceField(choices=[key.value for key in SortKey], default=SortKey.NEWEST.value)
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)

    def validate_page_size(self, value):
        limit = get_catalog_setting('MAX_PAGE_SIZE')
        if value > limit:
            raise serializers.ValidationError(f'Ensure this value is less than or equal to {limit}.')
        return value

    def validate(self, attrs):
        low, high = attrs.get('min_price'), attrs.get('max_price')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({'max_price': 'Must not be lower than min_price.'})
        return attrs

    def to_query(self) -> CatalogQuery:
        data = self.validated_data
        return CatalogQuery(
            category=data.get('category') or None,
            price_min=data.get('min_price'),
            price_max=data.get('max_price'),
            fabric=data.get('fabric') or None,
            occasion=data.get('occasion') or None,
            search=data.get('search') or None,
            sort=SortKey(data['sort']),
            page=data['page'],
            page_size=data.get('page_size'),
        )


class SelectionSerializer(serializers.Serializer):
    size = serializers.CharField(required=False, allow_blank=True, default='')
    color = serializers.CharField(required=False, allow_blank=True, default='')


class CartLineRequestSerializer(SelectionSerializer):
    quantity = serializers.IntegerField(min_value=1, default=1)


# =============================================================================
# Resolved View Serializers
# =============================================================================

class ResolvedVariantSerializer(serializers.Serializer):
    id = serializers.CharField()
    sku = serializers.CharField()
    size = serializers.CharField()
    color = serializers.CharField()
    color_hex = serializers.CharField(allow_null=True)
    price_adjustment = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    swatch_url = serializers.CharField(allow_null=True)
    quantity = serializers.IntegerField()
    stock_status = serializers.CharField(source='stock.status.value')


class ResolvedProductSerializer(serializers.Serializer):
    id = serializers.CharField()
    slug = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    original_price = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    discount_percentage = serializers.IntegerField(allow_null=True)
    images = serializers.ListField(child=serializers.CharField())
    image_positions = serializers.SerializerMethodField()
    variants = ResolvedVariantSerializer(many=True)
    sizes = serializers.ListField(child=serializers.CharField())
    colors = serializers.ListField(child=serializers.CharField())
    stock_status = serializers.CharField(source='stock_status.value')
    available_quantity = serializers.IntegerField()
    category_id = serializers.CharField(allow_null=True)
    category_label = serializers.CharField(allow_null=True)
    fabric = serializers.CharField(allow_null=True)
    occasions = serializers.ListField(child=serializers.CharField())
    description = serializers.CharField()
    is_featured = serializers.BooleanField()
    rating = serializers.DecimalField(max_digits=3, decimal_places=1)
    review_count = serializers.IntegerField()

    def get_image_positions(self, obj):
        return [
            {'gallery_index': gallery_index, 'raw_index': raw_index}
            for gallery_index, raw_index in obj.image_positions
        ]


class CatalogPageSerializer(serializers.Serializer):
    products = ResolvedProductSerializer(many=True)
    total_count = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    generation = serializers.IntegerField()
    degraded = serializers.BooleanField()
    error = serializers.DictField(allow_null=True)


class SelectionQuoteSerializer(serializers.Serializer):
    size = serializers.CharField(allow_null=True)
    color = serializers.CharField(allow_null=True)
    variant = ResolvedVariantSerializer(allow_null=True)
    stock_status = serializers.CharField(source='stock.status.value')
    quantity = serializers.IntegerField(source='stock.quantity')
    price = serializers.DecimalField(source='price.price', max_digits=10, decimal_places=2)
    original_price = serializers.DecimalField(
        source='price.original_price', max_digits=10, decimal_places=2, allow_null=True
    )
    discount_percentage = serializers.IntegerField(source='price.discount_percentage', allow_null=True)
    is_available = serializers.BooleanField()


class CartLineItemSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    name = serializers.CharField()
    resolved_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    image_url = serializers.CharField()
    size = serializers.CharField()
    color = serializers.CharField(allow_null=True)
    variant_id = serializers.CharField(allow_null=True)
    category_label = serializers.CharField(allow_null=True)
    quantity = serializers.IntegerField()


# =============================================================================
# Category Serializer
# =============================================================================

class CategorySerializer(serializers.ModelSerializer):
    full_path = serializers.CharField(read_only=True)
    level = serializers.IntegerField(read_only=True)
    parent_slug = serializers.CharField(source='parent.slug', read_only=True, default=None)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'parent', 'parent_slug', 'full_path',
            'level', 'description', 'display_order'
        ]
