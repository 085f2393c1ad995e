from django.db.models import Case, DecimalField, F, Q, When
from django_filters import rest_framework as filters

from apps.catalog.models import Category, Product


def with_effective_price(queryset):
    """Annotate the price a shopper pays before variant pricing: sale price when set, else base."""
    if 'effective_price' in queryset.query.annotations:
        return queryset
    return queryset.annotate(
        effective_price=Case(
            When(sale_price__gt=0, then=F('sale_price')),
            default=F('price'),
            output_field=DecimalField(max_digits=10, decimal_places=2),
        )
    )


class ProductFilter(filters.FilterSet):
    """Filter for storefront product listings."""

    category = filters.CharFilter(method='filter_category')

    # Price filters
    min_price = filters.NumberFilter(method='filter_min_price')
    max_price = filters.NumberFilter(method='filter_max_price')

    fabric = filters.CharFilter(field_name='fabric', lookup_expr='icontains')
    occasion = filters.CharFilter(method='filter_occasion')
    search = filters.CharFilter(method='filter_search')

    class Meta:
        model = Product
        fields = ['category', 'fabric', 'is_featured']

    def filter_category(self, queryset, name, value):
        """
        Filter by category id, including products of nested categories.
        An unknown id yields nothing rather than the unfiltered list.
        """
        category = Category.objects.filter(pk=value).first() if str(value).isdigit() else None
        if category is None:
            return queryset.none()
        return queryset.filter(category_id__in=category.descendant_ids())

    def filter_min_price(self, queryset, name, value):
        return with_effective_price(queryset).filter(effective_price__gte=value)

    def filter_max_price(self, queryset, name, value):
        return with_effective_price(queryset).filter(effective_price__lte=value)

    def filter_occasion(self, queryset, name, value):
        """
        Occasions are stored as a JSON list; match any entry containing the value.
        Example: ?occasion=wedding
        """
        return queryset.filter(occasion__icontains=value.strip())

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(description__icontains=value) | Q(fabric__icontains=value)
        )
