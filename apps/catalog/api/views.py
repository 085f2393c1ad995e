from asgiref.sync import async_to_sync
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.catalog.exceptions import SelectionUnavailable
from apps.catalog.models import Category
from apps.catalog.services import build_cart_line, build_catalog_orchestrator, quote_selection

from .serializers import (
    CatalogQuerySerializer,
    SelectionSerializer,
    CartLineRequestSerializer,
    ResolvedProductSerializer,
    CatalogPageSerializer,
    SelectionQuoteSerializer,
    CartLineItemSerializer,
    CategorySerializer,
)


class ProductCatalogViewSet(viewsets.ViewSet):
    """
    API endpoint for the storefront catalog.

    list: Resolved products for a filtered, sorted, paginated query
    retrieve: One resolved product by slug
    availability: Availability matrix, stock and price for a size/color selection
    cart_line: Line item for adding a selection to the cart
    """
    lookup_field = 'slug'

    def get_orchestrator(self):
        return build_catalog_orchestrator()

    def get_view_or_404(self, slug):
        view = async_to_sync(self.get_orchestrator().fetch_product)(slug)
        if view is None:
            return None, Response(
                {'error': 'Product not found'},
                status=status.HTTP_404_NOT_FOUND
            )
        return view, None

    def list(self, request):
        query_serializer = CatalogQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        page = async_to_sync(self.get_orchestrator().fetch)(query_serializer.to_query())
        return Response(CatalogPageSerializer(page).data)

    def retrieve(self, request, slug=None):
        view, error = self.get_view_or_404(slug)
        if error is not None:
            return error
        return Response(ResolvedProductSerializer(view).data)

    @action(detail=True, methods=['get'])
    def availability(self, request, slug=None):
        """
        Availability for a partial selection.

        Query params:
        - size: Optional
        - color: Optional
        """
        selection = SelectionSerializer(data=request.query_params)
        selection.is_valid(raise_exception=True)
        size = selection.validated_data['size']
        color = selection.validated_data['color']

        view, error = self.get_view_or_404(slug)
        if error is not None:
            return error

        matrix = view.matrix()
        quote = quote_selection(view, size=size, color=color)
        payload = SelectionQuoteSerializer(quote).data
        payload['available_sizes'] = matrix.available_sizes(color or None)
        payload['available_colors'] = matrix.available_colors(size or None)
        payload['options'] = matrix.selector_options(size or None, color or None)
        return Response(payload)

    @action(detail=True, methods=['post'], url_path='cart-line')
    def cart_line(self, request, slug=None):
        """
        Build the cart line item for a selection.

        Expected payload:
        {
            "size": "M",
            "color": "Blue",
            "quantity": 1
        }
        """
        line_request = CartLineRequestSerializer(data=request.data)
        line_request.is_valid(raise_exception=True)

        view, error = self.get_view_or_404(slug)
        if error is not None:
            return error

        try:
            line = build_cart_line(
                view,
                size=line_request.validated_data['size'] or None,
                color=line_request.validated_data['color'] or None,
                quantity=line_request.validated_data['quantity'],
            )
        except SelectionUnavailable as exc:
            return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response(CartLineItemSerializer(line).data)


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for active categories (read-only).
    """
    queryset = Category.objects.filter(is_active=True).select_related('parent')
    serializer_class = CategorySerializer
    lookup_field = 'slug'
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'slug']
    ordering = ['display_order', 'name']
