from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ProductCatalogViewSet,
    CategoryViewSet,
)

router = DefaultRouter()
router.register(r'products', ProductCatalogViewSet, basename='product')
router.register(r'categories', CategoryViewSet, basename='category')

urlpatterns = [
    path('', include(router.urls)),
]
