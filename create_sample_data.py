"""
Script to load the sample apparel catalog into the database.
Run with: python manage.py shell < create_sample_data.py
"""
from apps.catalog.models import (
    Category,
    Product,
    Variant,
    InventoryRecord,
)
from apps.catalog.services.sample_catalog import seed_sample_catalog

print("Seeding sample catalog...")
created = seed_sample_catalog()

print("\n✅ Sample data created successfully!")
print(f"   - {created} new products")
print(f"   - {Category.objects.count()} categories")
print(f"   - {Product.objects.count()} products")
print(f"   - {Variant.objects.count()} variants")
print(f"   - {InventoryRecord.objects.count()} inventory records")
print("\nBrowse the catalog API at: http://localhost:8000/api/catalog/products/")
