"""
Django signals for the catalog app.
Keeps the category id cache in step with category edits.
"""
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Category
from .services.category_cache import invalidate_category_cache

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Category)
@receiver(post_delete, sender=Category)
def invalidate_category_lookup(sender, instance, **kwargs):
    """
    Drop cached category ids when a category is created, renamed or removed,
    so the next filter lookup reloads them.
    """
    logger.debug("Category %s changed, invalidating category cache", instance.pk)
    invalidate_category_cache()
