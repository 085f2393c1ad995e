from django.db import models
from django.utils.text import slugify


class Category(models.Model):
    """
    Storefront category, optionally nested.
    Examples: Sarees > Silk Sarees, Lehengas > Bridal

    Shoppers filter by slug or by name; the catalog engine translates
    either into the primary key through the category cache.
    """
    name = models.CharField(
        max_length=200,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=200,
        unique=True,
        blank=True,
        verbose_name='Slug'
    )
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        verbose_name='Parent category'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )
    image = models.ImageField(
        upload_to='categories/',
        blank=True,
        null=True,
        verbose_name='Banner image'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name='Display order'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['display_order', 'name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.full_path

    @property
    def full_path(self):
        """Breadcrumb label, e.g. "Sarees > Silk Sarees"."""
        return ' > '.join([a.name for a in self.get_ancestors()] + [self.name])

    @property
    def level(self):
        """0 for top-level categories."""
        return len(self.get_ancestors())

    def get_ancestors(self):
        """Ancestors from the root down to the direct parent."""
        ancestors = []
        seen = {self.pk}
        current = self.parent
        while current is not None and current.pk not in seen:
            seen.add(current.pk)
            ancestors.insert(0, current)
            current = current.parent
        return ancestors

    def get_descendants(self):
        return Category.objects.filter(pk__in=self.descendant_ids()[1:])

    def descendant_ids(self):
        """Primary keys of this category and every category nested below it."""
        ids = [self.pk]
        seen = {self.pk}
        frontier = [self.pk]
        while frontier:
            children = Category.objects.filter(parent_id__in=frontier).values_list('pk', flat=True)
            frontier = [pk for pk in children if pk not in seen]
            seen.update(frontier)
            ids.extend(frontier)
        return ids

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = slugify(self.name) or 'category'
            slug = base_slug
            suffix = 2
            taken = Category.objects.exclude(pk=self.pk)
            while taken.filter(slug=slug).exists():
                slug = f"{base_slug}-{suffix}"
                suffix += 1
            self.slug = slug
        super().save(*args, **kwargs)
