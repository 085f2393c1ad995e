"""
Garment size ordering.

Every component that lists sizes sorts them through ``sort_sizes`` so that
size selectors, cards and filters agree on one order.
"""
from typing import Iterable, List

SIZE_ORDER = (
    'XS', 'S', 'M', 'L', 'XL',
    '2XL', '3XL', '4XL', '5XL', '6XL', '7XL', '8XL',
)

FREE_SIZE = 'Free Size'

# Sizes outside SIZE_ORDER sort after every known size
UNKNOWN_SIZE_PRIORITY = len(SIZE_ORDER)

_PRIORITY = {label: index for index, label in enumerate(SIZE_ORDER)}


def normalize_size(label) -> str:
    return (label or '').strip().upper()


def size_priority(label) -> int:
    return _PRIORITY.get(normalize_size(label), UNKNOWN_SIZE_PRIORITY)


def is_free_size(label) -> bool:
    return (label or '').strip().casefold() == FREE_SIZE.casefold()


def _sort_key(label):
    priority = size_priority(label)
    if priority == UNKNOWN_SIZE_PRIORITY:
        return (priority, (label or '').strip().casefold())
    return (priority, '')


def sort_sizes(labels: Iterable[str]) -> List[str]:
    """
    Sort size labels by the canonical garment order.

    Example:
        sort_sizes(['L', 'XS', '3XL', 'M']) -> ['XS', 'M', 'L', '3XL']

    Unknown labels (e.g. "Free Size", "32") come last, alphabetically.
    The sort is stable, so equal labels keep their input order.
    """
    return sorted(labels, key=_sort_key)


def real_sizes(labels: Iterable[str]) -> List[str]:
    """Sorted sizes without blanks and without the "Free Size" sentinel."""
    return sort_sizes(
        label for label in labels
        if label and label.strip() and not is_free_size(label)
    )


def has_real_sizes(labels: Iterable[str]) -> bool:
    """Whether a size selector is worth showing at all."""
    return bool(real_sizes(labels))
