"""
Image resolution and deduplication.

Turns a product's raw image rows plus the swatch references of its variants
into one ordered gallery of unique URLs. Gallery images come first, swatch
images after them, and the first occurrence of a URL wins.

Swatch references are matched by ``SwatchMatcher``:

1. exact match: the reference equals an image id, or an image URL;
2. normalized substring match: the reference appears inside an image URL,
   compared case-insensitively with and without ``-``/``_`` separators.

Stage 2 exists for imported catalogs whose storage paths embed the swatch
id without its canonical formatting. It is a lossy heuristic and can match
the wrong image when a short numeric id (a row id like ``7``) turns up
inside another path, so purely numeric references shorter than
``MIN_FUZZY_REFERENCE_LENGTH`` never take part in it.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from apps.catalog.conf import get_catalog_setting

from .rows import RawImageRow

logger = logging.getLogger(__name__)

MIN_FUZZY_REFERENCE_LENGTH = 8

_SEPARATORS_RE = re.compile(r'[-_]')
_ABSOLUTE_PREFIXES = ('http://', 'https://', '//', '/', 'data:')
_JUNK_VALUES = {'null', 'undefined', 'none'}


def resolve_image_url(raw, media_base_url=None) -> Optional[str]:
    """
    Turn a stored image URL or storage path into a displayable URL.

    Returns None for anything unusable instead of raising.
    """
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if not value or value.lower() in _JUNK_VALUES:
        return None
    if any(ch in value for ch in '\n\r\t'):
        return None
    if value.startswith(_ABSOLUTE_PREFIXES):
        return value
    base = media_base_url if media_base_url is not None else get_catalog_setting('MEDIA_BASE_URL')
    return f"{base.rstrip('/')}/{value.lstrip('/')}"


def _strip_separators(value: str) -> str:
    return _SEPARATORS_RE.sub('', value)


class SwatchMatcher:
    """Finds the image a variant's swatch reference points at."""

    def __init__(self, images: Sequence[RawImageRow], media_base_url=None):
        self._images = list(images)
        self._urls = [resolve_image_url(img.url, media_base_url) for img in self._images]

    def matches(self, reference) -> List[int]:
        """
        Indexes (into the images given at construction) matched by a
        reference, taken from the first stage that finds anything.
        """
        ref = str(reference).strip() if reference is not None else ''
        if not ref:
            return []

        exact_id = [i for i, img in enumerate(self._images) if str(img.id) == ref]
        if exact_id:
            return exact_id

        exact_url = [
            i for i, img in enumerate(self._images)
            if self._urls[i] and ref in (img.url, self._urls[i])
        ]
        if exact_url:
            return exact_url

        return self._fuzzy_matches(ref)

    def match(self, reference) -> Optional[RawImageRow]:
        hits = self.matches(reference)
        return self._images[hits[0]] if hits else None

    def url_for(self, reference) -> Optional[str]:
        hits = self.matches(reference)
        return self._urls[hits[0]] if hits else None

    def _fuzzy_matches(self, ref: str) -> List[int]:
        needle = ref.casefold()
        bare_needle = _strip_separators(needle)
        if not bare_needle or (bare_needle.isdigit() and len(bare_needle) < MIN_FUZZY_REFERENCE_LENGTH):
            return []
        hits = []
        for index, url in enumerate(self._urls):
            if not url:
                continue
            haystack = url.casefold()
            if needle in haystack or bare_needle in _strip_separators(haystack):
                hits.append(index)
        if hits:
            logger.debug("Swatch reference %r matched %d image(s) by substring", ref, len(hits))
        return hits


def _image_sort_key(item):
    _, image = item
    created = image.created_at
    return (
        not image.is_primary,
        created is None,
        created.timestamp() if created is not None else 0.0,
    )


def sort_images(images: Iterable[RawImageRow]) -> List[Tuple[int, RawImageRow]]:
    """Primary first, then oldest first; each image paired with its raw index."""
    return sorted(enumerate(images), key=_image_sort_key)


@dataclass(frozen=True)
class ResolvedGallery:
    urls: Tuple[str, ...]
    # (gallery index, raw index) pairs; the placeholder has no entry
    positions: Tuple[Tuple[int, int], ...] = ()
    is_placeholder: bool = False

    @property
    def primary_url(self) -> str:
        return self.urls[0]

    def raw_index(self, gallery_index: int) -> Optional[int]:
        return dict(self.positions).get(gallery_index)

    def gallery_index(self, raw_index: int) -> Optional[int]:
        for gallery_pos, raw_pos in self.positions:
            if raw_pos == raw_index:
                return gallery_pos
        return None


def resolve_gallery(
    images: Sequence[RawImageRow],
    swatch_references: Iterable = (),
    *,
    placeholder_url: Optional[str] = None,
    media_base_url: Optional[str] = None,
) -> ResolvedGallery:
    """
    Build the ordered, de-duplicated gallery for one product.

    Args:
        images: The product's raw image rows, in store order.
        swatch_references: Swatch ids/paths referenced by the product's variants.
        placeholder_url: URL used when nothing resolves.
        media_base_url: Prefix for storage paths.

    Returns:
        ResolvedGallery with at least one URL.
    """
    images = list(images)
    matcher = SwatchMatcher(images, media_base_url)
    swatch_indexes = set()
    for reference in swatch_references:
        swatch_indexes.update(matcher.matches(reference))

    ordered = sort_images(images)
    gallery = [(i, img) for i, img in ordered if i not in swatch_indexes]
    swatches = [(i, img) for i, img in ordered if i in swatch_indexes]

    urls: List[str] = []
    positions: List[Tuple[int, int]] = []
    seen = set()
    for raw_index, image in gallery + swatches:
        url = resolve_image_url(image.url, media_base_url)
        if not url or url in seen:
            continue
        seen.add(url)
        positions.append((len(urls), raw_index))
        urls.append(url)

    if not urls:
        placeholder = placeholder_url or get_catalog_setting('PLACEHOLDER_IMAGE_URL')
        return ResolvedGallery(urls=(placeholder,), positions=(), is_placeholder=True)

    return ResolvedGallery(urls=tuple(urls), positions=tuple(positions))


def resolve_swatch_url(reference, images: Sequence[RawImageRow], media_base_url=None) -> Optional[str]:
    """Swatch URL for a single variant, or None when the reference dangles."""
    if reference is None:
        return None
    return SwatchMatcher(images, media_base_url).url_for(reference)


def swatch_urls_by_reference(
    references: Iterable,
    images: Sequence[RawImageRow],
    media_base_url=None,
) -> Dict[str, Optional[str]]:
    """Resolve many references against one product's images in one pass."""
    matcher = SwatchMatcher(images, media_base_url)
    resolved = {}
    for reference in references:
        if reference is None:
            continue
        key = str(reference)
        if key not in resolved:
            resolved[key] = matcher.url_for(reference)
    return resolved
