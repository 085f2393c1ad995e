"""
Typed errors raised or reported by the catalog engine.

Public engine operations never let these escape as unhandled failures: the
orchestrator attaches them to the page it publishes, and the API layer turns
them into HTTP responses.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""

    code = 'catalog_error'

    def __init__(self, message='', **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def as_dict(self):
        payload = {'code': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class RepositoryError(CatalogError):
    """The backing store query failed (transport, permissions, schema)."""

    code = 'repository_error'


class CategoryLookupError(CatalogError):
    """Category identifiers could not be loaded from the backing store."""

    code = 'category_lookup_error'


class SelectionUnavailable(CatalogError):
    """The requested size/color/quantity cannot be added to the cart."""

    code = 'selection_unavailable'
