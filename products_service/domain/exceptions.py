# products_service/domain/exceptions.py
"""
Error taxonomy of the catalog core.

NotFound is an expected outcome, not a failure: callers map it to 404 and it is
never logged as an error. Everything else wraps the underlying cause with
`raise ... from err`.
"""


class CatalogError(Exception):
    """Base class for every error raised by the catalog core."""


class ProductNotFoundError(CatalogError):
    def __init__(self, product_id: str):
        super().__init__(f"product not found: {product_id}")
        self.product_id = product_id


class StoreUnavailableError(CatalogError):
    """Connection or protocol failure of the record store."""


class IndexUnavailableError(CatalogError):
    """The search index cannot be used (module missing, schema call failed)."""


class SearchFailedError(CatalogError):
    """An indexed listing query failed. There is no fallback to scanning."""


class ProductDecodeError(CatalogError):
    def __init__(self, key: str, reason: str = ""):
        msg = f"failed to decode product record {key}"
        super().__init__(f"{msg}: {reason}" if reason else msg)
        self.key = key


class ProductMarshalError(CatalogError):
    """A product could not be serialized to its record form."""


class SeedingError(CatalogError):
    """Seeding aborted; the catalog holds whatever was written before the failure."""


class VerificationError(CatalogError):
    """Post-seeding sanity checks did not pass."""
