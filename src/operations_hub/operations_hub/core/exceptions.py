class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when the requested document does not exist."""


class DuplicateKeyError(DomainError):
    """Raised when a write collides with a unique key already in the store."""


class AssetStoreError(DomainError):
    """Raised by an asset store that cannot accept an upload."""
