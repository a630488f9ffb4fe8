"""Domain-specific exceptions for milk collection services."""


class MilkServiceError(Exception):
    """Base exception for milk collection services."""
    pass


class InvalidCollectionError(MilkServiceError):
    """Raised when collection measurements are out of range."""
    pass
