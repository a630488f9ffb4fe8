"""
Milk app services layer.

Collection intake validates measurements and farmer identity before
writing; listing helpers are read-only.
"""

from .exceptions import (
    MilkServiceError,
    InvalidCollectionError,
)
from .collection_intake import (
    record_collection,
    validate_measurements,
)
from .collection_queries import (
    summarize_collections,
)

__all__ = [
    # Exceptions
    'MilkServiceError',
    'InvalidCollectionError',

    # Intake
    'record_collection',
    'validate_measurements',

    # Queries
    'summarize_collections',
]
