"""
Collection intake service.

Records a farmer's milk delivery. Billing later consumes these records;
nothing here touches the billed flag.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.services import get_farmer
from apps.milk.models import MilkCollection, DEFAULT_SNF

from .exceptions import InvalidCollectionError

logger = logging.getLogger(__name__)

MAX_FAT_PERCENTAGE = Decimal('10')
MAX_SNF = Decimal('15')


def validate_measurements(
    *,
    quantity: Decimal,
    fat_percentage: Decimal,
    snf: Optional[Decimal] = None
) -> None:
    """
    Check collection measurements against the accepted ranges.

    Raises:
        InvalidCollectionError: With a message naming the offending value.
    """
    if quantity is None or quantity <= 0:
        raise InvalidCollectionError("Quantity must be a positive number")
    if fat_percentage is None or not (0 <= fat_percentage <= MAX_FAT_PERCENTAGE):
        raise InvalidCollectionError("Fat percentage must be a number between 0 and 10")
    if snf is not None and not (0 <= snf <= MAX_SNF):
        raise InvalidCollectionError("SNF must be a number between 0 and 15")


@transaction.atomic
def record_collection(
    *,
    farmer_id: UUID,
    quantity: Decimal,
    fat_percentage: Decimal,
    snf: Optional[Decimal] = None
) -> MilkCollection:
    """
    Record a new, unbilled milk collection for a farmer.

    Args:
        farmer_id: UUID of the delivering farmer
        quantity: Liters delivered, must be positive
        fat_percentage: Fat content, 0-10
        snf: Solids-not-fat content, 0-15; defaults to 8.5 when omitted

    Returns:
        Created MilkCollection instance

    Raises:
        InvalidCollectionError: If a measurement is out of range
        FarmerNotFoundError: If the farmer does not exist
    """
    validate_measurements(quantity=quantity, fat_percentage=fat_percentage, snf=snf)
    farmer = get_farmer(farmer_id=farmer_id)

    collection = MilkCollection.objects.create(
        farmer=farmer,
        quantity=quantity,
        fat_percentage=fat_percentage,
        snf=DEFAULT_SNF if snf is None else snf,
    )
    logger.info(
        "Recorded collection %s: %s L from farmer %s",
        collection.id, collection.quantity, farmer.id
    )
    return collection
