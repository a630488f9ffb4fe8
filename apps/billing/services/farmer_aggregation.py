"""
Per-farmer aggregation of selected collections.

Pure computation over already-loaded records: no queries, no clock.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List
from uuid import UUID

from apps.milk.models import MilkCollection


@dataclass
class FarmerAggregate:
    """Liters and contributing collection ids for one farmer."""

    farmer: object
    total_quantity: Decimal = Decimal('0')
    collection_ids: List[UUID] = field(default_factory=list)

    @property
    def collections_count(self) -> int:
        return len(self.collection_ids)


def aggregate_by_farmer(records: Iterable[MilkCollection]) -> Dict[UUID, FarmerAggregate]:
    """
    Group collections by farmer and sum their quantities.

    The mapping preserves the order in which farmers first appear in
    ``records``. A record id seen twice is only counted once.

    Args:
        records: Milk collections, typically from ``select_unbilled``

    Returns:
        Dict of farmer id to FarmerAggregate; empty for empty input
    """
    aggregates: Dict[UUID, FarmerAggregate] = {}
    seen = set()

    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)

        aggregate = aggregates.get(record.farmer_id)
        if aggregate is None:
            aggregate = FarmerAggregate(farmer=record.farmer)
            aggregates[record.farmer_id] = aggregate

        aggregate.total_quantity += record.quantity
        aggregate.collection_ids.append(record.id)

    return aggregates
