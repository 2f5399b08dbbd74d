"""
Board stages and the order partitioner.

Only NEW, IN_PROGRESS and COMPLETED get a column; paused and cancelled
orders are left off the board until they come back to a tracked status.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .schema import Order, OrderStatus


@dataclass(frozen=True)
class StageDefinition:
    """Static column description."""
    status: OrderStatus
    name: str
    color: str


STAGE_DEFINITIONS = (
    StageDefinition(OrderStatus.NEW, "New", "blue"),
    StageDefinition(OrderStatus.IN_PROGRESS, "In progress", "yellow"),
    StageDefinition(OrderStatus.COMPLETED, "Completed", "green"),
)

TRACKED_STATUSES = tuple(d.status for d in STAGE_DEFINITIONS)


@dataclass
class Stage:
    """One board column and the orders currently believed to be in it."""
    status: OrderStatus
    name: str
    color: str
    orders: List[Order] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.orders)

    def index_of(self, order_id: str) -> int:
        """Position of order_id in this column, or -1."""
        for i, order in enumerate(self.orders):
            if order.id == order_id:
                return i
        return -1

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "name": self.name,
            "color": self.color,
            "count": len(self.orders),
            "orders": [o.to_dict() for o in self.orders],
        }


def partition_orders(orders: Iterable[Order]) -> Dict[OrderStatus, List[Order]]:
    """Group orders by tracked status, keeping the input order within each group."""
    buckets: Dict[OrderStatus, List[Order]] = {status: [] for status in TRACKED_STATUSES}
    for order in orders:
        bucket = buckets.get(order.status)
        if bucket is not None:
            bucket.append(order)
    return buckets


def build_stages(orders: Iterable[Order]) -> List[Stage]:
    """Partition orders and wrap the buckets in the static column definitions."""
    buckets = partition_orders(orders)
    return [
        Stage(status=d.status, name=d.name, color=d.color, orders=buckets[d.status])
        for d in STAGE_DEFINITIONS
    ]
