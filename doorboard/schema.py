"""
Order and customer schema.

Order lifecycle (server-owned):
  New → In progress → Completed
  Paused / Cancelled are side states set outside the board.

The server speaks camelCase JSON; every model here converts with
to_dict() / from_dict() so the rest of the package only sees snake_case.
"""
import logging
from enum import Enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional, List, Dict, Any

logger = logging.getLogger(__name__)


class OrderStatus(Enum):
    """Server-side order status."""
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    # Anything this client does not recognise; never gets a board column
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_str(cls, value: str) -> "OrderStatus":
        try:
            return cls[value.upper()]
        except (KeyError, AttributeError):
            logger.warning(f"Unknown order status {value!r}")
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


class OrderPriority(Enum):
    """Order priority as set by the manager."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def from_str(cls, value: str) -> "OrderPriority":
        try:
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.MEDIUM

    @property
    def label(self) -> str:
        return PRIORITY_LABELS[self]


class CustomerStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLACKLISTED = "BLACKLISTED"

    @classmethod
    def from_str(cls, value: str) -> "CustomerStatus":
        try:
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.ACTIVE


STATUS_LABELS = {
    OrderStatus.NEW: "New",
    OrderStatus.IN_PROGRESS: "In progress",
    OrderStatus.PAUSED: "Paused",
    OrderStatus.COMPLETED: "Completed",
    OrderStatus.CANCELLED: "Cancelled",
    OrderStatus.UNKNOWN: "Unknown",
}

PRIORITY_LABELS = {
    OrderPriority.LOW: "Low",
    OrderPriority.MEDIUM: "Medium",
    OrderPriority.HIGH: "High",
    OrderPriority.URGENT: "Urgent",
}


# ── Parsing helpers ──────────────────────────────────────────────────────────

def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting the trailing 'Z' the API emits."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    # Accept both "2024-10-28" and full timestamps
    return date.fromisoformat(value[:10])


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


# ── References embedded in an order ──────────────────────────────────────────

@dataclass
class CustomerRef:
    """Customer summary embedded in an order payload."""
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "phone": self.phone}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["CustomerRef"]:
        if not data:
            return None
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", "") or "",
            email=data.get("email", "") or "",
            phone=data.get("phone", "") or "",
        )


@dataclass
class ManagerRef:
    """Manager summary embedded in an order payload."""
    id: str
    name: str = ""
    email: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ManagerRef"]:
        if not data:
            return None
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", "") or "",
            email=data.get("email", "") or "",
        )


# ── Order ────────────────────────────────────────────────────────────────────

@dataclass
class Order:
    """A production order as returned by the orders API."""

    # Identifiers
    id: str
    order_number: str
    title: str

    # State
    status: OrderStatus = OrderStatus.NEW
    priority: OrderPriority = OrderPriority.MEDIUM

    # Links
    customer_id: Optional[str] = None
    customer: Optional[CustomerRef] = None
    manager_id: Optional[str] = None
    manager: Optional[ManagerRef] = None

    # Scheduling
    estimated_completion_date: Optional[date] = None
    actual_completion_date: Optional[date] = None

    # Details
    description: str = ""
    total_amount: Optional[float] = None
    notes: str = ""

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @property
    def customer_name(self) -> str:
        return self.customer.name if self.customer else ""

    @property
    def manager_name(self) -> str:
        return self.manager.name if self.manager else ""

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """True if the estimated date has passed and the order is still open."""
        if self.estimated_completion_date is None:
            return False
        if self.status in (OrderStatus.COMPLETED, OrderStatus.CANCELLED):
            return False
        today = today or date.today()
        return self.estimated_completion_date < today

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the API's camelCase shape."""
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "customerId": self.customer_id,
            "customer": self.customer.to_dict() if self.customer else None,
            "managerId": self.manager_id,
            "manager": self.manager.to_dict() if self.manager else None,
            "estimatedCompletionDate": _iso(self.estimated_completion_date),
            "actualCompletionDate": _iso(self.actual_completion_date),
            "totalAmount": self.total_amount,
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        """Deserialize an API payload. Unrecognised statuses become UNKNOWN, priorities MEDIUM."""
        customer = CustomerRef.from_dict(data.get("customer"))
        manager = ManagerRef.from_dict(data.get("manager"))
        total = data.get("totalAmount")
        return cls(
            id=str(data.get("id", "")),
            order_number=str(data.get("orderNumber", "") or ""),
            title=data.get("title", "") or "",
            description=data.get("description", "") or "",
            status=OrderStatus.from_str(data.get("status", "NEW")),
            priority=OrderPriority.from_str(data.get("priority", "MEDIUM")),
            customer_id=data.get("customerId") or (customer.id if customer else None),
            customer=customer,
            manager_id=data.get("managerId") or (manager.id if manager else None),
            manager=manager,
            estimated_completion_date=parse_date(data.get("estimatedCompletionDate")),
            actual_completion_date=parse_date(data.get("actualCompletionDate")),
            total_amount=float(total) if total is not None else None,
            notes=data.get("notes", "") or "",
            created_at=parse_datetime(data.get("createdAt")) or datetime.now(timezone.utc),
            updated_at=parse_datetime(data.get("updatedAt")),
        )


# ── Customer ─────────────────────────────────────────────────────────────────

@dataclass
class Customer:
    """Customer master record."""
    id: str
    name: str
    email: str
    phone: str = ""
    status: CustomerStatus = CustomerStatus.ACTIVE
    contact_person: str = ""
    address: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "status": self.status.value,
            "contactPerson": self.contact_person,
            "address": self.address,
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Customer":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", "") or "",
            email=data.get("email", "") or "",
            phone=data.get("phone", "") or "",
            status=CustomerStatus.from_str(data.get("status", "ACTIVE")),
            contact_person=data.get("contactPerson", "") or "",
            address=data.get("address", "") or "",
            notes=data.get("notes", "") or "",
            created_at=parse_datetime(data.get("createdAt")) or datetime.now(timezone.utc),
            updated_at=parse_datetime(data.get("updatedAt")),
        )


# ── Aggregates ───────────────────────────────────────────────────────────────

@dataclass
class OrderStatistics:
    """Counters from GET /orders/statistics."""
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    by_priority: Dict[str, int] = field(default_factory=dict)
    overdue_count: int = 0
    recently_created: int = 0
    recently_completed: int = 0

    def count(self, status: OrderStatus) -> int:
        return int(self.by_status.get(status.value, 0))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderStatistics":
        return cls(
            total=int(data.get("total", 0) or 0),
            by_status=dict(data.get("byStatus") or {}),
            by_priority=dict(data.get("byPriority") or {}),
            overdue_count=int(data.get("overdueCount", 0) or 0),
            recently_created=int(data.get("recentlyCreated", 0) or 0),
            recently_completed=int(data.get("recentlyCompleted", 0) or 0),
        )


@dataclass
class Page:
    """One page of a paginated list response."""
    data: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 0
    total_pages: int = 1

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], item_factory) -> "Page":
        """
        Decode a list response. A row that cannot be decoded (bad timestamp,
        not an object, ...) is logged and left out; the rest of the page stands.
        """
        items = []
        for row in payload.get("data") or []:
            try:
                items.append(item_factory(row))
            except (ValueError, TypeError, AttributeError, KeyError) as e:
                row_id = row.get("id") if isinstance(row, dict) else None
                logger.warning(f"Skipping malformed row id={row_id!r}: {e}")
        return cls(
            data=items,
            total=int(payload.get("total", len(items)) or 0),
            page=int(payload.get("page", 1) or 1),
            limit=int(payload.get("limit", len(items)) or 0),
            total_pages=int(payload.get("totalPages", 1) or 1),
        )


@dataclass
class User:
    """Authenticated user profile."""
    id: str
    email: str
    name: str = ""
    role: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email", "") or "",
            name=data.get("name", "") or "",
            role=data.get("role", "") or "",
        )
