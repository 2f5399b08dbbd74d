"""
Dashboard widgets and list pages: statistics cards, recent orders,
the filtered orders list and the customers list.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .client import ApiError, CustomersApi, OrdersApi
from .schema import Customer, CustomerStatus, Order, OrderPriority, OrderStatistics, OrderStatus

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 50


@dataclass
class StatCard:
    title: str
    value: int
    color: str


def build_stat_cards(stats: OrderStatistics) -> List[StatCard]:
    """The four counters shown above the board."""
    return [
        StatCard("All orders", stats.total, "blue"),
        StatCard("In progress", stats.count(OrderStatus.IN_PROGRESS), "yellow"),
        StatCard("Completed", stats.count(OrderStatus.COMPLETED), "green"),
        StatCard("Overdue", stats.overdue_count, "red"),
    ]


async def recent_orders(orders_api: OrdersApi, limit: int = 5) -> List[Order]:
    """Newest orders first. Errors propagate to the caller."""
    page = await asyncio.to_thread(
        orders_api.list, {"limit": limit, "sortBy": "createdAt", "sortOrder": "DESC"}
    )
    return page.data[:limit]


class _ListPage:
    """Shared loading / error bookkeeping for the list screens."""

    noun = "items"

    def __init__(self, page_size: int = LIST_PAGE_SIZE):
        self.page_size = page_size
        self.items: List[Any] = []
        self.loading = False
        self.error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.loading and self.error is None and not self.items

    def filters(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _list(self, filters: Dict[str, Any]):
        raise NotImplementedError

    async def fetch(self) -> bool:
        self.loading = True
        self.error = None
        try:
            page = await asyncio.to_thread(self._list, self.filters())
        except ApiError as e:
            self.error = e.message or f"Failed to load {self.noun}"
            logger.error(f"Loading {self.noun} failed: {self.error}")
            return False
        finally:
            self.loading = False
        self.items = page.data
        return True


class OrdersPage(_ListPage):
    """Orders table with search, status and priority filters."""

    noun = "orders"

    def __init__(self, orders_api: OrdersApi, page_size: int = LIST_PAGE_SIZE):
        super().__init__(page_size)
        self.orders_api = orders_api
        self.search = ""
        self.status: Optional[OrderStatus] = None
        self.priority: Optional[OrderPriority] = None

    @property
    def orders(self) -> List[Order]:
        return self.items

    def filters(self) -> Dict[str, Any]:
        filters: Dict[str, Any] = {
            "limit": self.page_size,
            "sortBy": "createdAt",
            "sortOrder": "DESC",
        }
        if self.search.strip():
            filters["search"] = self.search.strip()
        if self.status is not None:
            filters["status"] = self.status.value
        if self.priority is not None:
            filters["priority"] = self.priority.value
        return filters

    def _list(self, filters):
        return self.orders_api.list(filters)


class CustomersPage(_ListPage):
    """Customers table with search and status filters."""

    noun = "customers"

    def __init__(self, customers_api: CustomersApi, page_size: int = LIST_PAGE_SIZE):
        super().__init__(page_size)
        self.customers_api = customers_api
        self.search = ""
        self.status: Optional[CustomerStatus] = None

    @property
    def customers(self) -> List[Customer]:
        return self.items

    def filters(self) -> Dict[str, Any]:
        filters: Dict[str, Any] = {
            "limit": self.page_size,
            "sortBy": "createdAt",
            "sortOrder": "DESC",
        }
        if self.search.strip():
            filters["search"] = self.search.strip()
        if self.status is not None:
            filters["status"] = self.status.value
        return filters

    def _list(self, filters):
        return self.customers_api.list(filters)
