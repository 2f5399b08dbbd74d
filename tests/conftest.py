"""Shared test fixtures: an in-memory orders API and order builders."""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from doorboard.client import ApiError
from doorboard.schema import Order, OrderStatus, Page


class FakeOrdersApi:
    """
    Stands in for OrdersApi. `orders` is the server truth; list() returns
    copies so view-model mutations never leak back into it.
    """

    def __init__(self, orders=None):
        self.orders = list(orders or [])
        self.calls = []
        self.fail_list = None      # ApiError raised by list()
        self.fail_write = None     # ApiError raised by update()/complete()
        self.on_write = None       # hook run when update()/complete() is called

    def list(self, filters=None):
        self.calls.append(("list", filters))
        if self.fail_list is not None:
            raise self.fail_list
        data = [dataclasses.replace(o) for o in self.orders]
        return Page(data=data, total=len(data), limit=len(data))

    def _set_status(self, order_id, status):
        for i, o in enumerate(self.orders):
            if o.id == order_id:
                self.orders[i] = dataclasses.replace(o, status=status)
                return self.orders[i]
        raise ApiError("Order not found", status=404)

    def update(self, order_id, data):
        self.calls.append(("update", order_id, data))
        if self.on_write is not None:
            self.on_write()
        if self.fail_write is not None:
            raise self.fail_write
        return self._set_status(order_id, OrderStatus(data["status"]))

    def complete(self, order_id):
        self.calls.append(("complete", order_id))
        if self.on_write is not None:
            self.on_write()
        if self.fail_write is not None:
            raise self.fail_write
        return self._set_status(order_id, OrderStatus.COMPLETED)

    def writes(self):
        return [c for c in self.calls if c[0] != "list"]


@pytest.fixture
def make_order():
    """Build an Order with sequential creation times."""
    base = datetime(2024, 10, 24, 8, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(order_id, status=OrderStatus.NEW, **kwargs):
        counter["n"] += 1
        kwargs.setdefault("order_number", f"ORD-{counter['n']:03d}")
        kwargs.setdefault("title", f"Door {order_id}")
        kwargs.setdefault("created_at", base + timedelta(minutes=counter["n"]))
        return Order(id=order_id, status=status, **kwargs)

    return _make


@pytest.fixture
def fake_api():
    return FakeOrdersApi()
