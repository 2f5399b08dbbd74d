"""
Kanban board view model.

Holds the three stage columns, applies drag-and-drop moves optimistically
and reconciles with the server by reloading the whole board afterwards.

Server calls per cross-stage move:
  * → COMPLETED            complete(order_id)
  NEW → IN_PROGRESS        update(order_id, {status: IN_PROGRESS})
  IN_PROGRESS/COMPLETED → NEW   update(order_id, {status: NEW})
  COMPLETED → IN_PROGRESS  rejected locally, nothing is sent

Presentation code reads `stages`, `loading`, `refreshing`, `error` and
subscribes to "changed", "error" and "notification" events.
"""
import asyncio
import dataclasses
import logging
from typing import Callable, Dict, List, Optional, Tuple

from .client import ApiError, OrdersApi
from .schema import Order, OrderStatus
from .stages import Stage, build_stages

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100

# Kinds of server call a cross-stage move can map to
COMPLETE = "complete"
UPDATE = "update"


def transition_call(from_status: OrderStatus, to_status: OrderStatus) -> Optional[str]:
    """Which server call a cross-stage move needs, or None if it is not supported."""
    if from_status == to_status:
        return None
    if to_status == OrderStatus.COMPLETED:
        return COMPLETE
    if to_status == OrderStatus.IN_PROGRESS and from_status == OrderStatus.NEW:
        return UPDATE
    if to_status == OrderStatus.NEW:
        return UPDATE
    return None


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class BoardViewModel:
    """Stage lists plus the move / reload logic behind the kanban board."""

    def __init__(
        self,
        orders_api: OrdersApi,
        page_size: int = DEFAULT_PAGE_SIZE,
        notify: Optional[Callable] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ):
        self.orders_api = orders_api
        self.page_size = page_size
        self.stages: List[Stage] = build_stages([])
        self.loading = False
        self.refreshing = False
        self.loaded = False
        self.error: Optional[str] = None
        self.subscribers: Dict[str, list] = {}  # event_type -> list of callbacks
        self._navigate = navigate
        if notify is not None:
            self.subscribe("notification", notify)

    # ── Events ───────────────────────────────────────────────────────────

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        self.subscribers.setdefault(event_type, []).append(callback)

    def _emit(self, event_type: str, **kwargs) -> None:
        for callback in self.subscribers.get(event_type, []):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception(f"Error in {event_type} callback")

    def _notify(self, level: str, message: str) -> None:
        self._emit("notification", level=level, message=message)

    # ── Snapshot ─────────────────────────────────────────────────────────

    def stage(self, status: OrderStatus) -> Stage:
        for stage in self.stages:
            if stage.status == status:
                return stage
        raise KeyError(f"No board column for status {status.value}")

    def find(self, order_id: str) -> Optional[Tuple[Stage, int]]:
        """Locate an order on the board as (stage, index)."""
        for stage in self.stages:
            index = stage.index_of(order_id)
            if index >= 0:
                return stage, index
        return None

    def snapshot(self) -> dict:
        return {
            "stages": [s.to_dict() for s in self.stages],
            "loading": self.loading,
            "refreshing": self.refreshing,
            "error": self.error,
        }

    def open_order(self, order_id: str) -> None:
        """Click-through from a card; routing is up to the injected callback."""
        if self._navigate is None:
            logger.debug(f"No navigation handler for order {order_id}")
            return
        self._navigate(order_id)

    # ── Loading ──────────────────────────────────────────────────────────

    async def load(self) -> bool:
        """
        Fetch all orders and rebuild every column.

        Returns False on failure; the previous columns are then left as they were.
        """
        if self.loaded:
            self.refreshing = True
        else:
            self.loading = True
        self._emit("changed")

        filters = {"limit": self.page_size, "sortBy": "createdAt", "sortOrder": "DESC"}
        failure = None
        try:
            page = await asyncio.to_thread(self.orders_api.list, filters)
        except ApiError as e:
            failure = e
        finally:
            self.loading = False
            self.refreshing = False

        if failure is not None:
            self.error = failure.message or "Failed to load orders"
            logger.error(f"Board load failed: {self.error} (status={failure.status})")
            self._notify("error", f"Could not load orders: {self.error}")
            self._emit("error", error=failure)
            self._emit("changed")
            return False

        self.stages = build_stages(page.data)
        self.loaded = True
        self.error = None
        logger.debug(
            "Board loaded: " + ", ".join(f"{s.status.value}={len(s)}" for s in self.stages)
        )
        self._emit("changed")
        return True

    async def refresh(self) -> bool:
        return await self.load()

    # ── Moves ────────────────────────────────────────────────────────────

    async def move(
        self,
        order_id: str,
        from_status: OrderStatus,
        to_status: OrderStatus,
        target_index: int,
    ) -> bool:
        """
        Apply a drag-and-drop move.

        Same-column moves only reorder locally. Cross-column moves are applied
        locally first, then sent to the server, then the board is reloaded
        whether the call succeeded or not.

        Returns True if the move was accepted (locally and, for cross-column
        moves, by the server).
        """
        source = self.stage(from_status)
        dest = self.stage(to_status)
        index = source.index_of(order_id)
        if index < 0:
            logger.warning(f"Order {order_id} is not in column {from_status.value}")
            return False

        if source is dest:
            return self._reorder(source, index, target_index)

        call = transition_call(from_status, to_status)
        if call is None:
            message = f"Cannot move an order from {from_status.label} to {to_status.label}"
            logger.warning(f"{message} (order {order_id})")
            self._notify("warning", message)
            return False

        order = source.orders.pop(index)
        moved = dataclasses.replace(order, status=to_status)
        dest.orders.insert(_clamp(target_index, 0, len(dest.orders)), moved)
        self._emit("changed")

        try:
            if call == COMPLETE:
                await asyncio.to_thread(self.orders_api.complete, order_id)
            else:
                await asyncio.to_thread(self.orders_api.update, order_id, {"status": to_status.value})
        except ApiError as e:
            logger.error(
                f"Move of order {order_id} {from_status.value} → {to_status.value} "
                f"failed: {e.message} (status={e.status})"
            )
            self._notify("error", f"Could not update order {order.order_number or order_id}: {e.message}")
            self._emit("error", error=e)
            await self.load()
            return False

        logger.info(f"Order {order_id} moved {from_status.value} → {to_status.value}")
        await self.load()
        return True

    def _reorder(self, stage: Stage, index: int, target_index: int) -> bool:
        target = _clamp(target_index, 0, len(stage.orders) - 1)
        if target == index:
            return False
        order = stage.orders.pop(index)
        stage.orders.insert(target, order)
        self._emit("changed")
        return True
