"""
Optimistic list updates.

When an admin approves, rejects or deletes something, the row should go
away now, not after the round trip. The list is changed locally first, then
a real re-fetch is scheduled a moment later so the server gets the final
word. The locally computed list is never sent anywhere.

If that re-fetch fails, the optimistic list stays on screen until the next
refresh. Nothing is rolled back.
"""
from enum import Enum
from typing import Any, Callable, Optional, Sequence
import logging
import threading

from psr_console.config import settings

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    REMOVE = "remove"
    UPDATE_STATUS = "update_status"


def _item_id(item, key: str):
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def _with_status(item, status):
    if isinstance(item, dict):
        return {**item, "status": status}
    if hasattr(item, "model_copy"):
        return item.model_copy(update={"status": status})
    raise TypeError(f"Cannot update status on {type(item).__name__}")


def _same_id(a, b) -> bool:
    return a == b or (a is not None and b is not None and str(a) == str(b))


def apply_optimistic_list_update(
    items: Sequence,
    target_id: Any,
    kind: MutationKind,
    status: Any = None,
    key: str = "id",
) -> list:
    """Return the list as it will look once the action succeeds."""
    kind = MutationKind(kind)
    if kind == MutationKind.REMOVE:
        return [item for item in items if not _same_id(_item_id(item, key), target_id)]

    if status is None:
        raise ValueError("update_status needs a status")
    return [
        _with_status(item, status) if _same_id(_item_id(item, key), target_id) else item
        for item in items
    ]


class OptimisticListMutator:
    def __init__(
        self,
        refresh_fn: Callable[[], Any],
        delay_seconds: Optional[float] = None,
        on_count_change: Optional[Callable[[int], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.refresh_fn = refresh_fn
        self.delay_seconds = (
            settings.optimistic_refresh_delay_seconds
            if delay_seconds is None else delay_seconds
        )
        self.on_count_change = on_count_change
        self.on_error = on_error
        self.timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0

    @property
    def refresh_pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def apply_local(self, items: Sequence, target_id: Any, kind: MutationKind,
                    status: Any = None, key: str = "id") -> list:
        """Compute the new list and report its length; no refresh is scheduled."""
        updated = apply_optimistic_list_update(items, target_id, kind, status, key)
        if self.on_count_change:
            self.on_count_change(len(updated))
        return updated

    def apply(self, items: Sequence, target_id: Any, kind: MutationKind,
              status: Any = None, key: str = "id") -> list:
        updated = self.apply_local(items, target_id, kind, status, key)
        self.schedule_refresh()
        return updated

    def schedule_refresh(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            timer = self.timer_factory(self.delay_seconds, lambda: self._run_refresh(generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self):
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _run_refresh(self, generation: int):
        with self._lock:
            # superseded by a later schedule_refresh() or cancel()
            if generation != self._generation:
                return
            self._timer = None
        try:
            self.refresh_fn()
        except Exception as e:
            logger.warning(f"Refresh after optimistic update failed: {e}")
            if self.on_error:
                self.on_error(e)
