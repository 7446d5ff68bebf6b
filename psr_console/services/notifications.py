"""
Transient notifications (the console's toasts).

Every user action that touches the backend goes through
`handle_api_response`: it runs the call, queues a success or error
notification, and hands back the result, or None when the call failed. A
failed action never raises into the page that triggered it; the worst case
is stale data plus a visible message.

Pages drain the queue with `Notifier.drain()` and render each entry with
`st.toast` / `st.error`.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TypeVar
import logging
import threading

from psr_console.services.api_client import APIError, ErrorCategory

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
DEFAULT_SUCCESS_MESSAGE = "Operation completed successfully"

# Messages that replace whatever the server said for these categories
CATEGORY_MESSAGES = {
    ErrorCategory.AUTHENTICATION: "Your session has expired. Please log in again.",
    ErrorCategory.PERMISSION: "You do not have permission to perform this action.",
}


class Level(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Notification:
    level: Level
    message: str
    title: Optional[str] = None
    category: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


class Notifier:
    """Thread-safe queue; pollers push from timer threads, pages drain it."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: list[Notification] = []

    def push(self, level: Level, message: str, title: Optional[str] = None,
             category: Optional[str] = None) -> Notification:
        note = Notification(level, message, title, category)
        with self._lock:
            self._items.append(note)
        return note

    def success(self, message: str, title: Optional[str] = "Success"):
        return self.push(Level.SUCCESS, message, title)

    def error(self, message: str, title: Optional[str] = "Error",
              category: Optional[str] = None):
        return self.push(Level.ERROR, message, title, category)

    def warning(self, message: str, title: Optional[str] = "Warning"):
        return self.push(Level.WARNING, message, title)

    def info(self, message: str, title: Optional[str] = None):
        return self.push(Level.INFO, message, title)

    def report(self, exc: BaseException, title: Optional[str] = "Error"):
        """Queue an error notification for an exception."""
        message, category = describe_error(exc)
        return self.error(message, title, category)

    def drain(self) -> list[Notification]:
        with self._lock:
            items, self._items = self._items, []
        return items

    def peek(self) -> list[Notification]:
        with self._lock:
            return list(self._items)


def describe_error(exc: BaseException) -> tuple[str, str]:
    """Human-readable message and category for any failure."""
    if isinstance(exc, APIError):
        message = CATEGORY_MESSAGES.get(exc.category) or exc.message
        return message or GENERIC_ERROR_MESSAGE, exc.category.value
    text = str(exc).strip()
    return text or GENERIC_ERROR_MESSAGE, "unexpected"


def default_success_message(result: Any) -> str:
    if isinstance(result, dict):
        for key in ("message", "detail", "success"):
            if isinstance(result.get(key), str) and result[key]:
                return result[key]
    message = getattr(result, "message", None)
    if isinstance(message, str) and message:
        return message
    return DEFAULT_SUCCESS_MESSAGE


def handle_api_response(
    notifier: Notifier,
    api_call: Callable[[], T],
    success_message: Optional[str] = None,
    success_title: str = "Success",
    error_title: str = "Error",
    show_success: bool = True,
    show_error: bool = True,
    on_success: Optional[Callable[[T], None]] = None,
    on_error: Optional[Callable[[BaseException], None]] = None,
) -> Optional[T]:
    try:
        result = api_call()
    except Exception as e:
        logger.error(f"{error_title}: {e!r}")
        if show_error:
            notifier.report(e, error_title)
        if on_error:
            on_error(e)
        return None

    if show_success:
        notifier.success(success_message or default_success_message(result), success_title)
    if on_success:
        on_success(result)
    return result


def handle_admin_action(notifier: Notifier, api_call: Callable[[], T], action: str) -> Optional[T]:
    return handle_api_response(
        notifier,
        api_call,
        success_message=f"{action} completed successfully",
        success_title="Action Completed",
        error_title="Action Failed",
    )
