"""
Background poller ownership.

Streamlit has no hook for "the user left this page", so every page render
stops the pollers that belong to other pages. A page restarts its own
poller when it renders again.
"""
from typing import Iterable, MutableMapping, Optional
import logging

from psr_console.security.session import (
    VIEW_ADMINS,
    VIEW_APPLICATIONS,
    VIEW_DASHBOARD,
    VIEW_TRAINING,
    VIEW_USERS,
    VIEW_VECTOR_DB,
)

logger = logging.getLogger(__name__)

# session_state key -> views that keep that object's pollers running
POLLER_OWNERS: dict[str, tuple[str, ...]] = {
    "status_monitor": (VIEW_DASHBOARD,),
    "training_workspace": (VIEW_TRAINING,),
    "applications_queue": (
        VIEW_DASHBOARD, VIEW_APPLICATIONS, VIEW_USERS,
        VIEW_ADMINS, VIEW_TRAINING, VIEW_VECTOR_DB,
    ),
}


def stop_background_pollers(
    state: MutableMapping,
    current_view: Optional[str],
    owners: Optional[dict[str, Iterable[str]]] = None,
) -> list[str]:
    """Stop every poller not owned by `current_view`; returns the keys stopped."""
    stopped = []
    for key, views in (owners or POLLER_OWNERS).items():
        if current_view in views:
            continue
        holder = state.get(key)
        if holder is None:
            continue
        holder.stop()
        stopped.append(key)
    if stopped:
        logger.debug(f"Stopped background pollers for {stopped} (view={current_view})")
    return stopped
