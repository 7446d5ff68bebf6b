"""
Review queue for pending engineer applications.

The pending count is refreshed on a fixed cadence by an always-on
`JobPoller` while an admin page is open, and every new count goes to
`on_count_change` (the sidebar badge).

Approve and reject take the application off the list before the request is
sent, then schedule a re-fetch so the server's list replaces ours. If the
action fails the error is reported and the re-fetch brings the row back.
"""
from typing import Callable, Optional
import logging
import threading

from psr_console.config import settings
from psr_console.models import PendingApplication
from psr_console.services.admin_service import AdminService
from psr_console.services.job_poller import JobPoller
from psr_console.services.notifications import (
    Notifier,
    handle_admin_action,
    handle_api_response,
)
from psr_console.services.optimistic import MutationKind, OptimisticListMutator

logger = logging.getLogger(__name__)


class PendingApplicationsQueue:
    def __init__(
        self,
        admin_service: AdminService,
        notifier: Notifier,
        refresh_delay_seconds: Optional[float] = None,
        count_interval_seconds: Optional[float] = None,
        on_count_change: Optional[Callable[[int], None]] = None,
        timer_factory=threading.Timer,
    ):
        self.admin_service = admin_service
        self.notifier = notifier
        self.on_count_change = on_count_change
        self.applications: list[PendingApplication] = []
        self.loaded = False
        self.mutator = OptimisticListMutator(
            self.refresh,
            delay_seconds=refresh_delay_seconds,
            on_count_change=on_count_change,
            on_error=notifier.report,
            timer_factory=timer_factory,
        )
        self.count_poller = JobPoller(
            self.refresh,
            count_interval_seconds or settings.status_poll_interval_seconds,
            is_active=None,
            timer_factory=timer_factory,
            name="pending-count",
        )

    @property
    def pending_count(self) -> int:
        return len(self.applications)

    def refresh(self) -> list[PendingApplication]:
        """Replace the local list with the server's. Raises on failure."""
        applications = self.admin_service.list_pending_engineers()
        self.applications = applications
        self.loaded = True
        if self.on_count_change:
            self.on_count_change(len(applications))
        return applications

    def load(self) -> Optional[list[PendingApplication]]:
        return handle_api_response(
            self.notifier, self.refresh,
            show_success=False, error_title="Could not load applications",
        )

    def find(self, application_id: int) -> Optional[PendingApplication]:
        return next((a for a in self.applications if a.id == application_id), None)

    def approve(self, application_id: int):
        self.applications = self.mutator.apply_local(
            self.applications, application_id, MutationKind.REMOVE
        )
        result = handle_admin_action(
            self.notifier,
            lambda: self.admin_service.approve_engineer(application_id),
            "Engineer application approval",
        )
        self.mutator.schedule_refresh()
        return result

    def reject(self, application_id: int, reason: Optional[str] = None):
        self.applications = self.mutator.apply_local(
            self.applications, application_id, MutationKind.REMOVE
        )
        result = handle_admin_action(
            self.notifier,
            lambda: self.admin_service.reject_engineer(application_id, reason),
            "Engineer application rejection",
        )
        self.mutator.schedule_refresh()
        return result

    def start_count_polling(self):
        if not self.loaded:
            self.load()
        if not self.count_poller.active:
            self.count_poller.start()

    def stop(self):
        self.count_poller.stop()

    def close(self):
        self.mutator.cancel()
        self.stop()
