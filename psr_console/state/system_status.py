"""
System status snapshot for the dashboard.

Health is refreshed on a fixed 30 second cadence by an always-on
`JobPoller`. A failed health call is not an error screen: the snapshot is
replaced by a degraded one that names the failure.
"""
from datetime import datetime
from typing import Optional
import logging
import threading

from psr_console.config import settings
from psr_console.models import DatabaseHealth, ServiceHealth, SystemHealth
from psr_console.services.api_client import APIError
from psr_console.services.job_poller import JobPoller
from psr_console.services.training_service import TrainingService

logger = logging.getLogger(__name__)

AI_SERVICES = {"weaviate": "Weaviate", "google_ai": "Google AI"}


def degraded_health(reason: str, overall_status: str = "degraded") -> SystemHealth:
    return SystemHealth(
        overall_status=overall_status,
        services={
            key: ServiceHealth(service=label, status="error", error=reason)
            for key, label in AI_SERVICES.items()
        },
    )


class SystemStatusMonitor:
    def __init__(
        self,
        training_service: TrainingService,
        interval_seconds: Optional[float] = None,
        timer_factory=threading.Timer,
    ):
        self.training_service = training_service
        self.ai_health: Optional[SystemHealth] = None
        self.database_health: Optional[DatabaseHealth] = None
        self.last_updated: Optional[datetime] = None
        self.error: Optional[str] = None
        self.poller = JobPoller(
            self.refresh,
            interval_seconds or settings.status_poll_interval_seconds,
            is_active=None,
            timer_factory=timer_factory,
            name="system-status",
        )

    def refresh(self):
        self.error = None
        try:
            self.ai_health = self.training_service.get_health()
        except APIError as e:
            status = "error" if e.status else "degraded"
            self.ai_health = degraded_health(e.message, status)
            self.error = e.message

        try:
            self.database_health = self.training_service.get_database_health()
        except APIError as e:
            self.database_health = DatabaseHealth(connected=False, error=e.message)
            self.error = self.error or e.message

        self.last_updated = datetime.now()
        if self.error:
            logger.warning(f"System status degraded: {self.error}")

    def start(self):
        self.refresh()
        self.poller.start()

    def stop(self):
        self.poller.stop()

    def ensure_running(self):
        """Start (with an immediate refresh) unless already polling."""
        if not self.poller.active:
            self.start()
