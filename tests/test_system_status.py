from psr_console.models import DatabaseHealth, ServiceHealth, SystemHealth
from psr_console.services.api_client import APIError, ErrorCategory
from psr_console.state import SystemStatusMonitor


class FakeHealthService:
    def __init__(self):
        self.offline = False
        self.calls = 0

    def get_health(self):
        self.calls += 1
        if self.offline:
            raise APIError("Network error occurred. Please check your connection.", 0,
                           ErrorCategory.NETWORK)
        return SystemHealth(
            overall_status="healthy",
            services={"weaviate": ServiceHealth(service="Weaviate", connected=True)},
        )

    def get_database_health(self):
        if self.offline:
            raise APIError("Database unreachable", 503, ErrorCategory.SERVER)
        return DatabaseHealth(connected=True, version="15")


def test_refresh_healthy():
    monitor = SystemStatusMonitor(FakeHealthService(), interval_seconds=30)

    monitor.refresh()

    assert monitor.error is None
    assert monitor.ai_health.overall_status == "healthy"
    assert monitor.database_health.status == "healthy"
    assert monitor.last_updated is not None


def test_refresh_degrades_instead_of_raising():
    service = FakeHealthService()
    service.offline = True
    monitor = SystemStatusMonitor(service, interval_seconds=30)

    monitor.refresh()

    assert monitor.ai_health.overall_status == "degraded"
    assert all(s.status == "error" for s in monitor.ai_health.services.values())
    assert not monitor.database_health.connected
    assert monitor.database_health.error == "Database unreachable"
    assert monitor.error.startswith("Network error")


def test_start_refreshes_and_keeps_polling(timers):
    service = FakeHealthService()
    monitor = SystemStatusMonitor(service, interval_seconds=30, timer_factory=timers)

    monitor.start()
    timers.fire()
    timers.fire()

    assert service.calls == 3
    assert timers.armed[0].interval == 30

    monitor.stop()
    assert timers.armed == []


def test_manual_refresh_shares_the_in_flight_guard(timers):
    service = FakeHealthService()
    monitor = SystemStatusMonitor(service, interval_seconds=30, timer_factory=timers)
    monitor.ensure_running()

    monitor.poller._fetch_guard.acquire()
    try:
        monitor.poller.refresh_now()
    finally:
        monitor.poller._fetch_guard.release()
    assert service.calls == 1
    assert monitor.poller.skipped_ticks == 1

    monitor.poller.refresh_now()
    assert service.calls == 2
    assert len(timers.armed) == 1
