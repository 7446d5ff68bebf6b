"""
Background polling for server-side jobs.

Training jobs, pending-application counts and service health all change on
the server with no push channel to tell us. So we ask again on a timer, but
only while there is something worth asking about: once every job has reached
a terminal state the timer is cancelled.

Two shapes:
- `JobPoller` re-arms a `threading.Timer` every interval while its predicate
  holds. At most one timer is armed at any moment, and a tick that finds the
  previous fetch still running is skipped.
- `poll_until_terminal` is the blocking version for a caller that wants to
  wait on a single job.

There is no backoff. A failed fetch is reported once and the next tick runs
on the same cadence.
"""
from typing import Any, Callable, Iterable, Optional
import logging
import threading
import time

from psr_console.models import JobStatus, TERMINAL_JOB_STATUSES

logger = logging.getLogger(__name__)


def job_status(job) -> Optional[JobStatus]:
    raw = job.get("status") if isinstance(job, dict) else getattr(job, "status", None)
    if raw is None:
        return None
    try:
        return JobStatus(raw)
    except ValueError:
        return None


def is_terminal(job) -> bool:
    return job_status(job) in TERMINAL_JOB_STATUSES


def has_active_jobs(jobs: Optional[Iterable]) -> bool:
    """True when any job is still queued, initializing or running."""
    return any(
        job_status(job) is not None and not is_terminal(job)
        for job in jobs or []
    )


class JobPoller:
    def __init__(
        self,
        fetch_fn: Callable[[], Any],
        interval_seconds: float,
        is_active: Optional[Callable[[Any], bool]] = has_active_jobs,
        on_error: Optional[Callable[[BaseException], None]] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
        name: str = "job-poller",
    ):
        """
        Args:
            fetch_fn: Performs one refresh. If it returns a list, that list is
                fed back into `update()` so the poller stops by itself once
                every job is terminal.
            interval_seconds: Fixed delay between ticks.
            is_active: Predicate over the latest jobs. None means always on
                (health checks, pending counts).
            on_error: Receives any exception raised by `fetch_fn`.
            timer_factory: `threading.Timer` compatible factory.
        """
        self.fetch_fn = fetch_fn
        self.interval_seconds = interval_seconds
        self.is_active = is_active
        self.on_error = on_error
        self.timer_factory = timer_factory
        self.name = name

        self._lock = threading.Lock()
        self._fetch_guard = threading.Lock()
        self._timer = None
        self._generation = 0
        self._wanted = False
        self._stopped = False
        self.tick_count = 0
        self.skipped_ticks = 0

    @property
    def running(self) -> bool:
        with self._lock:
            return self._timer is not None

    @property
    def active(self) -> bool:
        """True while the poller means to keep ticking."""
        with self._lock:
            return self._wanted and not self._stopped

    @property
    def stopped(self) -> bool:
        with self._lock:
            return self._stopped

    def update(self, jobs) -> bool:
        """Re-evaluate the predicate and start or stop the timer to match."""
        wanted = True if self.is_active is None else bool(self.is_active(jobs))
        with self._lock:
            if self._stopped:
                return False
            self._wanted = wanted
            if wanted and self._timer is None:
                self._arm_locked()
                logger.info(f"{self.name}: polling every {self.interval_seconds}s")
            elif not wanted and self._timer is not None:
                self._cancel_locked()
                logger.info(f"{self.name}: nothing left to poll, timer cleared")
        return wanted

    def start(self):
        """Arm the timer regardless of the predicate."""
        with self._lock:
            self._stopped = False
            self._wanted = True
            if self._timer is None:
                self._arm_locked()

    def stop(self):
        """Cancel any armed timer; later ticks and updates are ignored."""
        with self._lock:
            self._stopped = True
            self._wanted = False
            self._cancel_locked()

    def resume(self):
        """Undo stop() without arming; the next update() decides."""
        with self._lock:
            self._stopped = False

    def _arm_locked(self):
        # callbacks from an older generation are stale
        self._generation += 1
        generation = self._generation
        timer = self.timer_factory(self.interval_seconds, lambda: self._tick(generation))
        if hasattr(timer, "daemon"):
            timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_locked(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self, generation: int):
        with self._lock:
            if generation != self._generation:
                logger.debug(f"{self.name}: stale timer fired, ignoring")
                return
            self._timer = None
            if self._stopped or not self._wanted:
                return

        jobs = None
        if self._fetch_guard.acquire(blocking=False):
            with self._lock:
                self.tick_count += 1
            try:
                jobs = self.fetch_fn()
            except Exception as e:
                logger.warning(f"{self.name}: refresh failed: {e}")
                if self.on_error:
                    self.on_error(e)
            finally:
                self._fetch_guard.release()
        else:
            with self._lock:
                self.skipped_ticks += 1
            logger.debug(f"{self.name}: previous refresh still in flight, skipping")

        if isinstance(jobs, list):
            self.update(jobs)

        # re-arm for the next tick unless update()/stop() turned us off
        with self._lock:
            if self._wanted and not self._stopped and self._timer is None:
                self._arm_locked()

    def refresh_now(self):
        """Run one fetch immediately, honouring the in-flight guard."""
        if not self._fetch_guard.acquire(blocking=False):
            with self._lock:
                self.skipped_ticks += 1
            return None
        try:
            jobs = self.fetch_fn()
        except Exception as e:
            logger.warning(f"{self.name}: refresh failed: {e}")
            if self.on_error:
                self.on_error(e)
            return None
        finally:
            self._fetch_guard.release()
        if isinstance(jobs, list):
            self.update(jobs)
        return jobs


def poll_until_terminal(
    fetch_fn: Callable[[], Any],
    is_done: Callable[[Any], bool],
    interval_seconds: float,
    max_attempts: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
    on_error: Optional[Callable[[BaseException], None]] = None,
    on_result: Optional[Callable[[Any], None]] = None,
):
    """
    Call `fetch_fn` every `interval_seconds` until `is_done(result)`.

    Returns the last successful result (None if every attempt failed).
    Errors are passed to `on_error` and polling carries on.
    """
    attempts = 0
    last = None
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        try:
            last = fetch_fn()
        except Exception as e:
            logger.warning(f"Poll attempt {attempts} failed: {e}")
            if on_error:
                on_error(e)
        else:
            if on_result:
                on_result(last)
            if is_done(last):
                return last
        if max_attempts is not None and attempts >= max_attempts:
            break
        sleep(interval_seconds)
    logger.info(f"Stopped polling after {attempts} attempts without a terminal result")
    return last
