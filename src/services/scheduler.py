"""
Outer control loop: picks the fetch window, runs a cycle and sleeps adaptively.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from config import settings
from schemas import CycleResult
from services.cycle_runner import CycleRunner
from services.history import HistoryAggregator
from utils.adaptive_polling import AdaptivePollingManager, polling_state

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Scheduler:
    """Runs ingestion cycles forever until stopped."""

    def __init__(self, runner: CycleRunner, history: HistoryAggregator,
                 polling_manager: Optional[AdaptivePollingManager] = None,
                 full_fetch_interval: Optional[int] = None,
                 full_fetch_radius: Optional[int] = None,
                 partial_fetch_radius: Optional[int] = None,
                 error_backoff: Optional[int] = None,
                 reset_history_every_cycle: Optional[bool] = None,
                 clock: Callable[[], datetime] = _utcnow):
        self.runner = runner
        self.history = history
        self.polling_manager = polling_manager or AdaptivePollingManager()
        self.full_fetch_interval = timedelta(seconds=(
            full_fetch_interval if full_fetch_interval is not None else settings.full_fetch_interval
        ))
        self.full_fetch_radius = (
            full_fetch_radius if full_fetch_radius is not None else settings.full_fetch_radius_days
        )
        self.partial_fetch_radius = (
            partial_fetch_radius if partial_fetch_radius is not None else settings.partial_fetch_radius_days
        )
        self.error_backoff = error_backoff if error_backoff is not None else settings.error_backoff_interval
        self.reset_history_every_cycle = (
            reset_history_every_cycle if reset_history_every_cycle is not None
            else settings.reset_history_every_cycle
        )
        self.clock = clock

        self.last_full_fetch_at: Optional[datetime] = None
        self.last_result: Optional[CycleResult] = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return not self._stop_event.is_set()

    def is_full_fetch_due(self, now: datetime) -> bool:
        return self.last_full_fetch_at is None or now - self.last_full_fetch_at > self.full_fetch_interval

    def run_cycle(self, now: Optional[datetime] = None, force_full: bool = False) -> CycleResult:
        """
        Run one cycle, applying the history reset policy first.

        History is cleared before every cycle when ``reset_history_every_cycle``
        is set, otherwise only before full fetches.
        """
        if now is None:
            now = self.clock()

        is_full = force_full or self.is_full_fetch_due(now)
        radius = self.full_fetch_radius if is_full else self.partial_fetch_radius

        logger.info(f"Cycle start ({'full' if is_full else 'partial'} fetch, radius {radius} days)")

        if self.reset_history_every_cycle or is_full:
            logger.info("Clearing history cache for rebuild")
            self.history.clear()

        result = self.runner.run(radius, now)

        if is_full:
            self.last_full_fetch_at = now
        self.last_result = result
        return result

    def run_iteration(self, now: Optional[datetime] = None) -> float:
        """
        Run one cycle and decide how long to sleep afterwards.

        Returns:
            Sleep duration in seconds
        """
        result = self.run_cycle(now)
        interval = self.polling_manager.determine_poll_interval(result, now or self.clock())
        logger.debug(f"Polling state: {polling_state(result)}")
        return interval

    def run_forever(self):
        """
        Loop until ``stop()`` is called. Cycle failures are logged and retried
        after a fixed backoff.
        """
        logger.info("Starting NHL ingest loop")

        while not self._stop_event.is_set():
            try:
                interval = self.run_iteration()
            except Exception:
                logger.exception(f"Cycle failed, retrying in {self.error_backoff}s")
                interval = self.error_backoff

            self._stop_event.wait(interval)

        logger.info("NHL ingest loop stopped")

    def stop(self):
        """Stop the loop, interrupting any sleep in progress."""
        logger.info("Stopping NHL ingest loop...")
        self._stop_event.set()
