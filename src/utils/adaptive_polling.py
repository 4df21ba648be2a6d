"""
Adaptive polling utilities for the ingest loop.
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from config import settings
from schemas import CycleResult

logger = logging.getLogger(__name__)

STATE_ACTIVE = 'active'  # live or pending games
STATE_ARMED = 'armed'  # next puck drop known
STATE_IDLE = 'idle'


def polling_state(result: CycleResult) -> str:
    """
    Label the sleep decision for a cycle result.

    The label depends only on the latest result, never on earlier cycles.
    """
    if result.live_found or result.pending_found:
        return STATE_ACTIVE
    if result.next_start is not None:
        return STATE_ARMED
    return STATE_IDLE


class AdaptivePollingManager:
    """Decides how long to sleep between ingestion cycles."""

    def __init__(self, active_interval: Optional[int] = None, idle_interval: Optional[int] = None,
                 max_sleep: Optional[int] = None, wake_lead: Optional[int] = None):
        self.active_interval = active_interval if active_interval is not None else settings.active_poll_interval
        self.idle_interval = idle_interval if idle_interval is not None else settings.idle_poll_interval
        self.max_sleep = max_sleep if max_sleep is not None else settings.max_sleep_interval
        self.wake_lead = wake_lead if wake_lead is not None else settings.pre_game_wake_lead
        self.current_interval: float = self.active_interval

    def determine_poll_interval(self, result: CycleResult, now: Optional[datetime] = None) -> float:
        """
        Determine the sleep before the next cycle.

        Strategy:
        - Live or pending-start games: poll every active interval
        - Next start known: wake ``wake_lead`` seconds before it, capped at ``max_sleep``;
          if that moment already passed, poll every active interval
        - Nothing scheduled: poll every idle interval

        Args:
            result: Signals from the most recent cycle
            now: Current time (UTC, defaults to now)

        Returns:
            Sleep duration in seconds
        """
        if now is None:
            now = datetime.now(timezone.utc)

        state = polling_state(result)

        if state == STATE_ACTIVE:
            reason = "live game" if result.live_found else "pending start"
            logger.info(f"Active ({reason}), refreshing in {self.active_interval}s")
            interval = float(self.active_interval)
        elif state == STATE_ARMED:
            wake_in = (result.next_start - now).total_seconds() - self.wake_lead
            if wake_in > 0:
                interval = float(min(wake_in, self.max_sleep))
                logger.info(f"Next game at {result.next_start.isoformat()}, sleeping ~{interval / 60:.0f} mins")
            else:
                interval = float(self.active_interval)
                logger.info(f"Game starting soon, refreshing in {self.active_interval}s")
        else:
            interval = float(self.idle_interval)
            logger.info(f"No games imminent, sleeping {self.idle_interval}s")

        self.current_interval = interval
        return interval
