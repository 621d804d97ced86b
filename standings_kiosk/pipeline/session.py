from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from standings_kiosk.config.settings import settings
from standings_kiosk.models.snapshot import StandingsSnapshot
from standings_kiosk.render.status import is_stale
from standings_kiosk.tracking.tracker import PositionTracker


def retry_delay_ms(attempt: int, base_ms: int, max_ms: int) -> int:
    """min(base * 2^attempt, max)."""
    return min(base_ms * (2 ** max(attempt, 0)), max_ms)


class RefreshSession:
    """State carried between refresh cycles.

    Only a successful cycle writes the tracker, snapshot and timestamp. A
    failed cycle only bumps the retry counter.
    """

    def __init__(
        self,
        tracker: Optional[PositionTracker] = None,
        retry_base_delay_ms: Optional[int] = None,
        max_retry_delay_ms: Optional[int] = None,
    ):
        self.tracker = tracker or PositionTracker()
        self.retry_base_delay_ms = retry_base_delay_ms or settings.retry_base_delay_ms
        self.max_retry_delay_ms = max_retry_delay_ms or settings.max_retry_delay_ms
        self.retry_count = 0
        self.last_successful_update: Optional[datetime] = None
        self.last_snapshot: Optional[StandingsSnapshot] = None

    @property
    def has_data(self) -> bool:
        return self.last_snapshot is not None

    def record_success(self, snapshot: StandingsSnapshot, now: Optional[datetime] = None) -> None:
        self.tracker.commit(snapshot.records)
        self.last_snapshot = snapshot
        self.last_successful_update = now or datetime.now(timezone.utc)
        if self.retry_count:
            logger.info(f"Recovered after {self.retry_count} failed attempt(s)")
        self.retry_count = 0

    def record_failure(self) -> float:
        """Counts a failed cycle and returns the backoff delay in seconds."""
        self.retry_count += 1
        delay_ms = retry_delay_ms(
            self.retry_count, self.retry_base_delay_ms, self.max_retry_delay_ms
        )
        return delay_ms / 1000

    def is_stale(self, now: Optional[datetime] = None, threshold_seconds: Optional[float] = None) -> bool:
        return is_stale(
            self.last_successful_update,
            now or datetime.now(timezone.utc),
            threshold_seconds or settings.stale_threshold_seconds,
        )
