import asyncio
from typing import Awaitable, Callable, List, Optional

from loguru import logger

from standings_kiosk.config.settings import settings
from standings_kiosk.pipeline.cycle import CycleOutcome, StandingsPipeline
from standings_kiosk.pipeline.session import RefreshSession

Sleep = Callable[[float], Awaitable[None]]


class StandingsScheduler:
    """Runs refresh cycles back to back, never overlapping.

    The wait before the next cycle starts only once the current cycle has
    finished: the refresh interval after a success, the backoff delay after a
    failure. A success resets the backoff.
    """

    def __init__(
        self,
        pipeline: StandingsPipeline,
        session: Optional[RefreshSession] = None,
        refresh_interval: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.pipeline = pipeline
        self.session = session or RefreshSession()
        self.refresh_interval = refresh_interval or settings.refresh_interval_seconds
        self._sleep = sleep
        self._stopped = False

    def next_delay(self, outcome: CycleOutcome) -> float:
        if outcome.success:
            return self.refresh_interval
        return outcome.retry_delay or self.refresh_interval

    def stop(self) -> None:
        self._stopped = True

    async def run(self, max_cycles: Optional[int] = None) -> List[CycleOutcome]:
        """Loops until stopped or `max_cycles` cycles have run."""
        outcomes: List[CycleOutcome] = []
        try:
            while not self._stopped:
                outcome = await self.pipeline.run_cycle(self.session)
                outcomes.append(outcome)
                if max_cycles is not None and len(outcomes) >= max_cycles:
                    break
                delay = self.next_delay(outcome)
                logger.debug(
                    f"Next refresh in {delay:.0f}s ({'scheduled' if outcome.success else 'retry'})"
                )
                await self._sleep(delay)
        finally:
            await self.pipeline.close()
        return outcomes
