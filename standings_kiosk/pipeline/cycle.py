import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from standings_kiosk.config.settings import AppSettings, settings as default_settings
from standings_kiosk.errors import EmptyResult, StandingsError
from standings_kiosk.models.enums import DataSource, SourceRole
from standings_kiosk.models.snapshot import StandingsSnapshot
from standings_kiosk.models.team import TeamRecord
from standings_kiosk.normalization.names import TeamNameNormalizer
from standings_kiosk.pipeline.session import RefreshSession
from standings_kiosk.ranking.engine import merge_ranks, rank_teams
from standings_kiosk.render.console import StandingsRenderer
from standings_kiosk.sources.base_source import BaseSource
from standings_kiosk.sources.csv_source import CsvSource
from standings_kiosk.sources.espn_source import EspnApiSource
from standings_kiosk.sources.poll_source import PollSource
from standings_kiosk.sources.simple_html_source import SimpleHtmlSource
from standings_kiosk.sources.warrennolan_source import ExtendedHtmlSource

NO_DATA_MESSAGE = "Error loading data - retrying..."

PRIMARY_SOURCES = {
    DataSource.WARRENNOLAN: ExtendedHtmlSource,
    DataSource.SIMPLE_HTML: SimpleHtmlSource,
    DataSource.ESPN: EspnApiSource,
    DataSource.CSV: CsvSource,
}


class CycleOutcome:
    """Result of one refresh cycle."""

    def __init__(
        self,
        success: bool,
        snapshot: Optional[StandingsSnapshot] = None,
        error: Optional[BaseException] = None,
        retry_delay: Optional[float] = None,
    ):
        self.success = success
        self.snapshot = snapshot
        self.error = error
        self.retry_delay = retry_delay  # Seconds, failures only

    def __repr__(self):
        if self.success:
            return f"CycleOutcome(success=True, teams={len(self.snapshot)})"
        return f"CycleOutcome(success=False, error={self.error!r}, retry_delay={self.retry_delay})"


class StandingsPipeline:
    """One refresh cycle: fetch, parse, merge, rank, reconcile, render."""

    def __init__(
        self,
        primary: BaseSource[List[TeamRecord]],
        renderer: StandingsRenderer,
        poll: Optional[BaseSource[Dict[str, int]]] = None,
        normalizer: Optional[TeamNameNormalizer] = None,
        favorite_team: Optional[str] = None,
    ):
        if primary.role is not SourceRole.PRIMARY:
            raise ValueError(f"{primary.name} cannot be the primary source")
        self.primary = primary
        self.poll = poll
        self.renderer = renderer
        self.normalizer = normalizer or TeamNameNormalizer()
        self.favorite_team = favorite_team

    async def _load_primary(self) -> List[TeamRecord]:
        records = await self.primary.load()
        if not records:
            raise EmptyResult(self.primary.name)
        return records

    async def _load_poll(self) -> Dict[str, int]:
        if self.poll is None:
            return {}
        return await self.poll.load()

    @staticmethod
    def _settle(source: Optional[BaseSource], result):
        """Re-raises a primary failure; a supplementary one is logged and dropped."""
        if not isinstance(result, BaseException):
            return result
        if source is None or source.role is SourceRole.PRIMARY:
            raise result
        logger.warning(f"{source.name} failed, continuing without it: {result}")
        return None

    async def build_snapshot(self, session: RefreshSession) -> StandingsSnapshot:
        """Runs the pipeline without touching session state."""
        primary_result, poll_result = await asyncio.gather(
            self._load_primary(), self._load_poll(), return_exceptions=True
        )
        records = self._settle(self.primary, primary_result)
        ap_ranks = self._settle(self.poll, poll_result) or {}

        records = merge_ranks(records, ap_ranks, "ap_rank", self.normalizer)
        ranked = rank_teams(records, self.favorite_team)
        annotated = session.tracker.annotate(ranked)
        return StandingsSnapshot(records=annotated, source=self.primary.data_source)

    async def run_cycle(self, session: RefreshSession) -> CycleOutcome:
        logger.info(f"Starting refresh cycle from {self.primary.name}...")
        try:
            snapshot = await self.build_snapshot(session)
            self.renderer.render(snapshot)
        except (StandingsError, ValidationError, httpx.HTTPError) as e:
            return self._fail(session, e)
        except Exception as e:
            logger.exception(f"Unexpected error during refresh cycle: {e}")
            return self._fail(session, e)

        session.record_success(snapshot, datetime.now(timezone.utc))
        self.renderer.set_connection_status(True)
        changed = len(snapshot.changed())
        logger.success(
            f"Refresh cycle complete: {len(snapshot)} teams, {changed} position change(s)"
        )
        return CycleOutcome(True, snapshot=snapshot)

    def _fail(self, session: RefreshSession, error: BaseException) -> CycleOutcome:
        retry_delay = session.record_failure()
        logger.error(
            f"Refresh cycle failed ({type(error).__name__}: {error}). "
            f"Retrying in {retry_delay:.0f}s (attempt {session.retry_count})"
        )
        self.renderer.set_connection_status(False)
        # Keep showing the last good standings if there are any
        if session.has_data:
            self.renderer.update_status(session.last_successful_update)
        else:
            self.renderer.show_error(NO_DATA_MESSAGE)
        return CycleOutcome(False, error=error, retry_delay=retry_delay)

    async def close(self) -> None:
        for source in (self.primary, self.poll):
            if source is not None:
                await source.close()


def build_pipeline(
    renderer: StandingsRenderer,
    config: Optional[AppSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> StandingsPipeline:
    """Wires sources from settings."""
    config = config or default_settings
    normalizer = TeamNameNormalizer(config.team_aliases)
    source_cls = PRIMARY_SOURCES[config.data_source]
    urls = {
        DataSource.WARRENNOLAN: config.standings_url,
        DataSource.SIMPLE_HTML: config.simple_standings_url,
        DataSource.ESPN: config.espn_api_url,
        DataSource.CSV: config.csv_url,
    }
    primary = source_cls(urls[config.data_source], client=client, cache_bust=config.cache_bust)

    poll = None
    if config.enable_poll and config.poll_url:
        poll = PollSource(
            config.poll_url, client=client, normalizer=normalizer, cache_bust=config.cache_bust
        )
    logger.info(
        f"Pipeline configured: primary={primary.name}, poll={'on' if poll else 'off'}, favorite={config.favorite}"
    )
    return StandingsPipeline(
        primary, renderer, poll=poll, normalizer=normalizer, favorite_team=config.favorite
    )
