from typing import Dict, Optional

from loguru import logger

from standings_kiosk.config.settings import settings
from standings_kiosk.models.enums import DataSource, SourceRole
from standings_kiosk.normalization.names import TeamNameNormalizer, clean_poll_team_name
from standings_kiosk.parsing.records import parse_int
from standings_kiosk.parsing.table_extractor import extract_rows
from .base_source import BaseSource, is_valid_team_name

# Rank | Team (record) | ...
MIN_CELLS = 2


class PollSource(BaseSource[Dict[str, int]]):
    """AP poll table, parsed into normalized team name -> poll rank."""

    data_source = DataSource.AP_POLL
    role = SourceRole.SUPPLEMENTARY

    def __init__(
        self,
        url: Optional[str] = None,
        *args,
        normalizer: Optional[TeamNameNormalizer] = None,
        **kwargs,
    ):
        super().__init__(url or settings.poll_url, *args, **kwargs)
        self.normalizer = normalizer or TeamNameNormalizer(settings.team_aliases)

    def parse(self, payload: Optional[str]) -> Dict[str, int]:
        self.parse_warnings = []
        rankings: Dict[str, int] = {}
        if not payload:
            return rankings

        for index, cells in enumerate(extract_rows(payload, min_cells=MIN_CELLS)):
            rank = parse_int(cells[0])
            team_name = self.normalizer.normalize(clean_poll_team_name(cells[1]))
            if rank <= 0:
                self.warn(index, f"no poll rank in {cells[0]!r}")
                continue
            if not is_valid_team_name(team_name):
                self.warn(index, f"team name too short: {cells[1]!r}")
                continue
            # Ties print the same team once; keep the first rank seen
            rankings.setdefault(team_name, rank)

        logger.info(f"Parsed {len(rankings)} poll ranks from {self.name}")
        return rankings
