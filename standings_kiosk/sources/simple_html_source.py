import re
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from standings_kiosk.config.settings import settings
from standings_kiosk.models.enums import DataSource
from standings_kiosk.models.team import NO_RANK, TeamRecord
from standings_kiosk.parsing.records import parse_record
from standings_kiosk.parsing.table_extractor import extract_rows
from .base_source import BaseSource, is_valid_team_name

# [Rank?] | Team | Conf | Overall
MIN_CELLS = 4

ORDINAL_PREFIX_RE = re.compile(r"^\d+\.\s*")
# Some pages print the poll rank in front of the name: "7 Purdue"
POLL_PREFIX_RE = re.compile(r"^(\d+)\s+")


class SimpleHtmlSource(BaseSource[List[TeamRecord]]):
    """Four-column standings table: rank, team, conference and overall record."""

    data_source = DataSource.SIMPLE_HTML

    def __init__(self, url: Optional[str] = None, *args, **kwargs):
        super().__init__(url or settings.simple_standings_url, *args, **kwargs)

    @staticmethod
    def split_team_cell(text: str):
        """Returns (team name, poll rank) for a raw team cell."""
        name = ORDINAL_PREFIX_RE.sub("", (text or "").strip())
        ap_rank = NO_RANK
        match = POLL_PREFIX_RE.match(name)
        if match:
            rank = int(match.group(1))
            if 0 < rank < NO_RANK:
                ap_rank = rank
            name = name[match.end():]
        return name.strip(), ap_rank

    def parse(self, payload: str) -> List[TeamRecord]:
        self.parse_warnings = []
        records: List[TeamRecord] = []

        for index, cells in enumerate(extract_rows(payload, min_cells=MIN_CELLS)):
            team_name, ap_rank = self.split_team_cell(cells[1])
            if not is_valid_team_name(team_name):
                self.warn(index, f"team name too short: {cells[1]!r}")
                continue

            conf_wins, conf_losses = parse_record(cells[2])
            overall_wins, overall_losses = parse_record(cells[3])
            try:
                records.append(
                    TeamRecord(
                        team=team_name,
                        conf_wins=conf_wins,
                        conf_losses=conf_losses,
                        overall_wins=overall_wins,
                        overall_losses=overall_losses,
                        ap_rank=ap_rank,
                    )
                )
            except ValidationError as e:
                self.warn(index, f"invalid row for {team_name}: {e.error_count()} error(s)")

        logger.info(
            f"Parsed {len(records)} teams from {self.name} ({len(self.parse_warnings)} rows skipped)"
        )
        return records
