# standings_kiosk/sources/warrennolan_source.py

import re
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from standings_kiosk.config.settings import settings
from standings_kiosk.models.enums import DataSource
from standings_kiosk.models.team import NO_RANK, TeamRecord
from standings_kiosk.parsing.records import parse_record
from standings_kiosk.parsing.table_extractor import extract_rows
from .base_source import BaseSource, is_valid_team_name, strip_rank_prefix

# Rank | Team | Conf | Conf% | GB | Overall | Overall% | NET | Q1 ...
MIN_CELLS = 8
TEAM_COL = 1
CONF_COL = 2
OVERALL_COL = 5
NET_COL = 7

DIGITS_RE = re.compile(r"[0-9]+")


class ExtendedHtmlSource(BaseSource[List[TeamRecord]]):
    """Conference standings table that also carries NET ranks."""

    data_source = DataSource.WARRENNOLAN

    def __init__(self, url: Optional[str] = None, *args, **kwargs):
        super().__init__(url or settings.standings_url, *args, **kwargs)

    def parse(self, payload: str) -> List[TeamRecord]:
        self.parse_warnings = []
        records: List[TeamRecord] = []

        for index, cells in enumerate(extract_rows(payload, min_cells=MIN_CELLS)):
            team_name = strip_rank_prefix(cells[TEAM_COL])
            conf_text = cells[CONF_COL].strip()
            overall_text = cells[OVERALL_COL].strip()

            if not is_valid_team_name(team_name):
                self.warn(index, f"team name too short: {cells[TEAM_COL]!r}")
                continue
            if not conf_text or not overall_text:
                self.warn(index, f"missing record for {team_name}")
                continue

            conf_wins, conf_losses = parse_record(conf_text)
            overall_wins, overall_losses = parse_record(overall_text)
            net_text = cells[NET_COL].strip()
            net_rank = int(net_text) if DIGITS_RE.fullmatch(net_text) and int(net_text) > 0 else None

            try:
                records.append(
                    TeamRecord(
                        team=team_name,
                        conf_wins=conf_wins,
                        conf_losses=conf_losses,
                        overall_wins=overall_wins,
                        overall_losses=overall_losses,
                        ap_rank=NO_RANK,  # Filled in from the poll source
                        net_rank=net_rank,
                    )
                )
            except ValidationError as e:
                self.warn(index, f"invalid row for {team_name}: {e.error_count()} error(s)")

        logger.info(
            f"Parsed {len(records)} teams from {self.name} ({len(self.parse_warnings)} rows skipped)"
        )
        return records
