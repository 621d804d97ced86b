import re
from typing import Dict, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from standings_kiosk.config.settings import settings
from standings_kiosk.errors import MissingColumns
from standings_kiosk.models.enums import DataSource
from standings_kiosk.models.team import NO_RANK, TeamRecord
from standings_kiosk.parsing.records import parse_int, parse_record
from .base_source import BaseSource, is_valid_team_name, strip_rank_prefix

REQUIRED_COLUMNS = ("TEAM", "CONF", "OVR", "WINS", "LOSSES")
OPTIONAL_COLUMNS = ("RANK",)

LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_csv_line(line: str) -> List[str]:
    """Splits one line on commas outside double quotes. Quotes are dropped."""
    cells: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    cells.append("".join(current).strip())
    return cells


def parse_csv(text: str) -> Tuple[List[str], List[List[str]]]:
    """Returns (headers, rows) for quoted-comma-delimited text."""
    stripped = (text or "").strip()
    if not stripped:
        return [], []
    lines = LINE_SPLIT_RE.split(stripped)
    return split_csv_line(lines[0]), [split_csv_line(line) for line in lines[1:]]


def resolve_columns(headers: List[str]) -> Dict[str, int]:
    """Maps logical column names to indexes, case-insensitively."""
    header_to_index: Dict[str, int] = {}
    for index, header in enumerate(headers):
        header_to_index.setdefault(header.strip().upper(), index)

    missing = [name for name in REQUIRED_COLUMNS if name not in header_to_index]
    if missing:
        raise MissingColumns(missing)
    return {
        name: header_to_index[name]
        for name in REQUIRED_COLUMNS + OPTIONAL_COLUMNS
        if name in header_to_index
    }


class CsvSource(BaseSource[List[TeamRecord]]):
    """Published spreadsheet export with TEAM, CONF, OVR, WINS, LOSSES[, RANK]."""

    data_source = DataSource.CSV
    accept = "text/csv"

    def __init__(self, url: Optional[str] = None, *args, **kwargs):
        super().__init__(url or settings.csv_url, *args, **kwargs)

    def parse(self, payload: str) -> List[TeamRecord]:
        self.parse_warnings = []
        headers, rows = parse_csv(payload)
        columns = resolve_columns(headers)
        records: List[TeamRecord] = []

        def cell(row: List[str], name: str) -> str:
            index = columns.get(name)
            if index is None or index >= len(row):
                return ""
            return row[index]

        for index, row in enumerate(rows):
            team_name = strip_rank_prefix(cell(row, "TEAM"))
            if not is_valid_team_name(team_name):
                self.warn(index, f"team name too short: {cell(row, 'TEAM')!r}")
                continue

            conf_wins, conf_losses = parse_record(cell(row, "CONF"))
            rank = parse_int(cell(row, "RANK"))
            try:
                records.append(
                    TeamRecord(
                        team=team_name,
                        conf_wins=conf_wins,
                        conf_losses=conf_losses,
                        overall_wins=max(parse_int(cell(row, "WINS")), 0),
                        overall_losses=max(parse_int(cell(row, "LOSSES")), 0),
                        ap_rank=rank if 0 < rank < NO_RANK else NO_RANK,
                    )
                )
            except ValidationError as e:
                self.warn(index, f"invalid row for {team_name}: {e.error_count()} error(s)")

        logger.info(
            f"Parsed {len(records)} teams from {self.name} ({len(self.parse_warnings)} rows skipped)"
        )
        return records
