from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger
from pydantic import ValidationError

from standings_kiosk.config.settings import settings
from standings_kiosk.models.enums import DataSource
from standings_kiosk.models.team import NO_RANK, TeamRecord
from standings_kiosk.parsing.records import parse_int
from .base_source import BaseSource, is_valid_team_name, strip_rank_prefix

TEAM_NAME_FIELDS = ("displayName", "name", "shortDisplayName")


class EspnApiSource(BaseSource[List[TeamRecord]]):
    """Structured standings API (nested JSON)."""

    data_source = DataSource.ESPN
    accept = "application/json"

    def __init__(self, url: Optional[str] = None, *args, **kwargs):
        super().__init__(url or settings.espn_api_url, *args, **kwargs)

    def decode(self, response: httpx.Response) -> Any:
        return response.json()

    @staticmethod
    def _entries(payload: Any) -> List[Any]:
        """Finds the standings entries: children[0].standings.entries, else standings.entries."""
        if not isinstance(payload, dict):
            return []
        children = payload.get("children")
        if isinstance(children, list) and children and isinstance(children[0], dict):
            standings = children[0].get("standings") or {}
        else:
            standings = payload.get("standings") or {}
        entries = standings.get("entries") if isinstance(standings, dict) else None
        return entries if isinstance(entries, list) else []

    @staticmethod
    def _team_name(team: Dict[str, Any]) -> str:
        for field in TEAM_NAME_FIELDS:
            value = team.get(field)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""

    @staticmethod
    def _records(stats: List[Any]) -> Tuple[int, int, int, int]:
        """Returns (conf wins, conf losses, overall wins, overall losses).

        The overall record comes from a stat typed "total". When the payload
        has none, overall falls back to the conference record.
        """
        stats = [stat for stat in stats if isinstance(stat, dict)]
        wins_stat = next(
            (s for s in stats if s.get("name") == "wins" or s.get("displayName") == "CONF"),
            {},
        )
        losses_stat = next((s for s in stats if s.get("name") == "losses"), {})
        conf_wins = max(parse_int(wins_stat.get("value")), 0)
        conf_losses = max(parse_int(losses_stat.get("value")), 0)

        overall_wins, overall_losses = conf_wins, conf_losses
        for stat in stats:
            if stat.get("type") == "total":
                overall_wins = max(parse_int(stat.get("wins") or stat.get("value")), 0)
                overall_losses = max(parse_int(stat.get("losses")), 0)
        return conf_wins, conf_losses, overall_wins, overall_losses

    def parse(self, payload: Any) -> List[TeamRecord]:
        self.parse_warnings = []
        records: List[TeamRecord] = []

        for index, entry in enumerate(self._entries(payload)):
            team = entry.get("team") if isinstance(entry, dict) else None
            if not isinstance(team, dict):
                self.warn(index, "entry has no team object")
                continue

            team_name = strip_rank_prefix(self._team_name(team))
            if not is_valid_team_name(team_name):
                self.warn(index, "team has no usable display name")
                continue

            stats = entry.get("stats")
            conf_wins, conf_losses, overall_wins, overall_losses = self._records(
                stats if isinstance(stats, list) else []
            )
            rank = parse_int(team.get("rank"))
            ap_rank = rank if 0 < rank < NO_RANK else NO_RANK

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
                self.warn(index, f"invalid entry for {team_name}: {e.error_count()} error(s)")

        logger.info(
            f"Parsed {len(records)} teams from {self.name} ({len(self.parse_warnings)} entries skipped)"
        )
        return records
