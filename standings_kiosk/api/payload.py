from typing import Any, Dict, Optional, Sequence

from standings_kiosk.errors import EmptyResult, TableNotFound, UpstreamUnavailable
from standings_kiosk.models.team import TeamRecord


def record_payload(record: TeamRecord) -> Dict[str, Any]:
    """Wire shape of one team; wins/losses are the overall record."""
    return {
        "team": record.team,
        "conf": record.conf,
        "ovr": record.ovr,
        "apRank": record.ap_rank,
        "netRank": record.net_rank,
        "wins": record.overall_wins,
        "losses": record.overall_losses,
        "confWins": record.conf_wins,
        "confLosses": record.conf_losses,
    }


def build_standings_payload(records: Sequence[TeamRecord]) -> Dict[str, Any]:
    return {"standings": [record_payload(record) for record in records]}


def build_error_payload(error: str, message: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error}
    if message:
        payload["message"] = message
    return payload


def status_for_error(exc: BaseException) -> int:
    """Upstream problems map to 502, anything else to 500."""
    if isinstance(exc, (UpstreamUnavailable, TableNotFound, EmptyResult)):
        return 502
    return 500
