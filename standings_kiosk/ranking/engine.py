"""Merging of supplementary ranks and the standings sort order."""

from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from standings_kiosk.models.team import NO_RANK, RankedRecord, TeamRecord
from standings_kiosk.normalization.names import TeamNameNormalizer

MERGEABLE_FIELDS = ("ap_rank", "net_rank")


def merge_ranks(
    records: Sequence[TeamRecord],
    ranks: Dict[str, int],
    field: str = "ap_rank",
    normalizer: Optional[TeamNameNormalizer] = None,
) -> List[TeamRecord]:
    """Copies supplementary ranks onto matching standings records.

    Records are matched by normalized team name. Rank entries for teams that
    are not in the standings are dropped: the standings source decides which
    teams exist.

    Args:
        records: Standings records from the primary source.
        ranks: Supplementary rank keyed by team name (any spelling).
        field: Which rank to overwrite, "ap_rank" or "net_rank".
        normalizer: Name normalizer used on both sides of the match.

    Returns:
        A new list; records without a match are returned unchanged.
    """
    if field not in MERGEABLE_FIELDS:
        raise ValueError(f"Cannot merge into field '{field}'")
    if not ranks:
        return list(records)

    normalizer = normalizer or TeamNameNormalizer()
    by_name = {normalizer.normalize(name): rank for name, rank in ranks.items()}

    merged: List[TeamRecord] = []
    matched = set()
    for record in records:
        key = normalizer.normalize(record.team)
        rank = by_name.get(key)
        if rank is None or rank <= 0 or (field == "ap_rank" and rank >= NO_RANK):
            merged.append(record)
            continue
        matched.add(key)
        merged.append(record.model_copy(update={field: rank}))

    unmatched = sorted(set(by_name) - matched)
    if unmatched:
        logger.debug(f"Dropped {len(unmatched)} {field} entries with no standings match: {unmatched}")
    logger.info(f"Merged {len(matched)} {field} values into {len(records)} standings records")
    return merged


def _is_favorite(record: TeamRecord, favorite_team: Optional[str]) -> bool:
    return bool(favorite_team) and record.team == favorite_team.strip().upper()


def _compare_optional_rank(a: Optional[int], b: Optional[int], unranked: Optional[int]) -> int:
    """Ranked beats unranked; between two ranked teams the lower number wins."""
    a_ranked = a is not None and a != unranked
    b_ranked = b is not None and b != unranked
    if a_ranked and not b_ranked:
        return -1
    if b_ranked and not a_ranked:
        return 1
    if a_ranked and b_ranked and a != b:
        return -1 if a < b else 1
    return 0


def _desc(a, b) -> int:
    if a == b:
        return 0
    return -1 if a > b else 1


def compare_teams(a: TeamRecord, b: TeamRecord, favorite_team: Optional[str] = None) -> int:
    """Standings order. Negative when `a` ranks ahead of `b`."""
    # 1) Conference winning percentage (higher first)
    result = _desc(a.conf_pct, b.conf_pct)
    # 2) Conference wins (more first)
    result = result or _desc(a.conf_wins, b.conf_wins)
    # 3) Conference losses (fewer first)
    result = result or -_desc(a.conf_losses, b.conf_losses)
    # 4) Overall winning percentage
    result = result or _desc(a.overall_pct, b.overall_pct)
    # 5) Overall wins
    result = result or _desc(a.overall_wins, b.overall_wins)
    if result:
        return result

    # 6) Favorite team among identical records
    a_fav, b_fav = _is_favorite(a, favorite_team), _is_favorite(b, favorite_team)
    if a_fav != b_fav:
        return -1 if a_fav else 1

    # 7) AP poll rank, 8) NET rank
    result = _compare_optional_rank(a.ap_rank, b.ap_rank, NO_RANK)
    result = result or _compare_optional_rank(a.net_rank, b.net_rank, None)
    if result:
        return result

    # 9) Alphabetical fallback
    if a.team == b.team:
        return 0
    return -1 if a.team < b.team else 1


def sort_key(record: TeamRecord, favorite_team: Optional[str] = None) -> Tuple:
    """Tuple equivalent of compare_teams, ascending."""
    return (
        -record.conf_pct,
        -record.conf_wins,
        record.conf_losses,
        -record.overall_pct,
        -record.overall_wins,
        0 if _is_favorite(record, favorite_team) else 1,
        record.ap_rank if record.is_ranked else NO_RANK,
        record.net_rank if record.net_rank is not None else float("inf"),
        record.team,
    )


def rank_teams(
    records: Sequence[TeamRecord], favorite_team: Optional[str] = None
) -> List[RankedRecord]:
    """Sorts records into standings order and assigns positions 1..N.

    Duplicate team names keep their first occurrence.
    """
    unique: Dict[str, TeamRecord] = {}
    for record in records:
        if record.team in unique:
            logger.warning(f"Duplicate standings row for {record.team}, keeping the first one")
            continue
        unique[record.team] = record

    ordered = sorted(
        unique.values(),
        key=cmp_to_key(lambda a, b: compare_teams(a, b, favorite_team)),
    )
    return [
        RankedRecord.model_validate({**record.model_dump(), "position": position})
        for position, record in enumerate(ordered, start=1)
    ]
