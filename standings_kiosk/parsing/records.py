import re
from typing import Any, Tuple

# En dash, em dash and minus sign all show up in upstream "W-L" cells
DASH_VARIANTS_RE = re.compile("[–—−]")
LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def parse_int(value: Any, default: int = 0) -> int:
    """Coerces ints, floats and numeric-looking strings, otherwise returns default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else default  # NaN check
    match = LEADING_INT_RE.match(str(value).strip())
    if not match:
        return default
    return int(match.group(0))


def parse_record(text: Any) -> Tuple[int, int]:
    """Parses a "W-L" token into (wins, losses).

    Never raises: anything unparseable becomes 0, so garbage yields (0, 0).
    """
    clean = DASH_VARIANTS_RE.sub("-", str(text or ""))
    wins_raw, _, losses_raw = clean.partition("-")
    wins = parse_int(wins_raw)
    losses = parse_int(losses_raw)
    if wins < 0 or losses < 0:
        return 0, 0
    return wins, losses


def win_pct(wins: int, losses: int) -> float:
    """Share of games won, 0.0 when no games have been played."""
    total = wins + losses
    if total <= 0:
        return 0.0
    return wins / total


def format_record(wins: int, losses: int) -> str:
    return f"{wins}-{losses}"
