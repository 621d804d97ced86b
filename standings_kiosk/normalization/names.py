import re
from typing import Dict, Optional

from loguru import logger

PARENTHESIZED_RE = re.compile(r"\([^)]*\)")
RECORD_TOKEN_RE = re.compile(r"\d+\s*[-–—−]\s*\d+")

# Explicit variant -> canonical spellings. Abbreviations are only expanded for
# the schools listed here; "ST" is ambiguous across programs.
DEFAULT_TEAM_ALIASES: Dict[str, str] = {
    "MICHIGAN ST": "MICHIGAN STATE",
    "MICHIGAN ST.": "MICHIGAN STATE",
    "OHIO ST": "OHIO STATE",
    "OHIO ST.": "OHIO STATE",
    "PENN ST": "PENN STATE",
    "PENN ST.": "PENN STATE",
    "THE OHIO STATE": "OHIO STATE",
    "MINNESOTA GOLDEN GOPHERS": "MINNESOTA",
    "UCLA BRUINS": "UCLA",
    "USC TROJANS": "USC",
    "SOUTHERN CALIFORNIA": "USC",
    "SOUTHERN CAL": "USC",
}


def clean_poll_team_name(raw_name: str) -> str:
    """Drops poll decorations such as "(18-0)", "(35)" and bare W-L tokens."""
    text = PARENTHESIZED_RE.sub("", raw_name or "")
    text = RECORD_TOKEN_RE.sub("", text)
    return " ".join(text.split())


class TeamNameNormalizer:
    """Maps team display names from different sources onto one spelling."""

    def __init__(self, extra_aliases: Optional[Dict[str, str]] = None):
        # Key: uppercased variant, Value: canonical uppercased name
        self.team_aliases: Dict[str, str] = dict(DEFAULT_TEAM_ALIASES)
        for variant, canonical in (extra_aliases or {}).items():
            self.team_aliases[self._clean(variant)] = self._clean(canonical)
        logger.debug(
            f"TeamNameNormalizer initialized with {len(self.team_aliases)} team aliases."
        )

    @staticmethod
    def _clean(name: str) -> str:
        return " ".join((name or "").split()).upper()

    def normalize(self, raw_name: str) -> str:
        cleaned = self._clean(raw_name)
        return self.team_aliases.get(cleaned, cleaned)


_default_normalizer = TeamNameNormalizer()


def normalize_team_name(raw_name: str) -> str:
    """Normalizes with the built-in alias table."""
    return _default_normalizer.normalize(raw_name)
