import pytest

from standings_kiosk.normalization.names import (
    TeamNameNormalizer,
    clean_poll_team_name,
    normalize_team_name,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Michigan St.", "MICHIGAN STATE"),
        ("michigan st", "MICHIGAN STATE"),
        ("  Ohio   St ", "OHIO STATE"),
        ("Penn St.", "PENN STATE"),
        ("Purdue", "PURDUE"),
        ("Michigan State", "MICHIGAN STATE"),
    ],
)
def test_normalize_known_variants(raw, expected):
    assert normalize_team_name(raw) == expected


def test_unknown_abbreviations_are_not_expanded():
    # Not in the alias table, so left alone
    assert normalize_team_name("Iowa St.") == "IOWA ST."


def test_extra_aliases_extend_the_table():
    normalizer = TeamNameNormalizer({"uconn": "Connecticut"})
    assert normalizer.normalize("UConn") == "CONNECTICUT"
    assert normalizer.normalize("Ohio St.") == "OHIO STATE"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Purdue (18-2)", "Purdue"),
        ("Houston (35)", "Houston"),
        ("Michigan St. 20-3", "Michigan St."),
        ("  Illinois  ", "Illinois"),
    ],
)
def test_clean_poll_team_name(raw, expected):
    assert clean_poll_team_name(raw) == expected
