import pytest

from standings_kiosk.parsing.records import format_record, parse_int, parse_record, win_pct


@pytest.mark.parametrize(
    "text, expected",
    [
        ("10-4", (10, 4)),
        ("0-0", (0, 0)),
        ("7–3", (7, 3)),  # en dash
        ("7—3", (7, 3)),  # em dash
        ("7−3", (7, 3)),  # minus sign
        (" 12 - 1 ", (12, 1)),
        ("18-0 (1st)", (18, 0)),
    ],
)
def test_parse_record_well_formed(text, expected):
    assert parse_record(text) == expected


@pytest.mark.parametrize("text", ["", None, "abc", "W-L", "--", "-", "x-y-z"])
def test_parse_record_garbage_is_zero(text):
    assert parse_record(text) == (0, 0)


def test_parse_record_partial_token_defaults_missing_side():
    assert parse_record("9") == (9, 0)
    assert parse_record("-4") == (0, 4)


def test_parse_record_round_trips_formatted_records():
    for wins in range(0, 30, 7):
        for losses in range(0, 30, 5):
            assert parse_record(format_record(wins, losses)) == (wins, losses)


def test_win_pct_no_games_is_zero():
    assert win_pct(0, 0) == 0


def test_win_pct_values():
    assert win_pct(3, 1) == 0.75
    assert win_pct(5, 0) == 1.0
    assert win_pct(0, 5) == 0.0


def test_win_pct_monotonic():
    for losses in range(0, 6):
        values = [win_pct(wins, losses) for wins in range(0, 10)]
        assert values == sorted(values)
    for wins in range(0, 6):
        values = [win_pct(wins, losses) for losses in range(0, 10)]
        assert values == sorted(values, reverse=True)


@pytest.mark.parametrize(
    "value, expected",
    [(5, 5), (5.0, 5), ("5.0", 5), ("12", 12), (" 3rd", 3), ("NR", 0), (None, 0), (True, 0)],
)
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_parse_int_default():
    assert parse_int("n/a", default=-1) == -1
