import pytest

from standings_kiosk.errors import TableNotFound
from standings_kiosk.parsing.table_extractor import (
    extract_rows,
    find_tables,
    select_table,
    split_cells,
    strip_html,
)


def test_strip_html_removes_tags_and_decodes_entities():
    fragment = '<a href="/team/1"><b>Texas&nbsp;A&amp;M</b></a> &lt;SEC&gt; &quot;Aggies&quot; &#39;26'
    assert strip_html(fragment) == "Texas A&M <SEC> \"Aggies\" '26"


def test_strip_html_collapses_whitespace():
    assert strip_html("  Michigan\n\t  <span>State</span>  ") == "Michigan State"


def test_strip_html_decodes_ampersand_once():
    assert strip_html("&amp;lt;") == "&lt;"


def test_no_tables_raises_table_not_found():
    with pytest.raises(TableNotFound):
        list(extract_rows("<html><body><p>No data today</p></body></html>"))


def test_extract_rows_is_lazy():
    rows = extract_rows("<p>nothing</p>")
    # Nothing is evaluated until iteration
    with pytest.raises(TableNotFound):
        next(rows)


def test_prefers_record_table_with_enough_rows(make_table, make_page, extended_rows):
    nav = make_table([["Home", "Schedule"], ["News", "Teams"]], attrs='class="standings-nav"')
    standings = make_table(extended_rows, header=["Rk", "Team", "Conf"])
    rows = list(extract_rows(make_page(nav, standings), min_cells=8))
    assert [row[1] for row in rows] == [
        "Purdue",
        "Michigan State",
        "Wisconsin",
        "Illinois",
        "Ohio State",
        "Penn State",
    ]


def test_record_table_needs_more_than_five_rows(make_table):
    short = make_table([["1", "Purdue", "9-1", "20-3"]] * 5)
    hinted = make_table([["A", "B"]], attrs='id="conf-standings"')
    tables = find_tables(short + hinted)
    assert select_table(tables).attributes.strip() == 'id="conf-standings"'


def test_falls_back_to_first_table(make_table):
    first = make_table([["alpha", "beta"]])
    second = make_table([["gamma", "delta"]])
    rows = list(extract_rows(first + second))
    assert rows == [["alpha", "beta"]]


def test_header_only_rows_are_discarded():
    assert split_cells("<th>Team</th><th>Conf</th>") is None
    assert split_cells("<th>1</th><td>Purdue</td>") == ["1", "Purdue"]


def test_rows_below_min_cells_are_skipped(make_table):
    markup = make_table(
        [
            ["1", "Purdue", "9-1", "20-3"],
            ["Updated Feb 1"],
            ["2", "Illinois", "7-3", "18-5"],
        ]
    )
    rows = list(extract_rows(markup, min_cells=4))
    assert [row[1] for row in rows] == ["Purdue", "Illinois"]


def test_malformed_markup_degrades_gracefully():
    markup = (
        "<TABLE class=data><TR><TD>1<TD>broken row</TR>"
        "<tr><td>2</td><td>Iowa</td><td>6-4</td><td>15-8</td></tr>"
        "<tr><td>3</td><td>Nebraska"
        "</table>"
    )
    rows = list(extract_rows(markup, min_cells=4))
    assert rows == [["2", "Iowa", "6-4", "15-8"]]


def test_case_insensitive_tags():
    markup = "<TABLE><TR><TD>1</TD><TD>Rutgers</TD></TR></TABLE>"
    assert list(extract_rows(markup, min_cells=2)) == [["1", "Rutgers"]]
