import httpx
import pytest

from standings_kiosk.models.team import NO_RANK, TeamRecord


def _cell(value, tag="td"):
    return f"<{tag}>{value}</{tag}>"


def _table(rows, header=None, attrs=""):
    parts = [f"<table{(' ' + attrs) if attrs else ''}>"]
    if header:
        parts.append("<tr>" + "".join(_cell(h, "th") for h in header) + "</tr>")
    for row in rows:
        parts.append("<tr>" + "".join(_cell(c) for c in row) + "</tr>")
    parts.append("</table>")
    return "\n".join(parts)


@pytest.fixture
def make_table():
    """Builds an HTML table: make_table(rows, header=None, attrs="")."""
    return _table


@pytest.fixture
def make_page():
    """Wraps one or more tables in a page."""

    def build(*tables):
        return "<html><body><h1>Standings</h1>" + "".join(tables) + "</body></html>"

    return build


@pytest.fixture
def extended_rows():
    return [
        ["1", "Purdue", "9-1", ".900", "-", "20-3", ".870", "3", "6-2"],
        ["2", "Michigan State", "8-2", ".800", "1", "18-5", ".783", "12", "4-3"],
        ["3", "Wisconsin", "7–3", ".700", "2", "17-6", ".739", "18", "3-4"],
        ["4", "Illinois", "7-3", ".700", "2", "18-5", ".783", "9", "5-2"],
        ["5", "Ohio State", "5-5", ".500", "4", "14-9", ".609", "40", "1-5"],
        ["6", "Penn State", "2-8", ".200", "7", "11-12", ".478", "NR", "0-6"],
    ]


@pytest.fixture
def team():
    """TeamRecord factory with sensible defaults."""

    def build(name, conf=(0, 0), overall=(0, 0), ap_rank=NO_RANK, net_rank=None):
        return TeamRecord(
            team=name,
            conf_wins=conf[0],
            conf_losses=conf[1],
            overall_wins=overall[0],
            overall_losses=overall[1],
            ap_rank=ap_rank,
            net_rank=net_rank,
        )

    return build


@pytest.fixture
def mock_client():
    """httpx.AsyncClient backed by a url -> (status, body) routing table."""

    def build(routes):
        def handler(request: httpx.Request) -> httpx.Response:
            for prefix, (status, body) in routes.items():
                if str(request.url).startswith(prefix):
                    if isinstance(body, (dict, list)):
                        return httpx.Response(status, json=body)
                    return httpx.Response(status, text=body)
            return httpx.Response(404, text="not found")

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return build
