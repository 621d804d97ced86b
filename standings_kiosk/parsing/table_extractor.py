"""Tolerant regex-based extraction of data tables from HTML.

Upstream pages are scraped rather than contracted, so the markup is not
guaranteed to be well formed. Tables are located by pattern matching instead
of a tree parse, and anything that cannot be read as a row is skipped rather
than raised. Adapters only ever see plain-text cell grids.
"""

import re
from typing import Iterator, List, NamedTuple, Optional

from loguru import logger

from standings_kiosk.errors import TableNotFound

# A standings table must contain more rows than this to win the record heuristic
MIN_TABLE_ROWS = 5
DEFAULT_CONTENT_HINT = "standings"

TABLE_RE = re.compile(r"<table\b([^>]*)>(.*?)</table\s*>", re.IGNORECASE | re.DOTALL)
ROW_RE = re.compile(r"<tr\b[^>]*>(.*?)</tr\s*>", re.IGNORECASE | re.DOTALL)
CELL_RE = re.compile(r"<t([dh])\b[^>]*>(.*?)</t[dh]\s*>", re.IGNORECASE | re.DOTALL)
TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")
RECORD_LIKE_RE = re.compile(r"\d\s*[-–—−]\s*\d")

# &amp; goes last so "&amp;lt;" decodes to "&lt;" rather than "<"
HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


class Table(NamedTuple):
    attributes: str
    body: str


def strip_html(fragment: str) -> str:
    """Removes tags, decodes the basic entities and collapses whitespace."""
    text = TAG_RE.sub("", fragment or "")
    for entity, replacement in HTML_ENTITIES:
        text = re.sub(re.escape(entity), replacement, text, flags=re.IGNORECASE)
    return WHITESPACE_RE.sub(" ", text).strip()


def find_tables(markup: str) -> List[Table]:
    return [Table(m.group(1), m.group(2)) for m in TABLE_RE.finditer(markup or "")]


def _row_count(table: Table) -> int:
    return len(ROW_RE.findall(table.body))


def select_table(tables: List[Table], content_hint: Optional[str] = DEFAULT_CONTENT_HINT) -> Table:
    """Picks the standings table out of every table on the page.

    Preference order: a table with record-like text ("10-4") and more than
    MIN_TABLE_ROWS rows, then a table whose attributes mention the content
    hint, then the first table.
    """
    if not tables:
        raise TableNotFound("No tables found in markup")

    for table in tables:
        if RECORD_LIKE_RE.search(strip_html(table.body)) and _row_count(table) > MIN_TABLE_ROWS:
            return table

    if content_hint:
        hint = content_hint.lower()
        for table in tables:
            if hint in table.attributes.lower():
                logger.debug(f"Selected table by content hint '{content_hint}'")
                return table

    logger.debug("No table matched the standings heuristics, using the first table")
    return tables[0]


def split_cells(row_html: str) -> Optional[List[str]]:
    """Returns the row's cell texts, or None for a header-only row."""
    cells = CELL_RE.findall(row_html)
    if cells and all(kind.lower() == "h" for kind, _ in cells):
        return None
    return [strip_html(content) for _, content in cells]


def iter_table_rows(table: Table, min_cells: int = 1) -> Iterator[List[str]]:
    for row_match in ROW_RE.finditer(table.body):
        cells = split_cells(row_match.group(1))
        if cells is None or len(cells) < min_cells:
            continue
        yield cells


def extract_rows(
    markup: str,
    min_cells: int = 1,
    content_hint: Optional[str] = DEFAULT_CONTENT_HINT,
) -> Iterator[List[str]]:
    """Locates the standings table in `markup` and lazily yields its data rows.

    Args:
        markup: Raw HTML text.
        min_cells: Rows with fewer cells than this are dropped.
        content_hint: Attribute substring used as the secondary selection rule.

    Raises:
        TableNotFound: The markup contains no table at all. Raised on first
            iteration, since the generator is lazy.
    """
    table = select_table(find_tables(markup), content_hint)
    yield from iter_table_rows(table, min_cells)
