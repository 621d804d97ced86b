from enum import Enum


class DataSource(str, Enum):
    WARRENNOLAN = "warrennolan"  # Extended table: records + NET
    SIMPLE_HTML = "simple_html"  # Rank | Team | Conf | Overall
    ESPN = "espn"  # Structured standings API
    CSV = "csv"  # Published spreadsheet export
    AP_POLL = "ap_poll"  # Supplementary poll ranks only


class SourceRole(str, Enum):
    PRIMARY = "PRIMARY"  # Authoritative for the team universe
    SUPPLEMENTARY = "SUPPLEMENTARY"  # Enrichment only, may fail
