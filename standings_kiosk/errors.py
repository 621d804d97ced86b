from typing import Iterable, Optional


class StandingsError(Exception):
    """Base exception for standings pipeline errors."""

    pass


class TableNotFound(StandingsError):
    """No candidate table could be located in the markup."""

    pass


class MissingColumns(StandingsError):
    """A delimited-text source lacks one or more required columns."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class UpstreamUnavailable(StandingsError):
    """Non-success HTTP status or transport failure from a source."""

    def __init__(self, source: str, status: Optional[int] = None, reason: str = ""):
        self.source = source
        self.status = status
        detail = f"{source} returned {status}" if status else f"{source} unavailable"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class EmptyResult(StandingsError):
    """A source parsed successfully but produced zero records."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"No standings data found from {source}")


class ParseWarning:
    """A single malformed row that was skipped. Recorded, never raised."""

    __slots__ = ("source", "row_index", "reason")

    def __init__(self, source: str, row_index: int, reason: str):
        self.source = source
        self.row_index = row_index
        self.reason = reason

    def __repr__(self):
        return f"ParseWarning(source={self.source!r}, row={self.row_index}, reason={self.reason!r})"
