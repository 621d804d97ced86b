import asyncio
from datetime import datetime, timezone
from typing import Optional, Protocol

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from standings_kiosk.config.settings import settings
from standings_kiosk.models.snapshot import StandingsSnapshot
from standings_kiosk.models.team import AnnotatedRecord
from .status import format_last_updated, is_stale


class StandingsRenderer(Protocol):
    """Display collaborator handed each finished snapshot."""

    def render(self, snapshot: StandingsSnapshot) -> None: ...

    def show_error(self, message: str) -> None: ...

    def set_connection_status(self, online: bool) -> None: ...

    def update_status(self, last_update: Optional[datetime]) -> None: ...


def change_marker(record: AnnotatedRecord) -> str:
    if record.moved_up:
        return f"↑{record.position_delta}"
    if record.moved_down:
        return f"↓{abs(record.position_delta)}"
    return ""


class ConsoleRenderer:
    """Draws the standings board in the terminal with rich."""

    def __init__(
        self,
        console: Optional[Console] = None,
        title: str = "Big Ten Standings",
        favorite_team: Optional[str] = None,
        highlight_seconds: Optional[float] = None,
        stale_threshold_seconds: Optional[float] = None,
    ):
        self.console = console or Console()
        self.title = title
        self.favorite_team = favorite_team if favorite_team is not None else settings.favorite
        self.highlight_seconds = (
            settings.position_change_duration_seconds
            if highlight_seconds is None
            else highlight_seconds
        )
        self.stale_threshold_seconds = (
            stale_threshold_seconds or settings.stale_threshold_seconds
        )
        self.online = True
        self._snapshot: Optional[StandingsSnapshot] = None
        self.last_update: Optional[datetime] = None
        self._clear_handle: Optional[asyncio.TimerHandle] = None

    def build_table(self, snapshot: StandingsSnapshot, show_changes: bool = True) -> Table:
        table = Table(expand=True, header_style="bold")
        table.add_column("#", justify="right", width=3)
        table.add_column("Team", ratio=3)
        table.add_column("Conf", justify="center")
        table.add_column("Ovr", justify="center")
        table.add_column("", justify="left", width=4)

        for record in snapshot.records:
            team = Text()
            if record.is_ranked:
                team.append(f"{record.ap_rank} ", style="dim")
            team.append(record.team, style="bold")
            if record.has_net_rank:
                team.append(f"  NET {record.net_rank}", style="dim italic")

            marker = change_marker(record) if show_changes else ""
            marker_style = "green" if record.moved_up else "red"
            row_style = "on dark_red" if self.favorite_team and record.team == self.favorite_team else None
            table.add_row(
                f"{record.position}.",
                team,
                record.conf,
                record.ovr,
                Text(marker, style=marker_style),
                style=row_style,
            )
        return table

    def _footer(self, snapshot: StandingsSnapshot) -> Text:
        now = datetime.now(timezone.utc).astimezone()
        last_update = self.last_update or snapshot.generated_at
        stale = is_stale(last_update, now, self.stale_threshold_seconds)
        footer = Text(format_last_updated(last_update, now), style="red" if stale else "dim")
        if stale:
            footer.append("  STALE", style="bold red")
        footer.append("  ●" if self.online else "  ○", style="green" if self.online else "red")
        return footer

    def _draw(self, show_changes: bool) -> None:
        if self._snapshot is None:
            return
        self.console.print(
            Panel(
                self.build_table(self._snapshot, show_changes),
                title=self.title,
                subtitle=self._footer(self._snapshot),
            )
        )

    def render(self, snapshot: StandingsSnapshot) -> None:
        self._snapshot = snapshot
        self.last_update = snapshot.generated_at
        self.online = True
        self._draw(show_changes=True)

        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
        if snapshot.changed() and self.highlight_seconds > 0:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop; change markers stay until the next render")
            else:
                self._clear_handle = loop.call_later(
                    self.highlight_seconds, self._draw, False
                )

    def show_error(self, message: str) -> None:
        self.console.print(Panel(Text(message, style="bold red"), title=self.title))

    def set_connection_status(self, online: bool) -> None:
        if online == self.online:
            return
        self.online = online
        self.console.print(
            Text("● Connected" if online else "○ Offline - retrying", style="green" if online else "red")
        )

    def update_status(self, last_update: Optional[datetime]) -> None:
        """Redraws the last board with the footer recomputed from `last_update`."""
        self.last_update = last_update
        self._draw(show_changes=False)
