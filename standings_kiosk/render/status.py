from datetime import datetime, timedelta
from typing import Optional

WAITING_TEXT = "Waiting for data..."


def is_stale(last_update: Optional[datetime], now: datetime, threshold_seconds: float) -> bool:
    """True when there has never been an update or the last one is too old."""
    if last_update is None:
        return True
    return (now - last_update).total_seconds() > threshold_seconds


def _clock(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_last_updated(last_update: Optional[datetime], now: datetime) -> str:
    """'Last updated today at 3:05 PM', 'yesterday at ...' or 'M/D at ...'.

    Both datetimes are compared in `now`'s timezone.
    """
    if last_update is None:
        return WAITING_TEXT
    if now.tzinfo is not None and last_update.tzinfo is not None:
        last_update = last_update.astimezone(now.tzinfo)

    if last_update.date() == now.date():
        day = "today"
    elif last_update.date() == (now - timedelta(days=1)).date():
        day = "yesterday"
    else:
        day = f"{last_update.month}/{last_update.day}"
    return f"Last updated {day} at {_clock(last_update)}"
