from datetime import datetime, timedelta, timezone
import re

WEEKDAYS_EN = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']

_TOKEN_RE = re.compile(r"\S+", re.ASCII)


def now_utc() -> datetime:
    """Return timezone-aware current UTC datetime."""
    return datetime.now(timezone.utc)


def days_between(start: datetime, end: datetime) -> float:
    """Return (end - start) in days as a continuous value (negative if end is earlier)."""
    return (end - start) / timedelta(days=1)


def start_of_day(dt: datetime) -> datetime:
    """Return dt with the time-of-day reset to 00:00:00, keeping its tzinfo."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Return dt at 23:59:59 of the same day, keeping its tzinfo."""
    return dt.replace(hour=23, minute=59, second=59, microsecond=0)


def iter_tokens(text: str | None):
    """Yield (start, end, token) for every whitespace-separated token in text.

    Offsets index into the original string so callers can slice it back out.
    """
    if not text:
        return
    for m in _TOKEN_RE.finditer(text):
        yield m.start(), m.end(), m.group(0)
