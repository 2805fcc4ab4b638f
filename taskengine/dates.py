"""Resolve short date expressions into absolute datetimes.

Supported expressions (case-insensitive, surrounding whitespace ignored):

- ISO dates: '2025-12-31' -> that day at 00:00:00
- Relative offsets: '+3d', '-1w', '+2m', '+1y' applied to the reference,
  keeping the reference's time of day
- Named anchors: 'today', 'tomorrow', 'yesterday', 'som', 'eom', 'soy', 'eoy'
- Weekday names: 'monday' .. 'sunday' -> next occurrence strictly after the
  reference day, at 00:00:00

Anything else resolves to None. A None result is the normal "this is not a
date" answer and callers treat the text as plain words.

Month and year offsets use dateutil's relativedelta, which clamps to the last
valid day of the target month: Jan 31 + 1 month is Feb 28 (Feb 29 in leap
years), Feb 29 + 1 year is Feb 28.

Every result carries the reference's tzinfo.
"""
from datetime import datetime
import logging
import re

from dateutil.relativedelta import relativedelta

from . import config
from .utils import WEEKDAYS_EN, end_of_day, start_of_day

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
RELATIVE_RE = re.compile(r"([+-])(\d+)([dwmy])", re.ASCII)
NAMED_DATES = ('today', 'tomorrow', 'yesterday', 'eom', 'eoy', 'soy', 'som')


def _log_rejected(expr: str) -> None:
    if config.LOG_UNPARSEABLE:
        logger.debug('not a date expression: %r', expr)


def _parse_iso_date(m: re.Match, reference: datetime) -> datetime | None:
    try:
        return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)), tzinfo=reference.tzinfo)
    except ValueError:
        # well-formed but not a calendar date, e.g. 2025-13-45
        return None


def _parse_relative(m: re.Match, reference: datetime) -> datetime | None:
    sign = 1 if m.group(1) == '+' else -1
    value = sign * int(m.group(2))
    unit = m.group(3)
    try:
        if unit == 'd':
            return reference + relativedelta(days=value)
        if unit == 'w':
            return reference + relativedelta(days=value * 7)
        if unit == 'm':
            return reference + relativedelta(months=value)
        if unit == 'y':
            return reference + relativedelta(years=value)
    except (OverflowError, ValueError):
        # offsets that leave the datetime range ('+99999999y')
        return None
    return None


def _parse_named(name: str, reference: datetime) -> datetime | None:
    day = start_of_day(reference)
    if name == 'today':
        return day
    if name == 'tomorrow':
        return day + relativedelta(days=1)
    if name == 'yesterday':
        return day - relativedelta(days=1)
    if name == 'som':
        return day.replace(day=1)
    if name == 'eom':
        # day=31 clamps to the month's real last day (Feb 29 in leap years)
        return end_of_day(reference + relativedelta(day=31))
    if name == 'soy':
        return day.replace(month=1, day=1)
    if name == 'eoy':
        return end_of_day(reference.replace(month=12, day=31))
    return None


def _parse_weekday(name: str, reference: datetime) -> datetime:
    target = WEEKDAYS_EN.index(name)
    days_ahead = (target - reference.weekday() + 7) % 7
    if days_ahead == 0:
        # the next occurrence, never the reference day itself
        days_ahead = 7
    return start_of_day(reference) + relativedelta(days=days_ahead)


def resolve_date_expression(expr: str | None, reference: datetime) -> datetime | None:
    """Resolve a single date expression relative to `reference`.

    Returns None when the expression is not recognized or names an invalid
    calendar date.
    """
    if not expr:
        return None
    e = expr.strip().lower()
    if not e:
        return None

    m = ISO_DATE_RE.fullmatch(e)
    if m:
        out = _parse_iso_date(m, reference)
    else:
        m = RELATIVE_RE.fullmatch(e)
        if m:
            out = _parse_relative(m, reference)
        elif e in NAMED_DATES:
            out = _parse_named(e, reference)
        elif e in WEEKDAYS_EN:
            out = _parse_weekday(e, reference)
        else:
            out = None

    if out is None:
        _log_rejected(expr)
    return out


def is_date_expression(expr: str | None, reference: datetime) -> bool:
    """Return True if expr resolves to a date against reference."""
    return resolve_date_expression(expr, reference) is not None
