"""Recurrence codes and recurring task instance generation.

Recurrence codes are short ISO-8601-like durations: 'P1D', 'P2W', 'P1M',
'P1Y'. `parse_recurrence` turns them into a (amount, unit) pair and
`generate_instances` materializes the next occurrences of a template task.
"""
from datetime import datetime, timedelta
import logging
import re
from typing import Iterable
from uuid import uuid4

from dateutil import rrule as _rrule
from dateutil.relativedelta import relativedelta

from . import config
from .models import RecurrencePattern, RecurrenceUnit, Task, TaskStatus

logger = logging.getLogger(__name__)

RECURRENCE_RE = re.compile(r"P(\d+)([DWMY])", re.ASCII)

_UNIT_CODES = {
    'D': RecurrenceUnit.DAY,
    'W': RecurrenceUnit.WEEK,
    'M': RecurrenceUnit.MONTH,
    'Y': RecurrenceUnit.YEAR,
}

_RRULE_FREQ = {
    RecurrenceUnit.DAY: 'DAILY',
    RecurrenceUnit.WEEK: 'WEEKLY',
    RecurrenceUnit.MONTH: 'MONTHLY',
    RecurrenceUnit.YEAR: 'YEARLY',
}


class RecurrenceError(ValueError):
    """A template can't be expanded: its recurrence code is missing or invalid."""


def parse_recurrence(code: str | None) -> RecurrencePattern | None:
    """Parse a recurrence code like 'P2W' into RecurrencePattern(2, WEEK).

    Input is trimmed and upper-cased first. Returns None for anything that
    isn't P<digits><D|W|M|Y> or that has a zero amount.
    """
    if not code:
        return None
    c = code.strip().upper()
    m = RECURRENCE_RE.fullmatch(c) if c.startswith('P') else None
    if not m:
        if config.LOG_UNPARSEABLE:
            logger.debug('not a recurrence code: %r', code)
        return None
    amount = int(m.group(1))
    if amount <= 0:
        return None
    return RecurrencePattern(amount, _UNIT_CODES[m.group(2)])


def parse_recurrence_duration(code: str | None) -> timedelta | None:
    """Return the recurrence interval as a fixed timedelta.

    This is an approximation: a month counts as 30 days and a year as 365
    days. Use it for rough comparisons only (e.g. sorting templates by
    frequency); due dates are always computed with `next_due_date`, which is
    calendar-exact.
    """
    pattern = parse_recurrence(code)
    if pattern is None:
        return None
    amount, unit = pattern
    if unit is RecurrenceUnit.DAY:
        return timedelta(days=amount)
    if unit is RecurrenceUnit.WEEK:
        return timedelta(days=amount * 7)
    if unit is RecurrenceUnit.MONTH:
        return timedelta(days=amount * 30)
    return timedelta(days=amount * 365)


def recurrence_to_rrule_string(code: str | None) -> str:
    """Export a recurrence code to an RFC5545 RRULE body (no leading 'RRULE:').

    'P2W' -> 'FREQ=WEEKLY;INTERVAL=2'. Returns '' for unparseable codes.
    """
    pattern = parse_recurrence(code)
    if pattern is None:
        return ''
    parts = [f'FREQ={_RRULE_FREQ[pattern.unit]}']
    if pattern.amount != 1:
        parts.append(f'INTERVAL={pattern.amount}')
    return ';'.join(parts)


def build_rrule(code: str | None, dtstart: datetime, until: datetime | None = None):
    """Build a dateutil rrule for the recurrence code anchored at dtstart.

    Raises RecurrenceError if the code can't be parsed.
    """
    pattern = parse_recurrence(code)
    if pattern is None:
        raise RecurrenceError(f'invalid recurrence pattern: {code!r}')
    freq_map = {
        RecurrenceUnit.DAY: _rrule.DAILY,
        RecurrenceUnit.WEEK: _rrule.WEEKLY,
        RecurrenceUnit.MONTH: _rrule.MONTHLY,
        RecurrenceUnit.YEAR: _rrule.YEARLY,
    }
    params: dict = {'freq': freq_map[pattern.unit], 'interval': pattern.amount, 'dtstart': dtstart}
    if until is not None:
        params['until'] = until
    return _rrule.rrule(**params)


def next_due_date(anchor: datetime, amount: int, unit: RecurrenceUnit, instance_number: int) -> datetime:
    """Due date of occurrence `instance_number` of a recurrence anchored at `anchor`.

    The offset is amount * instance_number units added in one step, so
    monthly series don't drift after a short month: Jan 31 + 2 months is
    Mar 31, not Feb 28 + 1 month.
    """
    steps = amount * instance_number
    if unit is RecurrenceUnit.DAY:
        return anchor + relativedelta(days=steps)
    if unit is RecurrenceUnit.WEEK:
        return anchor + relativedelta(days=steps * 7)
    if unit is RecurrenceUnit.MONTH:
        return anchor + relativedelta(months=steps)
    return anchor + relativedelta(years=steps)


def _make_instance(template: Task, due: datetime, imask: int, now: datetime) -> Task:
    return template.model_copy(deep=True, update={
        'uuid': str(uuid4()),
        'status': TaskStatus.PENDING,
        'entry': now,
        'modified': now,
        'start': None,
        'end': None,
        'due': due,
        # instances are scheduled on their due date
        'scheduled': due,
        'parent': template.uuid,
        'imask': imask,
        'mask': None,
    })


def generate_instances(
    template: Task,
    count: int,
    existing_instance_numbers: Iterable[int | None],
    now: datetime,
) -> list[Task]:
    """Materialize the next `count` occurrences of a recurring template.

    Numbering continues after the highest existing instance number. The
    anchor is the template's due date, else its scheduled date, else `now`.
    Generation stops before the first occurrence that falls after
    `template.until`; a short (or empty) batch is a valid result.

    Raises RecurrenceError if the template has no usable recurrence code and
    ValueError if count is not positive.
    """
    if count <= 0:
        raise ValueError(f'count must be positive, got {count}')
    if not template.recur:
        raise RecurrenceError('task does not have a recurrence pattern')
    pattern = parse_recurrence(template.recur)
    if pattern is None:
        raise RecurrenceError(f'invalid recurrence pattern: {template.recur}')
    amount, unit = pattern

    anchor = template.due or template.scheduled or now
    next_imask = max((n for n in existing_instance_numbers if n is not None), default=0) + 1

    out: list[Task] = []
    for i in range(count):
        imask = next_imask + i
        due = next_due_date(anchor, amount, unit, imask)
        if template.until is not None and due > template.until:
            logger.info(
                'recurrence for %s stops at instance %d: %s is past until %s',
                template.uuid, imask, due.isoformat(), template.until.isoformat(),
            )
            break
        out.append(_make_instance(template, due, imask, now))
    return out
