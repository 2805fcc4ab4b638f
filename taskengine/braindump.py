"""Split a "brain dump" blob into separate tasks.

Accepted shapes:

- comma-separated: 'Buy milk tomorrow, Call dentist p1, Review code #work'
- one task per line
- both: lines first, then commas within each line

Each fragment is parsed with `parser.parse_task_text`.
"""
from datetime import datetime
from enum import Enum
import logging
import re

from . import config
from .models import ParsedTask
from .parser import parse_task_text

logger = logging.getLogger(__name__)

# line breaks are \r\n, \r and \n only (no form feeds or unicode separators)
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class SeparatorMode(str, Enum):
    COMMA = 'COMMA'
    NEWLINE = 'NEWLINE'
    MIXED = 'MIXED'


def detect_separator_mode(blob: str, comma_threshold: int | None = None) -> SeparatorMode:
    """Pick how to split blob based on its comma and newline counts."""
    threshold = config.MULTI_TASK_COMMA_THRESHOLD if comma_threshold is None else comma_threshold
    commas = blob.count(',')
    newlines = blob.count('\n')
    if commas >= threshold and newlines == 0:
        return SeparatorMode.COMMA
    if newlines > 0 and commas < threshold:
        return SeparatorMode.NEWLINE
    if commas >= threshold and newlines > 0:
        return SeparatorMode.MIXED
    # single line with few commas: one task
    return SeparatorMode.NEWLINE


def _clean(fragments) -> list[str]:
    out = []
    for f in fragments:
        f = f.strip()
        if f:
            out.append(f)
    return out


def split_tasks(blob: str | None, comma_threshold: int | None = None) -> list[str]:
    """Split blob into trimmed, non-blank task fragments."""
    if not blob or not blob.strip():
        return []
    mode = detect_separator_mode(blob, comma_threshold)
    logger.debug('splitting brain dump in %s mode', mode.value)
    if mode is SeparatorMode.COMMA:
        return _clean(blob.split(','))
    if mode is SeparatorMode.NEWLINE:
        return _clean(LINE_BREAK_RE.split(blob))
    return _clean(part for line in LINE_BREAK_RE.split(blob) for part in line.split(','))


def count_tasks(blob: str | None, comma_threshold: int | None = None) -> int:
    """Number of fragments `split_tasks` would produce, for live previews.

    Fragments made only of metadata tokens still count here even though
    `parse_brain_dump` drops them.
    """
    return len(split_tasks(blob, comma_threshold))


def parse_brain_dump(blob: str | None, reference: datetime, comma_threshold: int | None = None) -> list[ParsedTask]:
    """Split blob and parse every fragment, dropping those with no description."""
    out: list[ParsedTask] = []
    for fragment in split_tasks(blob, comma_threshold):
        parsed = parse_task_text(fragment, reference)
        if not parsed.description.strip():
            logger.debug('dropping fragment without description: %r', fragment)
            continue
        out.append(parsed)
    return out
