"""Natural-language parsing of a single task's text.

Syntax recognized per whitespace-separated token:

- priority: 'p1'/'!1' HIGH, 'p2'/'!2' MEDIUM, 'p3'/'!3' LOW (any case)
- project: '#name'
- tag: '@name'
- due date: any expression understood by `dates.resolve_date_expression`

Example: 'Buy groceries tomorrow #personal @shopping p1'
"""
from datetime import datetime
import logging

from .dates import resolve_date_expression
from .models import (
    DueDateElement,
    ElementKind,
    ParsedElement,
    ParsedTask,
    Priority,
    PriorityElement,
    ProjectElement,
    TagElement,
)
from .utils import iter_tokens

logger = logging.getLogger(__name__)

PRIORITY_TOKENS = {
    'p1': Priority.HIGH,
    '!1': Priority.HIGH,
    'p2': Priority.MEDIUM,
    '!2': Priority.MEDIUM,
    'p3': Priority.LOW,
    '!3': Priority.LOW,
}


def classify_token(token: str, start: int, end: int, reference: datetime) -> ParsedElement | None:
    """Classify one token in isolation; None means it belongs to the description.

    Precedence: priority, project, tag, date.
    """
    priority = PRIORITY_TOKENS.get(token.lower())
    if priority is not None:
        return PriorityElement(token=token, start=start, end=end, value=priority)
    if token.startswith('#') and len(token) > 1:
        return ProjectElement(token=token, start=start, end=end, value=token[1:])
    if token.startswith('@') and len(token) > 1:
        return TagElement(token=token, start=start, end=end, value=token[1:])
    due = resolve_date_expression(token, reference)
    if due is not None:
        return DueDateElement(token=token, start=start, end=end, value=due)
    return None


def parse_task_text(text: str | None, reference: datetime) -> ParsedTask:
    """Parse free task text into a ParsedTask.

    Date tokens are resolved against `reference`. The first due date,
    priority and project win; every tag is kept in order. Unrecognized tokens
    are joined with single spaces to form the description, which may be
    empty.
    """
    if not text or not text.strip():
        return ParsedTask()

    elements: list[ParsedElement] = []
    words: list[str] = []
    for start, end, token in iter_tokens(text):
        element = classify_token(token, start, end, reference)
        if element is None:
            words.append(token)
        else:
            elements.append(element)

    due_date = None
    priority = None
    project = None
    tags: list[str] = []
    for e in elements:
        if e.kind is ElementKind.DUE_DATE:
            if due_date is None:
                due_date = e.value
        elif e.kind is ElementKind.PRIORITY:
            if priority is None:
                priority = e.value
        elif e.kind is ElementKind.PROJECT:
            if project is None:
                project = e.value
        elif e.kind is ElementKind.TAG:
            tags.append(e.value)

    logger.debug('parsed %d tokens: %d recognized, %d description words', len(elements) + len(words), len(elements), len(words))
    return ParsedTask(
        description=' '.join(words).strip(),
        due_date=due_date,
        priority=priority,
        project=project,
        tags=tags,
        elements=elements,
    )
