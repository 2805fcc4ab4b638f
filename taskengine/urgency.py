"""Task urgency scoring.

Urgency is the sum of independent terms:

- priority: H 6.0, M 3.9, L 1.8
- due date proximity: overdue 15.0, then 12.0 / 9.0 / 6.0 / 3.0 / 1.5 for
  less than 1 / 3 / 7 / 14 / 30 days left, 0.2 beyond that
- 'next' tag (any case): 15.0
- active (started): 4.0
- scheduled: 5.0
- 8.0 per task this one blocks, -5.0 per outstanding task blocking it
- age: 0.1 per day since entry, capped at 2.0

Only the total is floored at zero. Individual terms may be negative (the
blocked term always is, and so is the age term for an entry in the future).
"""
from datetime import datetime
import logging

from pydantic import BaseModel, ConfigDict

from . import config
from .models import Priority, TaskSnapshot
from .utils import days_between

logger = logging.getLogger(__name__)


class UrgencyConfig(BaseModel):
    """Urgency coefficients. `UrgencyConfig()` carries the stock defaults;
    `UrgencyConfig.from_settings()` picks up the environment overrides from
    taskengine.config.
    """
    model_config = ConfigDict(frozen=True)

    priority_high: float = 6.0
    priority_medium: float = 3.9
    priority_low: float = 1.8

    tag_next: float = 15.0

    active: float = 4.0
    scheduled: float = 5.0

    overdue: float = 15.0
    due_imminent: float = 12.0    # < 1 day
    due_very_soon: float = 9.0    # < 3 days
    due_soon: float = 6.0         # < 7 days
    due_near: float = 3.0         # < 14 days
    due_far: float = 1.5          # < 30 days
    due_distant: float = 0.2      # >= 30 days

    blocking: float = 8.0
    blocked: float = -5.0

    age: float = 0.1
    max_age_bonus: float = 2.0

    @classmethod
    def from_settings(cls) -> 'UrgencyConfig':
        return cls(
            priority_high=config.URGENCY_PRIORITY_HIGH,
            priority_medium=config.URGENCY_PRIORITY_MEDIUM,
            priority_low=config.URGENCY_PRIORITY_LOW,
            tag_next=config.URGENCY_TAG_NEXT,
            active=config.URGENCY_ACTIVE,
            scheduled=config.URGENCY_SCHEDULED,
            overdue=config.URGENCY_OVERDUE,
            due_imminent=config.URGENCY_DUE_IMMINENT,
            due_very_soon=config.URGENCY_DUE_VERY_SOON,
            due_soon=config.URGENCY_DUE_SOON,
            due_near=config.URGENCY_DUE_NEAR,
            due_far=config.URGENCY_DUE_FAR,
            due_distant=config.URGENCY_DUE_DISTANT,
            blocking=config.URGENCY_BLOCKING,
            blocked=config.URGENCY_BLOCKED,
            age=config.URGENCY_AGE,
            max_age_bonus=config.URGENCY_MAX_AGE_BONUS,
        )


DEFAULT_URGENCY_CONFIG = UrgencyConfig()


def priority_score(priority: Priority | None, cfg: UrgencyConfig = DEFAULT_URGENCY_CONFIG) -> float:
    if priority is Priority.HIGH:
        return cfg.priority_high
    if priority is Priority.MEDIUM:
        return cfg.priority_medium
    if priority is Priority.LOW:
        return cfg.priority_low
    return 0.0


def due_proximity_score(due: datetime | None, now: datetime, cfg: UrgencyConfig = DEFAULT_URGENCY_CONFIG) -> float:
    """Score for how close the due date is. Due exactly now is 'imminent', not overdue."""
    if due is None:
        return 0.0
    days_left = days_between(now, due)
    if days_left < 0:
        return cfg.overdue
    if days_left < 1:
        return cfg.due_imminent
    if days_left < 3:
        return cfg.due_very_soon
    if days_left < 7:
        return cfg.due_soon
    if days_left < 14:
        return cfg.due_near
    if days_left < 30:
        return cfg.due_far
    return cfg.due_distant


def age_score(entry: datetime, now: datetime, cfg: UrgencyConfig = DEFAULT_URGENCY_CONFIG) -> float:
    return min(days_between(entry, now) * cfg.age, cfg.max_age_bonus)


def calculate_urgency(
    task: TaskSnapshot,
    blocking_count: int,
    blocked_count: int,
    now: datetime,
    cfg: UrgencyConfig | None = None,
) -> float:
    """Compute the urgency of `task` at `now`. The result is never negative.

    blocking_count is the number of tasks depending on this one;
    blocked_count the number of outstanding tasks this one depends on.
    """
    if blocking_count < 0 or blocked_count < 0:
        raise ValueError('dependency counts must be non-negative')
    cfg = cfg or DEFAULT_URGENCY_CONFIG

    urgency = priority_score(task.priority, cfg)
    urgency += due_proximity_score(task.due, now, cfg)
    if any(t.lower() == 'next' for t in task.tags):
        urgency += cfg.tag_next
    if task.start is not None:
        urgency += cfg.active
    if task.scheduled is not None:
        urgency += cfg.scheduled
    urgency += blocking_count * cfg.blocking
    urgency += blocked_count * cfg.blocked
    urgency += age_score(task.entry, now, cfg)

    if urgency < 0:
        logger.debug('urgency %.2f floored to 0 (blocked by %d)', urgency, blocked_count)
    return max(0.0, urgency)
