"""Runtime configuration for the task engine.

Settings are read from environment variables so urgency coefficients and
parsing thresholds can be tuned without code changes. Every value falls back
to the documented default when the variable is unset or malformed.
"""
import os


def _trueish(v: str | None) -> bool:
    if not v:
        return False
    return v.lower() in ('1', 'true', 'yes', 'on')


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Urgency coefficients. The defaults match Taskwarrior's stock weights; any of
# them can be overridden per deployment, e.g. URGENCY_TAG_NEXT=10.
URGENCY_PRIORITY_HIGH = _float_env('URGENCY_PRIORITY_HIGH', 6.0)
URGENCY_PRIORITY_MEDIUM = _float_env('URGENCY_PRIORITY_MEDIUM', 3.9)
URGENCY_PRIORITY_LOW = _float_env('URGENCY_PRIORITY_LOW', 1.8)
URGENCY_TAG_NEXT = _float_env('URGENCY_TAG_NEXT', 15.0)
URGENCY_ACTIVE = _float_env('URGENCY_ACTIVE', 4.0)
URGENCY_SCHEDULED = _float_env('URGENCY_SCHEDULED', 5.0)

# Due-date proximity buckets: overdue, < 1 day, < 3, < 7, < 14, < 30, beyond.
URGENCY_OVERDUE = _float_env('URGENCY_OVERDUE', 15.0)
URGENCY_DUE_IMMINENT = _float_env('URGENCY_DUE_IMMINENT', 12.0)
URGENCY_DUE_VERY_SOON = _float_env('URGENCY_DUE_VERY_SOON', 9.0)
URGENCY_DUE_SOON = _float_env('URGENCY_DUE_SOON', 6.0)
URGENCY_DUE_NEAR = _float_env('URGENCY_DUE_NEAR', 3.0)
URGENCY_DUE_FAR = _float_env('URGENCY_DUE_FAR', 1.5)
URGENCY_DUE_DISTANT = _float_env('URGENCY_DUE_DISTANT', 0.2)

URGENCY_BLOCKING = _float_env('URGENCY_BLOCKING', 8.0)
URGENCY_BLOCKED = _float_env('URGENCY_BLOCKED', -5.0)

# Age bonus per day since entry, and the cap on that bonus.
URGENCY_AGE = _float_env('URGENCY_AGE', 0.1)
URGENCY_MAX_AGE_BONUS = _float_env('URGENCY_MAX_AGE_BONUS', 2.0)

# A multi-task blob with at least this many commas is split on commas.
MULTI_TASK_COMMA_THRESHOLD = _int_env('MULTI_TASK_COMMA_THRESHOLD', 2)

# Number of recurring instances generated when the caller doesn't ask for a
# specific count.
DEFAULT_INSTANCE_COUNT = _int_env('DEFAULT_INSTANCE_COUNT', 1)

# When true, every rejected date/recurrence expression is logged at DEBUG.
# Off by default since plain description words are rejected all the time.
LOG_UNPARSEABLE = _trueish(os.getenv('LOG_UNPARSEABLE', '0'))


# Optional local overrides: define variables in taskengine/local_config.py to
# change the defaults above without touching versioned config. Keep that file
# out of version control.
try:
    from .local_config import *  # type: ignore  # noqa: F401,F403
except ImportError:
    # No local overrides present; proceed with defaults.
    pass
