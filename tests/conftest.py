import sys
import pathlib
from datetime import datetime, timezone

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from taskengine.models import Task, TaskStatus  # noqa: E402
from taskengine.repository import InMemoryTaskRepository  # noqa: E402


# Sunday 15 June 2025, midday UTC. Most date tests resolve against this.
REF = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def ref():
    return REF


@pytest.fixture
def repo():
    """Repository with a small dependency chain (write -> review -> ship) and
    a weekly recurring template."""
    write = Task(uuid='write', description='Write report', entry=REF)
    review = Task(uuid='review', description='Review report', entry=REF, dependencies=['write'])
    ship = Task(uuid='ship', description='Ship report', entry=REF, dependencies=['review'])
    done = Task(uuid='done', description='Old thing', entry=REF, status=TaskStatus.COMPLETED, dependencies=['write'])
    standup = Task(
        uuid='standup',
        description='Team standup',
        entry=REF,
        status=TaskStatus.RECURRING,
        recur='P1W',
        due=datetime(2025, 6, 16, 9, 30, tzinfo=timezone.utc),
        project='work',
        tags=['meeting'],
    )
    return InMemoryTaskRepository([write, review, ship, done, standup])
