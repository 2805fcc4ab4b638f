from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, NamedTuple, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from .utils import now_utc


class Priority(str, Enum):
    HIGH = 'HIGH'
    MEDIUM = 'MEDIUM'
    LOW = 'LOW'


class TaskStatus(str, Enum):
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    DELETED = 'DELETED'
    WAITING = 'WAITING'
    RECURRING = 'RECURRING'


class RecurrenceUnit(str, Enum):
    DAY = 'DAY'
    WEEK = 'WEEK'
    MONTH = 'MONTH'
    YEAR = 'YEAR'


class RecurrencePattern(NamedTuple):
    """A parsed recurrence code such as 'P2W' -> (2, WEEK)."""
    amount: int
    unit: RecurrenceUnit


class ElementKind(str, Enum):
    """Category of a recognized token in free task text."""
    DUE_DATE = 'DUE_DATE'
    PRIORITY = 'PRIORITY'
    PROJECT = 'PROJECT'
    TAG = 'TAG'


class _Element(BaseModel):
    model_config = ConfigDict(frozen=True)

    # original token text and its [start, end) offsets in the parsed input
    token: str
    start: int
    end: int


class DueDateElement(_Element):
    kind: Literal[ElementKind.DUE_DATE] = ElementKind.DUE_DATE
    value: datetime


class PriorityElement(_Element):
    kind: Literal[ElementKind.PRIORITY] = ElementKind.PRIORITY
    value: Priority


class ProjectElement(_Element):
    kind: Literal[ElementKind.PROJECT] = ElementKind.PROJECT
    value: str


class TagElement(_Element):
    kind: Literal[ElementKind.TAG] = ElementKind.TAG
    value: str


ParsedElement = Annotated[
    Union[DueDateElement, PriorityElement, ProjectElement, TagElement],
    Field(discriminator='kind'),
]


class HighlightSpan(BaseModel):
    """A recognized substring of the input, for downstream highlighting."""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str
    category: ElementKind


class ParsedTask(BaseModel):
    """Structured result of parsing one task's free text.

    `elements` holds every recognized token in appearance order, including
    repeats of a category that were recognized but not kept (only the first
    due date, priority and project win; all tags are kept).
    """
    model_config = ConfigDict(frozen=True)

    description: str = ''
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    project: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    elements: list[ParsedElement] = Field(default_factory=list)

    @property
    def highlights(self) -> list[HighlightSpan]:
        return [
            HighlightSpan(start=e.start, end=e.end, text=e.token, category=e.kind)
            for e in self.elements
        ]


class Task(BaseModel):
    """Full task record as handed over by the repository collaborator.

    A recurrence template is a Task with `recur` set; its instances point back
    to it through `parent` and carry their occurrence number in `imask`.
    """
    model_config = ConfigDict(frozen=True)

    uuid: str = Field(default_factory=lambda: str(uuid4()))
    description: str = ''
    status: TaskStatus = TaskStatus.PENDING
    entry: datetime = Field(default_factory=now_utc)
    modified: Optional[datetime] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    due: Optional[datetime] = None
    wait: Optional[datetime] = None
    scheduled: Optional[datetime] = None
    until: Optional[datetime] = None
    project: Optional[str] = None
    priority: Optional[Priority] = None
    recur: Optional[str] = None
    parent: Optional[str] = None
    imask: Optional[int] = None
    mask: Optional[str] = None
    urgency: float = 0.0
    tags: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    # user defined attributes
    udas: dict[str, Any] = Field(default_factory=dict)


class TaskSnapshot(BaseModel):
    """Read-only view of the task fields the urgency score depends on."""
    model_config = ConfigDict(frozen=True)

    priority: Optional[Priority] = None
    due: Optional[datetime] = None
    scheduled: Optional[datetime] = None
    start: Optional[datetime] = None
    tags: frozenset[str] = frozenset()
    entry: datetime

    @classmethod
    def from_task(cls, task: Task) -> 'TaskSnapshot':
        return cls(
            priority=task.priority,
            due=task.due,
            scheduled=task.scheduled,
            start=task.start,
            tags=frozenset(task.tags),
            entry=task.entry,
        )


class TaskGraphNode(BaseModel):
    """A node in the depends-on graph. An edge A -> B means A depends on B."""
    model_config = ConfigDict(frozen=True)

    uuid: str
    dependencies: tuple[str, ...] = ()

    @classmethod
    def from_task(cls, task: Task) -> 'TaskGraphNode':
        return cls(uuid=task.uuid, dependencies=tuple(task.dependencies))
