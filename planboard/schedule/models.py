"""Domain models shared by the timeline and board engines."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


class Status(Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    VERIFIED = "VERIFIED"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_ORDER: tuple[Status, ...] = (
    Status.NOT_STARTED,
    Status.IN_PROGRESS,
    Status.ON_HOLD,
    Status.COMPLETED,
    Status.VERIFIED,
)

STATUS_LABELS: dict[Status, str] = {
    Status.NOT_STARTED: "Not Started",
    Status.IN_PROGRESS: "In Progress",
    Status.ON_HOLD: "On Hold",
    Status.COMPLETED: "Completed",
    Status.VERIFIED: "Verified",
}


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ZoomLevel(Enum):
    WEEK = "week"
    MONTH = "month"


def coerce_status(value) -> Status | None:
    """Return the Status for ``value`` (member, value or name), or None."""
    if isinstance(value, Status):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        try:
            return Status(key)
        except ValueError:
            return None
    return None


def coerce_priority(value) -> Priority | None:
    if isinstance(value, Priority):
        return value
    if isinstance(value, str):
        try:
            return Priority(value.strip().lower())
        except ValueError:
            return None
    return None


def clamp_progress(value) -> int:
    """Clamp a progress value into [0, 100]; unreadable values count as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return int(round(max(0.0, min(100.0, number))))


@dataclass(frozen=True)
class ScheduleItem:
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    progress_percentage: int = 0
    is_critical: bool = False
    dependency_ids: tuple[str, ...] = ()

    @property
    def progress(self) -> int:
        return clamp_progress(self.progress_percentage)

    def with_progress(self, progress_percentage: int) -> ScheduleItem:
        return replace(self, progress_percentage=progress_percentage)


@dataclass(frozen=True)
class KanbanCard:
    id: str
    title: str
    status: Status
    description: str | None = None
    due_date: datetime | None = None
    priority: Priority | None = None
    assignee: str | None = None
    metadata: dict = field(default_factory=dict, compare=False, hash=False)

    def with_status(self, status: Status) -> KanbanCard:
        return replace(self, status=status)


@dataclass(frozen=True)
class DragState:
    card: KanbanCard
    source_status: Status


# -- Timeline layout output --------------------------------------------------


@dataclass(frozen=True)
class CalendarSpan:
    start_date: datetime
    end_date: datetime
    total_days: int


@dataclass(frozen=True)
class MonthBand:
    label: str
    start_offset_px: int
    width_px: int


@dataclass(frozen=True)
class DayColumn:
    index: int
    date: datetime
    label: str
    offset_px: int
    width_px: int
    is_weekend: bool = False


@dataclass(frozen=True)
class TaskBarGeometry:
    item_id: str
    name: str
    row: int
    left_px: int
    width_px: int
    fill_width_px: float
    progress: int
    is_critical: bool
    dependency_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class DependencyLink:
    from_id: str
    to_id: str
    from_row: int
    to_row: int
    from_x_px: int
    to_x_px: int


@dataclass(frozen=True)
class TimelineLayout:
    span: CalendarSpan
    month_bands: tuple[MonthBand, ...]
    day_columns: tuple[DayColumn, ...]
    bars: tuple[TaskBarGeometry, ...]
    links: tuple[DependencyLink, ...] = ()
    zoom: ZoomLevel = ZoomLevel.WEEK
    cell_width_px: int = 40

    @property
    def chart_width_px(self) -> int:
        return self.span.total_days * self.cell_width_px
