from .models import (
    STATUS_ORDER,
    CalendarSpan,
    DayColumn,
    DependencyLink,
    DragState,
    KanbanCard,
    MonthBand,
    Priority,
    ScheduleItem,
    Status,
    TaskBarGeometry,
    TimelineLayout,
    ZoomLevel,
    clamp_progress,
    coerce_status,
)

__all__ = [
    "STATUS_ORDER",
    "CalendarSpan",
    "DayColumn",
    "DependencyLink",
    "DragState",
    "KanbanCard",
    "MonthBand",
    "Priority",
    "ScheduleItem",
    "Status",
    "TaskBarGeometry",
    "TimelineLayout",
    "ZoomLevel",
    "clamp_progress",
    "coerce_status",
]
