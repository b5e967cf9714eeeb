from .details import ScheduleItemDetails, describe_item
from .layout import (
    build_bar,
    build_day_columns,
    build_links,
    build_month_bands,
    calculate_span,
    compute_layout,
    position_of,
)
from .render import render_timeline

__all__ = [
    "ScheduleItemDetails",
    "build_bar",
    "build_day_columns",
    "build_links",
    "build_month_bands",
    "calculate_span",
    "compute_layout",
    "describe_item",
    "position_of",
    "render_timeline",
]
