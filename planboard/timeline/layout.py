"""Timeline layout engine.

Responsibility:
Deterministic transformation of schedule items into Gantt chart geometry.
Input: ScheduleItem list + zoom -> Output: TimelineLayout

Every function here is pure. Same items, zoom, cell width and config give an
identical layout, and no input shape (empty list, inverted dates, progress
outside 0-100, unreadable dates) makes the engine raise. Visibility policy
belongs to the renderer: out-of-span dates just produce offsets outside
``[0, chart_width_px]``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

from ..config import LayoutConfig
from ..schedule.dates import (
    MAX_INSTANT,
    MIN_INSTANT,
    ONE_DAY,
    month_label,
    next_month,
    parse_instant,
    shift,
    start_of_day,
    start_of_month,
    whole_days_between,
)
from ..schedule.models import (
    CalendarSpan,
    DayColumn,
    DependencyLink,
    MonthBand,
    ScheduleItem,
    TaskBarGeometry,
    TimelineLayout,
    ZoomLevel,
)

logger = logging.getLogger(__name__)

MAX_BUFFER_DAYS = (MAX_INSTANT - MIN_INSTANT).days


def coerce_zoom(value) -> ZoomLevel:
    if isinstance(value, ZoomLevel):
        return value
    if isinstance(value, str):
        try:
            return ZoomLevel(value.strip().lower())
        except ValueError:
            pass
    logger.warning("Unknown zoom %r, using %s", value, ZoomLevel.WEEK.value)
    return ZoomLevel.WEEK


def _item_dates(items: Sequence[ScheduleItem]) -> list[datetime]:
    dates = []
    for item in items:
        for value in (item.start_date, item.end_date):
            parsed = parse_instant(value)
            if parsed is not None:
                dates.append(parsed)
    return dates


def calculate_span(
    items: Sequence[ScheduleItem],
    buffer_days: int = 0,
    now: datetime | None = None,
) -> CalendarSpan:
    """Union of all item date ranges, widened by ``buffer_days`` on each side.

    The span starts at midnight of its first day so day columns line up with
    calendar days. ``total_days`` counts calendar days inclusively and is
    never below 1.
    """
    dates = _item_dates(items)
    if not dates:
        anchor = parse_instant(now) or datetime.now(timezone.utc)
        return CalendarSpan(start_date=start_of_day(anchor), end_date=anchor, total_days=1)

    buffer = timedelta(days=min(max(buffer_days, 0), MAX_BUFFER_DAYS))
    start = start_of_day(shift(min(dates), -buffer))
    end = shift(max(dates), buffer)
    total_days = (start_of_day(end) - start).days + 1
    return CalendarSpan(start_date=start, end_date=end, total_days=max(total_days, 1))


def position_of(value, span: CalendarSpan, cell_width_px: int) -> int:
    """Pixel offset of ``value`` from the start of the span.

    Unreadable values sit at offset 0 rather than raising.
    """
    instant = parse_instant(value)
    if instant is None:
        logger.debug("Unreadable date %r positioned at span start", value)
        return 0
    return whole_days_between(span.start_date, instant) * cell_width_px


def build_month_bands(span: CalendarSpan, cell_width_px: int) -> tuple[MonthBand, ...]:
    """One header band per calendar month touched by the span.

    Bands are clipped to the chart: the first month may begin before the span
    and the last may run past it, but neither band leaves the chart area.
    """
    chart_width = span.total_days * cell_width_px
    bands = []
    cursor = start_of_month(span.start_date)
    while cursor <= span.end_date:
        following = next_month(cursor)
        start_px = max(position_of(cursor, span, cell_width_px), 0)
        end_px = chart_width
        if following is not None:
            end_px = min(position_of(following, span, cell_width_px), chart_width)
        bands.append(
            MonthBand(
                label=month_label(cursor),
                start_offset_px=start_px,
                width_px=max(end_px - start_px, 0),
            )
        )
        if following is None:
            break
        cursor = following
    return tuple(bands)


def build_day_columns(span: CalendarSpan, cell_width_px: int) -> tuple[DayColumn, ...]:
    columns = []
    for index in range(span.total_days):
        day = span.start_date + index * ONE_DAY
        columns.append(
            DayColumn(
                index=index,
                date=day,
                label=str(day.day),
                offset_px=index * cell_width_px,
                width_px=cell_width_px,
                is_weekend=day.weekday() >= 5,
            )
        )
    return tuple(columns)


def build_bar(
    item: ScheduleItem,
    span: CalendarSpan,
    cell_width_px: int,
    minimum_bar_width_px: int = 20,
    row: int = 0,
) -> TaskBarGeometry:
    """Bar geometry for one item.

    Zero-length and inverted items still get ``minimum_bar_width_px`` so they
    stay visible and clickable.
    """
    left = position_of(item.start_date, span, cell_width_px)
    raw_width = position_of(item.end_date, span, cell_width_px) - left
    width = max(raw_width, minimum_bar_width_px)
    progress = item.progress
    return TaskBarGeometry(
        item_id=item.id,
        name=item.name,
        row=row,
        left_px=left,
        width_px=width,
        fill_width_px=width * progress / 100,
        progress=progress,
        is_critical=bool(item.is_critical),
        dependency_ids=tuple(item.dependency_ids),
    )


def build_links(bars: Sequence[TaskBarGeometry]) -> tuple[DependencyLink, ...]:
    """Connectors from each predecessor's bar end to its successor's bar start.

    Predecessors missing from the chart are ignored; with duplicate ids the
    first row wins.
    """
    by_id: dict[str, TaskBarGeometry] = {}
    for bar in bars:
        by_id.setdefault(bar.item_id, bar)

    links = []
    for bar in bars:
        for dep_id in bar.dependency_ids:
            pred = by_id.get(dep_id)
            if pred is None:
                continue
            links.append(
                DependencyLink(
                    from_id=pred.item_id,
                    to_id=bar.item_id,
                    from_row=pred.row,
                    to_row=bar.row,
                    from_x_px=pred.left_px + pred.width_px,
                    to_x_px=bar.left_px,
                )
            )
    return tuple(links)


def compute_layout(
    items: Sequence[ScheduleItem],
    zoom: ZoomLevel | str = ZoomLevel.WEEK,
    cell_width_px: int | None = None,
    config: LayoutConfig | None = None,
    now: datetime | None = None,
) -> TimelineLayout:
    """Lay out ``items`` as a Gantt chart.

    ``cell_width_px`` overrides the configured width for ``zoom``. Bars keep
    the order of ``items``; the engine never sorts rows.
    """
    config = config or LayoutConfig()
    zoom = coerce_zoom(zoom)
    if not isinstance(cell_width_px, int) or isinstance(cell_width_px, bool) or cell_width_px < 1:
        if cell_width_px is not None:
            logger.warning("Ignoring cell width %r", cell_width_px)
        cell_width_px = config.cell_width_for(zoom)

    span = calculate_span(items, config.buffer_days, now=now)
    bars = tuple(
        build_bar(item, span, cell_width_px, config.minimum_bar_width_px, row=row)
        for row, item in enumerate(items)
    )
    logger.debug(
        "Laid out %d items over %d days at %s zoom (%dpx/day)",
        len(bars), span.total_days, zoom.value, cell_width_px,
    )
    return TimelineLayout(
        span=span,
        month_bands=build_month_bands(span, cell_width_px),
        day_columns=build_day_columns(span, cell_width_px),
        bars=bars,
        links=build_links(bars),
        zoom=zoom,
        cell_width_px=cell_width_px,
    )
