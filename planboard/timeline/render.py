"""Text rendition of a TimelineLayout for terminals.

Pixel geometry is scaled to character cells (``chars_per_day`` characters per
day column) and clipped to the chart area; nothing here recomputes layout.
"""

from __future__ import annotations

import math

from rich.markup import escape

from ..schedule.models import TaskBarGeometry, TimelineLayout

FILL_CHAR = "█"
REMAINING_CHAR = "░"
CRITICAL_REMAINING_CHAR = "▒"
CRITICAL_MARK = "!"


def _to_col(px: float, layout: TimelineLayout, chars_per_day: int) -> float:
    return px * chars_per_day / layout.cell_width_px


def bar_columns(bar: TaskBarGeometry, layout: TimelineLayout, chars_per_day: int) -> tuple[int, int] | None:
    """Visible ``[start, end)`` character columns of a bar, or None if off-chart."""
    chart_cols = layout.span.total_days * chars_per_day
    start = math.floor(_to_col(bar.left_px, layout, chars_per_day))
    end = math.ceil(_to_col(bar.left_px + bar.width_px, layout, chars_per_day))
    if end <= 0 or start >= chart_cols:
        return None
    start = max(start, 0)
    end = min(end, chart_cols)
    return start, max(end, start + 1)


def _fit(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: width - 1] + "…"
    return text.ljust(width)


def _month_row(layout: TimelineLayout, chars_per_day: int) -> str:
    chart_cols = layout.span.total_days * chars_per_day
    cells = [" "] * chart_cols
    for band in layout.month_bands:
        start = math.floor(_to_col(band.start_offset_px, layout, chars_per_day))
        end = min(
            math.floor(_to_col(band.start_offset_px + band.width_px, layout, chars_per_day)),
            chart_cols,
        )
        for i, ch in enumerate(band.label[: max(end - start, 0)]):
            cells[start + i] = ch
    return "".join(cells)


def _day_row(layout: TimelineLayout, chars_per_day: int) -> str:
    parts = []
    for column in layout.day_columns:
        if len(column.label) < chars_per_day:
            parts.append(column.label.rjust(chars_per_day))
        else:
            # Too narrow for numbers: mark week starts only
            mark = "|" if column.date.weekday() == 0 else "."
            parts.append(mark.ljust(chars_per_day))
    return "".join(parts)


def _bar_row(bar: TaskBarGeometry, layout: TimelineLayout, chars_per_day: int, markup: bool) -> str:
    chart_cols = layout.span.total_days * chars_per_day
    cols = bar_columns(bar, layout, chars_per_day)
    if cols is None:
        return " " * chart_cols
    start, end = cols
    length = end - start
    filled = round(length * bar.progress / 100)
    remaining = CRITICAL_REMAINING_CHAR if bar.is_critical else REMAINING_CHAR
    segment = FILL_CHAR * filled + remaining * (length - filled)
    if markup:
        color = "red" if bar.is_critical else "blue"
        segment = f"[{color}]{segment}[/]"
    return " " * start + segment + " " * (chart_cols - end)


def render_timeline(
    layout: TimelineLayout,
    chars_per_day: int = 3,
    label_width: int = 24,
    markup: bool = False,
) -> str:
    """Render month bands, day numbers and one row per bar as text.

    Critical items are flagged with ``!`` in the label column; with
    ``markup=True`` bars are also coloured using Rich markup.
    """
    chars_per_day = max(chars_per_day, 1)
    label_width = max(label_width, 4)

    header = _fit("Tasks", label_width)
    month_row = _month_row(layout, chars_per_day)
    day_row = _day_row(layout, chars_per_day)
    if markup:
        month_row = escape(month_row)
    lines = [header + " " + month_row, " " * label_width + " " + day_row]

    for bar in layout.bars:
        mark = CRITICAL_MARK if bar.is_critical else " "
        label = _fit(f"{mark} {bar.name}", label_width)
        if markup:
            label = escape(label)
        lines.append(label + " " + _bar_row(bar, layout, chars_per_day, markup))
    return "\n".join(line.rstrip() for line in lines)
