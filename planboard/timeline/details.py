"""Detail view of a single schedule item (the panel shown when a bar is clicked)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ..schedule.dates import days_between
from ..schedule.models import ScheduleItem


@dataclass(frozen=True)
class ScheduleItemDetails:
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    duration_days: int
    progress: int
    is_critical: bool
    # (id, display name) per predecessor, in the item's dependency order
    dependencies: tuple[tuple[str, str], ...] = ()


def describe_item(item: ScheduleItem, items: Sequence[ScheduleItem] = ()) -> ScheduleItemDetails:
    names = {}
    for other in items:
        names.setdefault(other.id, other.name)
    duration = math.ceil(days_between(item.start_date, item.end_date))
    return ScheduleItemDetails(
        id=item.id,
        name=item.name,
        start_date=item.start_date,
        end_date=item.end_date,
        duration_days=max(duration, 0),
        progress=item.progress,
        is_critical=bool(item.is_critical),
        dependencies=tuple((dep_id, names.get(dep_id, dep_id)) for dep_id in item.dependency_ids),
    )
