"""Convert upstream API payloads into schedule items and kanban cards.

The schedule source returns a project schedule shaped like::

    {"items": [{"id", "name", "startDate", "endDate", "predecessorIds", ...}],
     "criticalPath": ["id", ...]}

and the task listing returns task dicts with ``status``, ``endDate`` and an
optional nested ``assignee``. Rows that cannot be placed on a chart or board
are skipped with a warning instead of failing the whole payload.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .dates import parse_instant
from .models import (
    KanbanCard,
    Priority,
    ScheduleItem,
    Status,
    coerce_priority,
    coerce_status,
)

logger = logging.getLogger(__name__)

PrioritySource = Callable[[dict], "Priority | str | None"]


def schedule_item_from_payload(raw: dict, critical_ids: frozenset[str] = frozenset()) -> ScheduleItem | None:
    item_id = raw.get("id")
    if item_id is None or item_id == "":
        logger.warning("Skipping schedule row without an id: %r", raw.get("name"))
        return None
    item_id = str(item_id)

    start = parse_instant(raw.get("startDate"))
    end = parse_instant(raw.get("endDate"))
    if start is None and end is None:
        logger.warning("Skipping schedule item %s: no usable dates", item_id)
        return None
    # A single known date makes a zero-length item rather than a lost one
    start = start or end
    end = end or start

    predecessors = raw.get("predecessorIds") or raw.get("dependencies") or []
    return ScheduleItem(
        id=item_id,
        name=str(raw.get("name") or item_id),
        start_date=start,
        end_date=end,
        progress_percentage=raw.get("progress", 0),
        is_critical=bool(raw.get("isCritical")) or item_id in critical_ids,
        dependency_ids=tuple(str(p) for p in predecessors),
    )


def schedule_items_from_payload(payload: dict | None) -> list[ScheduleItem]:
    """Build ScheduleItems from a project-schedule response, keeping row order."""
    if not payload:
        return []
    critical_ids = frozenset(str(i) for i in payload.get("criticalPath") or [])
    items = []
    for raw in payload.get("items") or []:
        if not isinstance(raw, dict):
            logger.warning("Skipping schedule row of type %s", type(raw).__name__)
            continue
        item = schedule_item_from_payload(raw, critical_ids)
        if item is not None:
            items.append(item)
    return items


def _assignee_name(raw) -> str | None:
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, dict) and raw.get("firstName"):
        return f"{raw['firstName']} {raw.get('lastName', '')}".strip()
    return None


def card_from_task(task: dict, priority_source: PrioritySource | None = None) -> KanbanCard | None:
    """Build a KanbanCard from a task payload.

    Priority is read from the task itself, then from ``priority_source``;
    without either the card simply has no priority.
    """
    card_id = task.get("id")
    if card_id is None or card_id == "":
        logger.warning("Skipping task without an id: %r", task.get("name"))
        return None

    status = coerce_status(task.get("status"))
    if status is None:
        logger.warning(
            "Task %s has unknown status %r, showing it as %s",
            card_id, task.get("status"), Status.NOT_STARTED.value,
        )
        status = Status.NOT_STARTED

    priority = coerce_priority(task.get("priority"))
    if priority is None and priority_source is not None:
        priority = coerce_priority(priority_source(task))

    metadata = {}
    if task.get("activityId"):
        metadata["activity_id"] = task["activityId"]

    return KanbanCard(
        id=str(card_id),
        title=str(task.get("name") or task.get("title") or card_id),
        status=status,
        description=task.get("description") or None,
        due_date=parse_instant(task.get("endDate") or task.get("dueDate")),
        priority=priority,
        assignee=_assignee_name(task.get("assignee")),
        metadata=metadata,
    )


def cards_from_payload(
    tasks: Iterable[dict] | None,
    priority_source: PrioritySource | None = None,
) -> list[KanbanCard]:
    cards = []
    for task in tasks or []:
        if not isinstance(task, dict):
            logger.warning("Skipping task row of type %s", type(task).__name__)
            continue
        card = card_from_task(task, priority_source)
        if card is not None:
            cards.append(card)
    return cards
