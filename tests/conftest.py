"""Shared test configuration."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from planboard.adapters.memory import InMemoryProjectStore
from planboard.schedule.models import KanbanCard, Priority, ScheduleItem, Status

BASE = datetime(2026, 3, 10, tzinfo=timezone.utc)


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run slow interactive TUI tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def day(offset: float) -> datetime:
    return BASE + timedelta(days=offset)


def make_item(item_id: str, start: float, end: float, progress=0, critical=False, deps=()) -> ScheduleItem:
    return ScheduleItem(
        id=item_id,
        name=f"Item {item_id}",
        start_date=day(start),
        end_date=day(end),
        progress_percentage=progress,
        is_critical=critical,
        dependency_ids=tuple(deps),
    )


@pytest.fixture
def scenario_items() -> list[ScheduleItem]:
    return [
        make_item("A", 0, 2, progress=50, critical=True),
        make_item("B", 1, 1, progress=100),
        make_item("C", -1, 5, progress=0),
    ]


@pytest.fixture
def cards() -> list[KanbanCard]:
    return [
        KanbanCard(id="t-1", title="Write brief", status=Status.NOT_STARTED, priority=Priority.LOW),
        KanbanCard(id="t-2", title="Design schema", status=Status.IN_PROGRESS, assignee="Ada Lovelace"),
        KanbanCard(id="t-3", title="Review copy", status=Status.IN_PROGRESS),
        KanbanCard(id="t-4", title="Ship v1", status=Status.COMPLETED, due_date=day(4)),
    ]


@pytest.fixture
def store(cards) -> InMemoryProjectStore:
    return InMemoryProjectStore(cards=cards, items=[make_item("A", 0, 2)])
