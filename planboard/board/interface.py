"""Collaborator protocols for the board and timeline."""

from typing import Protocol

from ..schedule.models import KanbanCard, ScheduleItem, Status


class TaskUpdater(Protocol):
    """Writes a task's status upstream. Failure is signalled by raising."""

    async def update_status(self, card_id: str, status: Status) -> None: ...


class CardSource(Protocol):
    """Source of truth for the full card set."""

    async def reload(self) -> list[KanbanCard]: ...


class ScheduleSource(Protocol):
    """Supplies schedule items with critical flags and dependencies already set."""

    async def get_schedule(self) -> list[ScheduleItem]: ...


class DragController(Protocol):
    """What an input binding (mouse, keyboard, test) needs to drive a move."""

    def begin_drag(self, card: KanbanCard, source_status: Status | None = None) -> bool: ...

    async def complete_drop(self, target_status) -> object: ...

    def cancel_drag(self) -> None: ...
