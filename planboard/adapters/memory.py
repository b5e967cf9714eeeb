"""In-memory project store for tests and demos."""

from __future__ import annotations

from typing import Iterable

from ..exceptions import CardNotFoundError, UpdateRejectedError
from ..schedule.models import KanbanCard, ScheduleItem, Status, coerce_status


class InMemoryProjectStore:
    """TaskUpdater, CardSource and ScheduleSource backed by dicts.

    ``fail_next_update`` / ``fail_next_reload`` queue failures, and
    ``set_status`` changes a card behind the board's back the way another
    user would.
    """

    def __init__(
        self,
        cards: Iterable[KanbanCard] = (),
        items: Iterable[ScheduleItem] = (),
        project_name: str = "demo-project",
    ):
        self.project_name = project_name
        self._cards: dict[str, KanbanCard] = {c.id: c for c in cards}
        self._items: list[ScheduleItem] = list(items)
        self._update_failures: list[Exception | None] = []
        self._reload_failures: list[Exception] = []
        self.update_calls: list[tuple[str, Status]] = []
        self.reload_calls = 0

    def fail_next_update(self, error: Exception | None = None) -> None:
        self._update_failures.append(error)

    def fail_next_reload(self, error: Exception) -> None:
        self._reload_failures.append(error)

    def set_status(self, card_id: str, status: Status) -> None:
        if card_id not in self._cards:
            raise CardNotFoundError(card_id)
        self._cards[card_id] = self._cards[card_id].with_status(status)

    def add_card(self, card: KanbanCard) -> None:
        self._cards[card.id] = card

    def get_card(self, card_id: str) -> KanbanCard:
        if card_id not in self._cards:
            raise CardNotFoundError(card_id)
        return self._cards[card_id]

    async def update_status(self, card_id: str, status: Status) -> None:
        self.update_calls.append((card_id, status))
        if self._update_failures:
            error = self._update_failures.pop(0)
            raise error or UpdateRejectedError(card_id, status)
        resolved = coerce_status(status)
        if resolved is None:
            raise UpdateRejectedError(card_id, status, "unknown status")
        self.set_status(card_id, resolved)

    async def reload(self) -> list[KanbanCard]:
        self.reload_calls += 1
        if self._reload_failures:
            raise self._reload_failures.pop(0)
        return list(self._cards.values())

    async def get_schedule(self) -> list[ScheduleItem]:
        return list(self._items)
