"""Pure card-collection transforms used by the board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..schedule.models import STATUS_ORDER, KanbanCard, Status


def find_card(cards: Iterable[KanbanCard], card_id: str) -> KanbanCard | None:
    for card in cards:
        if card.id == card_id:
            return card
    return None


def apply_status(
    cards: Sequence[KanbanCard], card_id: str, status: Status
) -> tuple[KanbanCard, ...]:
    """Return a new collection with ``card_id`` moved to ``status``.

    The input is never modified. Order is preserved so cards keep their
    place within a column.
    """
    return tuple(card.with_status(status) if card.id == card_id else card for card in cards)


def cards_by_status(
    cards: Iterable[KanbanCard],
    statuses: Sequence[Status] = STATUS_ORDER,
) -> dict[Status, list[KanbanCard]]:
    columns: dict[Status, list[KanbanCard]] = {status: [] for status in statuses}
    for card in cards:
        if card.status in columns:
            columns[card.status].append(card)
    return columns


@dataclass(frozen=True)
class BoardStats:
    total: int
    counts: dict[Status, int] = field(default_factory=dict)

    def count(self, status: Status) -> int:
        return self.counts.get(status, 0)


def count_by_status(cards: Iterable[KanbanCard]) -> BoardStats:
    counts = {status: 0 for status in STATUS_ORDER}
    total = 0
    for card in cards:
        total += 1
        counts[card.status] = counts.get(card.status, 0) + 1
    return BoardStats(total=total, counts=counts)
