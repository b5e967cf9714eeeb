"""Status transition engine behind the kanban board.

A move is a drag (``begin_drag``) followed by a drop (``complete_drop``) or a
cancel (``cancel_drag``). A drop onto a different column is applied to the
local card collection first, then written upstream. If the write fails the
optimistic collection is thrown away and the whole card set is reloaded from
the card source; there is no field-level undo, because the pre-move state
may already be stale when the failure arrives.

Usage:
    engine = StatusTransitionEngine(cards, updater=store, source=store)
    if engine.begin_drag(card):
        result = await engine.complete_drop(Status.COMPLETED)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from ..schedule.models import DragState, KanbanCard, Status, coerce_status
from .interface import CardSource, TaskUpdater
from .transitions import apply_status, find_card

logger = logging.getLogger(__name__)

ChangeListener = Callable[[tuple[KanbanCard, ...]], None]


class DropOutcome(Enum):
    NOOP = "noop"
    COMMITTED = "committed"
    RELOADED = "reloaded"
    RELOAD_FAILED = "reload_failed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class DropResult:
    outcome: DropOutcome
    cards: tuple[KanbanCard, ...]
    card_id: str | None = None
    target_status: Status | None = None
    error: Exception | None = None


class StatusTransitionEngine:
    """Holds the board's card collection and the transient drag state.

    The collection is only ever replaced, never mutated; ``on_change`` is
    called with each new collection so a view can re-render.
    """

    def __init__(
        self,
        cards: Iterable[KanbanCard],
        updater: TaskUpdater,
        source: CardSource,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._cards: tuple[KanbanCard, ...] = tuple(cards)
        self._updater = updater
        self._source = source
        self._on_change = on_change
        self._drag: DragState | None = None
        self._commit_pending = False
        self._closed = False

    @property
    def cards(self) -> tuple[KanbanCard, ...]:
        return self._cards

    @property
    def drag_state(self) -> DragState | None:
        return self._drag

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def is_busy(self) -> bool:
        """True while a drag is active or a dropped move is still being written."""
        return self._drag is not None or self._commit_pending

    @property
    def closed(self) -> bool:
        return self._closed

    def _replace(self, cards: tuple[KanbanCard, ...]) -> None:
        self._cards = cards
        if self._on_change is not None:
            self._on_change(cards)

    def replace_cards(self, cards: Iterable[KanbanCard]) -> None:
        self._replace(tuple(cards))

    def close(self) -> None:
        """Detach from the view; results arriving afterwards are dropped."""
        self._closed = True
        self._drag = None
        self._on_change = None

    # -- Drag capability --

    def begin_drag(self, card: KanbanCard, source_status: Status | None = None) -> bool:
        """Start carrying ``card``. Refused while another move is active."""
        if self._closed:
            return False
        if self.is_busy:
            logger.debug("Drag of %s refused: another move is active", card.id)
            return False
        status = coerce_status(source_status if source_status is not None else card.status)
        if status is None:
            logger.debug("Drag of %s refused: unknown source status %r", card.id, source_status)
            return False
        self._drag = DragState(card=card, source_status=status)
        logger.debug("Drag started: %s from %s", card.id, status.value)
        return True

    def cancel_drag(self) -> None:
        if self._drag is not None:
            logger.debug("Drag cancelled: %s", self._drag.card.id)
        self._drag = None

    async def complete_drop(self, target_status) -> DropResult:
        """Drop the carried card on ``target_status``.

        Never raises for update or reload failures; the outcome is reported
        in the returned DropResult.
        """
        drag = self._drag
        self._drag = None
        if drag is None or self._closed:
            return DropResult(DropOutcome.NOOP, self._cards)

        card_id = drag.card.id
        target = coerce_status(target_status)
        if target is None:
            logger.debug("Drop of %s ignored: unknown status %r", card_id, target_status)
            return DropResult(DropOutcome.NOOP, self._cards, card_id)
        if target is drag.source_status:
            return DropResult(DropOutcome.NOOP, self._cards, card_id, target)
        if find_card(self._cards, card_id) is None:
            logger.debug("Drop of %s ignored: card no longer on the board", card_id)
            return DropResult(DropOutcome.NOOP, self._cards, card_id, target)

        # Optimistic write happens before the update is dispatched
        self._replace(apply_status(self._cards, card_id, target))
        self._commit_pending = True
        try:
            try:
                await self._updater.update_status(card_id, target)
            except Exception as exc:
                logger.warning("Moving %s to %s failed: %s", card_id, target.value, exc)
                return await self._reload_after_failure(card_id, target, exc)
        finally:
            self._commit_pending = False

        if self._closed:
            return DropResult(DropOutcome.DISCARDED, self._cards, card_id, target)
        logger.info("Moved %s from %s to %s", card_id, drag.source_status.value, target.value)
        return DropResult(DropOutcome.COMMITTED, self._cards, card_id, target)

    async def _reload_after_failure(self, card_id: str, target: Status, error: Exception) -> DropResult:
        if self._closed:
            return DropResult(DropOutcome.DISCARDED, self._cards, card_id, target, error)
        try:
            fresh = await self._source.reload()
        except Exception as reload_error:
            logger.error("Reload after failed move of %s also failed: %s", card_id, reload_error)
            return DropResult(DropOutcome.RELOAD_FAILED, self._cards, card_id, target, reload_error)
        if self._closed:
            return DropResult(DropOutcome.DISCARDED, self._cards, card_id, target, error)
        self._replace(tuple(fresh))
        return DropResult(DropOutcome.RELOADED, self._cards, card_id, target, error)

    async def reload(self) -> tuple[KanbanCard, ...]:
        """Replace the collection with the card source's current set."""
        fresh = tuple(await self._source.reload())
        if not self._closed:
            self._replace(fresh)
        return fresh
