"""Tests for the status transition engine."""

import asyncio

import pytest

from planboard.adapters.memory import InMemoryProjectStore
from planboard.board.engine import DropOutcome, StatusTransitionEngine
from planboard.board.transitions import find_card
from planboard.schedule.models import Status


class GatedUpdater:
    """Holds each update until released, recording what the board showed at dispatch."""

    def __init__(self, fail: bool = False):
        self.release = asyncio.Event()
        self.fail = fail
        self.engine = None
        self.seen_at_dispatch: list[Status] = []

    async def update_status(self, card_id, status):
        self.seen_at_dispatch.append(find_card(self.engine.cards, card_id).status)
        await self.release.wait()
        if self.fail:
            raise ConnectionError("network down")


@pytest.fixture
def changes():
    return []


@pytest.fixture
def engine(cards, store, changes):
    return StatusTransitionEngine(cards, updater=store, source=store, on_change=changes.append)


def _card(engine, card_id):
    return find_card(engine.cards, card_id)


class TestDragState:
    def test_begin_drag_records_source(self, engine):
        assert engine.begin_drag(_card(engine, "t-2"))
        assert engine.drag_state.card.id == "t-2"
        assert engine.drag_state.source_status is Status.IN_PROGRESS

    def test_second_drag_refused_while_active(self, engine):
        assert engine.begin_drag(_card(engine, "t-1"))
        assert not engine.begin_drag(_card(engine, "t-2"))
        assert engine.drag_state.card.id == "t-1"

    def test_cancel_drag_has_no_side_effects(self, engine, store, changes):
        engine.begin_drag(_card(engine, "t-1"))
        engine.cancel_drag()
        assert engine.drag_state is None
        assert store.update_calls == []
        assert changes == []

    def test_unknown_source_status_refused(self, engine):
        assert not engine.begin_drag(_card(engine, "t-1"), source_status="ARCHIVED")
        assert not engine.is_dragging


class TestNoOpDrops:
    @pytest.mark.asyncio
    async def test_same_status_is_noop(self, engine, store, changes):
        before = engine.cards
        engine.begin_drag(_card(engine, "t-2"))
        result = await engine.complete_drop(Status.IN_PROGRESS)
        assert result.outcome is DropOutcome.NOOP
        assert engine.cards is before
        assert store.update_calls == []
        assert changes == []
        assert engine.drag_state is None

    @pytest.mark.asyncio
    async def test_unknown_target_is_noop(self, engine, store):
        before = engine.cards
        engine.begin_drag(_card(engine, "t-2"))
        result = await engine.complete_drop("ARCHIVED")
        assert result.outcome is DropOutcome.NOOP
        assert engine.cards is before
        assert store.update_calls == []
        assert not engine.is_dragging

    @pytest.mark.asyncio
    async def test_drop_without_drag_is_noop(self, engine, store):
        result = await engine.complete_drop(Status.VERIFIED)
        assert result.outcome is DropOutcome.NOOP
        assert store.update_calls == []

    @pytest.mark.asyncio
    async def test_card_removed_during_drag_is_noop(self, engine, store, cards):
        engine.begin_drag(_card(engine, "t-1"))
        engine.replace_cards(c for c in cards if c.id != "t-1")
        result = await engine.complete_drop(Status.COMPLETED)
        assert result.outcome is DropOutcome.NOOP
        assert store.update_calls == []

    @pytest.mark.asyncio
    async def test_explicit_source_status_is_used(self, engine, store):
        engine.begin_drag(_card(engine, "t-1"), source_status="COMPLETED")
        result = await engine.complete_drop(Status.COMPLETED)
        assert result.outcome is DropOutcome.NOOP
        assert store.update_calls == []


class TestSuccessfulDrop:
    @pytest.mark.asyncio
    async def test_commit_keeps_optimistic_state(self, engine, store, cards):
        engine.begin_drag(_card(engine, "t-2"))
        result = await engine.complete_drop("COMPLETED")
        assert result.outcome is DropOutcome.COMMITTED
        assert _card(engine, "t-2").status is Status.COMPLETED
        assert store.update_calls == [("t-2", Status.COMPLETED)]
        assert store.get_card("t-2").status is Status.COMPLETED
        assert store.reload_calls == 0
        # input collection untouched
        assert cards[1].status is Status.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_optimistic_write_precedes_dispatch(self, cards, store):
        updater = GatedUpdater()
        engine = StatusTransitionEngine(cards, updater=updater, source=store)
        updater.engine = engine
        engine.begin_drag(_card(engine, "t-1"))

        task = asyncio.create_task(engine.complete_drop(Status.ON_HOLD))
        await asyncio.sleep(0)
        assert updater.seen_at_dispatch == [Status.ON_HOLD]
        assert not task.done()
        assert engine.is_busy
        assert not engine.begin_drag(_card(engine, "t-2"))

        updater.release.set()
        result = await task
        assert result.outcome is DropOutcome.COMMITTED
        assert not engine.is_busy

    @pytest.mark.asyncio
    async def test_change_listener_sees_each_collection(self, engine, changes):
        engine.begin_drag(_card(engine, "t-4"))
        await engine.complete_drop(Status.VERIFIED)
        assert len(changes) == 1
        assert find_card(changes[0], "t-4").status is Status.VERIFIED


class TestFailedDrop:
    @pytest.mark.asyncio
    async def test_failure_replaces_board_with_reload(self, engine, store, changes):
        # Another user puts t-3 on hold before our move fails
        store.set_status("t-3", Status.ON_HOLD)
        store.fail_next_update()

        engine.begin_drag(_card(engine, "t-2"))
        result = await engine.complete_drop(Status.COMPLETED)

        assert result.outcome is DropOutcome.RELOADED
        assert result.error is not None
        assert list(engine.cards) == await store.reload()
        assert _card(engine, "t-2").status is Status.IN_PROGRESS
        assert _card(engine, "t-3").status is Status.ON_HOLD
        assert len(changes) == 2

    @pytest.mark.asyncio
    async def test_failure_does_not_raise(self, engine, store):
        store.fail_next_update(RuntimeError("boom"))
        engine.begin_drag(_card(engine, "t-1"))
        result = await engine.complete_drop(Status.IN_PROGRESS)
        assert isinstance(result.error, RuntimeError)
        assert not engine.is_busy

    @pytest.mark.asyncio
    async def test_reload_failure_reported(self, engine, store):
        store.fail_next_update()
        store.fail_next_reload(ConnectionError("offline"))
        engine.begin_drag(_card(engine, "t-1"))
        result = await engine.complete_drop(Status.VERIFIED)
        assert result.outcome is DropOutcome.RELOAD_FAILED
        assert isinstance(result.error, ConnectionError)
        assert not engine.is_busy

    @pytest.mark.asyncio
    async def test_unknown_card_upstream_triggers_reload(self, cards):
        store = InMemoryProjectStore(cards=[c for c in cards if c.id != "t-1"])
        engine = StatusTransitionEngine(cards, updater=store, source=store)
        engine.begin_drag(_card(engine, "t-1"))
        result = await engine.complete_drop(Status.COMPLETED)
        assert result.outcome is DropOutcome.RELOADED
        assert _card(engine, "t-1") is None


class TestClose:
    @pytest.mark.asyncio
    async def test_late_result_discarded(self, cards, store):
        updater = GatedUpdater(fail=True)
        changes = []
        engine = StatusTransitionEngine(cards, updater=updater, source=store, on_change=changes.append)
        updater.engine = engine
        engine.begin_drag(_card(engine, "t-1"))

        task = asyncio.create_task(engine.complete_drop(Status.ON_HOLD))
        await asyncio.sleep(0)
        engine.close()
        updater.release.set()
        result = await task

        assert result.outcome is DropOutcome.DISCARDED
        assert store.reload_calls == 0
        assert len(changes) == 1

    def test_closed_engine_refuses_drags(self, engine):
        engine.close()
        assert not engine.begin_drag(_card(engine, "t-1"))


class TestReload:
    @pytest.mark.asyncio
    async def test_reload_replaces_cards(self, engine, store, changes):
        store.set_status("t-1", Status.VERIFIED)
        fresh = await engine.reload()
        assert _card(engine, "t-1").status is Status.VERIFIED
        assert engine.cards == fresh
        assert len(changes) == 1
