"""Tests for pure card-collection transforms."""

from planboard.board.transitions import apply_status, cards_by_status, count_by_status, find_card
from planboard.schedule.models import STATUS_ORDER, Status


class TestApplyStatus:
    def test_returns_new_collection(self, cards):
        before = list(cards)
        moved = apply_status(cards, "t-1", Status.ON_HOLD)
        assert cards == before
        assert find_card(moved, "t-1").status is Status.ON_HOLD
        assert find_card(cards, "t-1").status is Status.NOT_STARTED

    def test_preserves_order_and_other_cards(self, cards):
        moved = apply_status(cards, "t-2", Status.VERIFIED)
        assert [c.id for c in moved] == ["t-1", "t-2", "t-3", "t-4"]
        assert moved[0] is cards[0]

    def test_unknown_id_changes_nothing(self, cards):
        assert list(apply_status(cards, "nope", Status.VERIFIED)) == cards


class TestGrouping:
    def test_cards_by_status_keeps_column_order(self, cards):
        columns = cards_by_status(cards)
        assert list(columns) == list(STATUS_ORDER)
        assert [c.id for c in columns[Status.IN_PROGRESS]] == ["t-2", "t-3"]
        assert columns[Status.VERIFIED] == []

    def test_restricted_statuses(self, cards):
        columns = cards_by_status(cards, statuses=[Status.COMPLETED])
        assert list(columns) == [Status.COMPLETED]
        assert [c.id for c in columns[Status.COMPLETED]] == ["t-4"]


class TestStats:
    def test_counts(self, cards):
        stats = count_by_status(cards)
        assert stats.total == 4
        assert stats.count(Status.IN_PROGRESS) == 2
        assert stats.count(Status.NOT_STARTED) == 1
        assert stats.count(Status.VERIFIED) == 0

    def test_empty_board(self):
        stats = count_by_status([])
        assert stats.total == 0
        assert all(stats.count(s) == 0 for s in STATUS_ORDER)
