"""Planboard TUI: interactive kanban board and Gantt timeline."""

from __future__ import annotations

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Static

from planboard.board.engine import DropOutcome, StatusTransitionEngine
from planboard.board.transitions import cards_by_status, count_by_status
from planboard.config import LayoutConfig
from planboard.schedule.models import STATUS_ORDER, KanbanCard, ScheduleItem, Status, ZoomLevel
from planboard.timeline.layout import compute_layout
from planboard.timeline.render import render_timeline

STATUS_COLORS = {
    Status.NOT_STARTED: "white",
    Status.IN_PROGRESS: "blue",
    Status.ON_HOLD: "yellow",
    Status.COMPLETED: "green",
    Status.VERIFIED: "magenta",
}

PRIORITY_COLORS = {"low": "blue", "medium": "dark_orange", "high": "red"}


def card_markup(card: KanbanCard) -> str:
    lines = [f"[bold]{escape(card.title)}[/]"]
    if card.description:
        lines.append(f"[dim]{escape(card.description)}[/]")
    if card.priority:
        color = PRIORITY_COLORS[card.priority.value]
        lines.append(f"[{color}]{card.priority.value.upper()}[/]")
    if card.due_date:
        lines.append(f"Due: {card.due_date:%b %d}")
    if card.assignee:
        lines.append(f"Assigned to: {escape(card.assignee)}")
    return "\n".join(lines)


class CardWidget(Static):
    can_focus = True

    def __init__(self, card: KanbanCard, col_index: int, **kwargs) -> None:
        super().__init__(card_markup(card), **kwargs)
        self.card = card
        self.col_index = col_index


class StatusColumn(VerticalScroll):
    def __init__(self, status: Status, col_index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.status = status
        self.col_index = col_index

    def compose(self) -> ComposeResult:
        yield Static(self._header_text(0), classes="column-header")
        yield Static("[dim]No tasks[/]", classes="empty-label")

    def _header_text(self, count: int) -> str:
        color = STATUS_COLORS[self.status]
        return f"[bold {color}]{self.status.label}[/] [dim]({count})[/]"

    async def show_cards(self, cards: list[KanbanCard]) -> None:
        await self.remove_children()
        widgets: list[Static] = [Static(self._header_text(len(cards)), classes="column-header")]
        if not cards:
            widgets.append(Static("[dim]No tasks[/]", classes="empty-label"))
        for card in cards:
            widgets.append(CardWidget(card, self.col_index, classes="card"))
        await self.mount_all(widgets)

    def cards(self) -> list[CardWidget]:
        return list(self.query(CardWidget))


class TimelinePanel(VerticalScroll):
    def compose(self) -> ComposeResult:
        yield Static("[dim]No tasks scheduled yet.[/]", id="timeline-text")

    def show_text(self, text: str) -> None:
        self.query_one("#timeline-text", Static).update(text)


class PlanBoardApp(App):
    TITLE = "Project Board"

    CSS = """
    #board {
        height: 1fr;
        width: 100%;
    }

    #board.hidden {
        display: none;
    }

    StatusColumn {
        width: 1fr;
        height: 100%;
        border-right: solid $surface-lighten-2;
    }

    StatusColumn.active-col {
        border-right: solid $accent;
        border-left: solid $accent;
    }

    StatusColumn.drop-target {
        background: $boost;
        border: double $warning;
    }

    .column-header {
        text-align: center;
        background: $surface-lighten-1;
        margin-bottom: 1;
    }

    .empty-label {
        text-align: center;
        color: $text-muted;
    }

    .card {
        padding: 0 1;
        margin-bottom: 1;
        border: round $surface-lighten-2;
    }

    .card:focus {
        background: $surface-lighten-1;
    }

    .card.carrying {
        opacity: 50%;
    }

    #timeline {
        height: 1fr;
        display: none;
    }

    #timeline.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("space", "pick_up", "Pick up", priority=True),
        Binding("enter", "drop", "Drop", priority=True),
        Binding("escape", "cancel_drag", "Cancel", priority=True),
        Binding("g", "toggle_timeline", "Gantt"),
        Binding("z", "toggle_zoom", "Zoom"),
        Binding("left", "col_left", "< Col", priority=True),
        Binding("right", "col_right", "Col >", priority=True),
        Binding("up", "card_up", "", show=False, priority=True),
        Binding("down", "card_down", "", show=False, priority=True),
    ]

    def __init__(self, store, config: LayoutConfig | None = None) -> None:
        super().__init__()
        self.store = store
        self.layout_config = config or LayoutConfig()
        self.engine = StatusTransitionEngine([], updater=store, source=store, on_change=self._on_cards_changed)
        self.items: list[ScheduleItem] = []
        self.zoom = ZoomLevel.WEEK
        self.active_col_index = 0
        self.target_col_index: int | None = None
        self.showing_timeline = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="board"):
            for i, status in enumerate(STATUS_ORDER):
                yield StatusColumn(status, col_index=i, id=f"col-{status.value.lower()}")
        yield TimelinePanel(id="timeline")
        yield Footer()

    async def on_mount(self) -> None:
        await self.action_refresh()

    def on_unmount(self) -> None:
        self.engine.close()

    # -- Rendering --

    def _get_columns(self) -> list[StatusColumn]:
        return list(self.query(StatusColumn))

    def _on_cards_changed(self, cards: tuple[KanbanCard, ...]) -> None:
        self.call_later(self._render_board)

    async def _render_board(self) -> None:
        grouped = cards_by_status(self.engine.cards)
        for column in self._get_columns():
            await column.show_cards(grouped[column.status])
        stats = count_by_status(self.engine.cards)
        self.sub_title = f"{stats.total} {'task' if stats.total == 1 else 'tasks'}"
        self._highlight_columns()
        self._focus_first_in_active_col()

    def _highlight_columns(self) -> None:
        for i, column in enumerate(self._get_columns()):
            column.set_class(i == self.active_col_index, "active-col")
            column.set_class(i == self.target_col_index, "drop-target")

    def _render_timeline(self) -> None:
        layout = compute_layout(self.items, zoom=self.zoom, config=self.layout_config)
        panel = self.query_one("#timeline", TimelinePanel)
        if not layout.bars:
            panel.show_text("[dim]No tasks scheduled yet.[/]")
            return
        panel.show_text(render_timeline(
            layout,
            chars_per_day=self.layout_config.chars_per_day_for(self.zoom),
            label_width=self.layout_config.label_width,
            markup=True,
        ))

    # -- Refresh --

    async def action_refresh(self) -> None:
        # No reload while a drag or commit is in flight
        if self.engine.is_busy:
            self.notify("Finish the current move before refreshing", severity="warning")
            return
        try:
            await self.engine.reload()
            self.items = await self.store.get_schedule()
        except Exception as exc:
            self.notify(f"Failed to load project: {exc}", severity="error")
            return
        self._render_timeline()

    # -- Navigation --

    def _focus_first_in_active_col(self) -> None:
        columns = self._get_columns()
        if self.showing_timeline or self.active_col_index >= len(columns):
            return
        cards = columns[self.active_col_index].cards()
        if cards:
            cards[0].focus()

    def _move_col(self, step: int) -> None:
        if self.showing_timeline:
            return
        last = len(STATUS_ORDER) - 1
        if self.target_col_index is not None:
            self.target_col_index = min(max(self.target_col_index + step, 0), last)
            self._highlight_columns()
            return
        self.active_col_index = min(max(self.active_col_index + step, 0), last)
        self._highlight_columns()
        self._focus_first_in_active_col()

    def action_col_left(self) -> None:
        self._move_col(-1)

    def action_col_right(self) -> None:
        self._move_col(1)

    def _move_card_focus(self, step: int) -> None:
        if self.showing_timeline or self.engine.is_dragging:
            return
        cards = self._get_columns()[self.active_col_index].cards()
        if not cards:
            return
        try:
            idx = cards.index(self.focused)
        except ValueError:
            cards[0].focus()
            return
        cards[min(max(idx + step, 0), len(cards) - 1)].focus()

    def action_card_up(self) -> None:
        self._move_card_focus(-1)

    def action_card_down(self) -> None:
        self._move_card_focus(1)

    # -- Drag and drop --

    def action_pick_up(self) -> None:
        focused = self.focused
        if not isinstance(focused, CardWidget):
            self.notify("Select a card first", severity="warning")
            return
        if not self.engine.begin_drag(focused.card):
            self.notify("Another move is still in progress", severity="warning")
            return
        focused.add_class("carrying")
        self.target_col_index = focused.col_index
        self._highlight_columns()

    def _end_drag_display(self) -> None:
        self.target_col_index = None
        for card in self.query(CardWidget):
            card.remove_class("carrying")
        self._highlight_columns()

    def action_cancel_drag(self) -> None:
        if not self.engine.is_dragging:
            return
        self.engine.cancel_drag()
        self._end_drag_display()

    def action_drop(self) -> None:
        if not self.engine.is_dragging or self.target_col_index is None:
            return
        target = STATUS_ORDER[self.target_col_index]
        self.active_col_index = self.target_col_index
        self._end_drag_display()
        self.run_worker(self._drop(target), group="drop")

    async def _drop(self, target: Status) -> None:
        result = await self.engine.complete_drop(target)
        if result.outcome is DropOutcome.RELOADED:
            self.notify(f"Move failed: {result.error}. Board reloaded.", severity="error")
        elif result.outcome is DropOutcome.RELOAD_FAILED:
            self.notify(f"Move failed and reload failed: {result.error}", severity="error")

    # -- Timeline --

    def action_toggle_timeline(self) -> None:
        self.showing_timeline = not self.showing_timeline
        if self.showing_timeline and self.engine.is_dragging:
            self.action_cancel_drag()
        self.query_one("#board", Horizontal).set_class(self.showing_timeline, "hidden")
        self.query_one("#timeline", TimelinePanel).set_class(self.showing_timeline, "visible")
        if self.showing_timeline:
            self._render_timeline()
        else:
            self._focus_first_in_active_col()

    def action_toggle_zoom(self) -> None:
        self.zoom = ZoomLevel.MONTH if self.zoom is ZoomLevel.WEEK else ZoomLevel.WEEK
        self._render_timeline()
        self.notify(f"Zoom: {self.zoom.value}")


def run_board() -> None:
    """Entry point for the planboard-board CLI."""
    import sys

    from planboard.adapters.yaml_file import YamlProjectStore

    if len(sys.argv) < 2:
        print("Usage: planboard-board <project.yaml>", file=sys.stderr)
        sys.exit(1)
    PlanBoardApp(YamlProjectStore(sys.argv[1])).run()
