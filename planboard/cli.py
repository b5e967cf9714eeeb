"""CLI entry point for timeline and board inspection.

Usage:
  planboard gantt <project.yaml> [--zoom week|month] [--config layout.yaml]
  planboard layout <project.yaml> [--zoom week|month] [--config layout.yaml]
  planboard item <project.yaml> <item_id>
  planboard board <project.yaml>
  planboard move <project.yaml> <card_id> <STATUS>
  planboard tui <project.yaml> [--config layout.yaml]
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from datetime import datetime
from enum import Enum

from .exceptions import ConfigError, ProjectFileError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Project timeline and board CLI")
    parser.add_argument("--log-level", default="warning", help="Logging level (default: warning)")
    subparsers = parser.add_subparsers(dest="command")

    gantt_parser = subparsers.add_parser("gantt", help="Print the Gantt chart")
    gantt_parser.add_argument("project", help="Project YAML file")
    gantt_parser.add_argument("--zoom", choices=["week", "month"], default="week")
    gantt_parser.add_argument("--config", default=None, help="Layout config YAML")

    layout_parser = subparsers.add_parser("layout", help="Print the timeline layout as JSON")
    layout_parser.add_argument("project", help="Project YAML file")
    layout_parser.add_argument("--zoom", choices=["week", "month"], default="week")
    layout_parser.add_argument("--config", default=None, help="Layout config YAML")

    item_parser = subparsers.add_parser("item", help="Show details of a schedule item")
    item_parser.add_argument("project", help="Project YAML file")
    item_parser.add_argument("item_id", help="Schedule item ID")

    board_parser = subparsers.add_parser("board", help="Print the kanban columns")
    board_parser.add_argument("project", help="Project YAML file")

    move_parser = subparsers.add_parser("move", help="Move a card to another status")
    move_parser.add_argument("project", help="Project YAML file")
    move_parser.add_argument("card_id", help="Card ID")
    move_parser.add_argument("status", help="Target status, e.g. IN_PROGRESS")

    tui_parser = subparsers.add_parser("tui", help="Open the interactive board")
    tui_parser.add_argument("project", help="Project YAML file")
    tui_parser.add_argument("--config", default=None, help="Layout config YAML")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "gantt": _gantt_command,
        "layout": _layout_command,
        "item": _item_command,
        "board": _board_command,
        "move": _move_command,
        "tui": _tui_command,
    }
    try:
        result = commands[args.command](args)
        if asyncio.iscoroutine(result):
            asyncio.run(result)
    except (ProjectFileError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


def _json_default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


async def _load_layout(args):
    from .adapters.yaml_file import YamlProjectStore
    from .config import load_config
    from .timeline.layout import compute_layout

    config = load_config(args.config)
    items = await YamlProjectStore(args.project).get_schedule()
    return compute_layout(items, zoom=args.zoom, config=config), config


async def _gantt_command(args) -> None:
    from .timeline.render import render_timeline

    layout, config = await _load_layout(args)
    if not layout.bars:
        print("No tasks scheduled yet.")
        return
    print(render_timeline(
        layout,
        chars_per_day=config.chars_per_day_for(layout.zoom),
        label_width=config.label_width,
    ))


async def _layout_command(args) -> None:
    layout, _ = await _load_layout(args)
    payload = dataclasses.asdict(layout)
    payload["chart_width_px"] = layout.chart_width_px
    print(json.dumps(payload, indent=2, default=_json_default))


async def _item_command(args) -> None:
    from .adapters.yaml_file import YamlProjectStore
    from .timeline.details import describe_item

    items = await YamlProjectStore(args.project).get_schedule()
    item = next((i for i in items if i.id == args.item_id), None)
    if item is None:
        print(f"Error: Schedule item not found: {args.item_id}", file=sys.stderr)
        sys.exit(1)

    details = describe_item(item, items)
    print(f"{details.name} ({details.id})")
    print(f"  Start:    {details.start_date:%Y-%m-%d}")
    print(f"  End:      {details.end_date:%Y-%m-%d}")
    print(f"  Duration: {details.duration_days} days")
    print(f"  Progress: {details.progress}%")
    if details.is_critical:
        print("  On the critical path: any delay moves the project end date.")
    for _dep_id, name in details.dependencies:
        print(f"  depends on: {name}")


async def _board_command(args) -> None:
    from .adapters.yaml_file import YamlProjectStore
    from .board.transitions import cards_by_status, count_by_status

    store = YamlProjectStore(args.project)
    cards = await store.reload()
    stats = count_by_status(cards)
    print(f"{store.project_name}: {stats.total} {'task' if stats.total == 1 else 'tasks'}")
    for status, column in cards_by_status(cards).items():
        print(f"\n{status.label} ({stats.count(status)})")
        if not column:
            print("  (no tasks)")
        for card in column:
            badge = f" [{card.priority.value.upper()}]" if card.priority else ""
            print(f"  {card.id}  {card.title}{badge}")


async def _move_command(args) -> None:
    from .adapters.yaml_file import YamlProjectStore
    from .board.engine import DropOutcome, StatusTransitionEngine
    from .board.transitions import find_card
    from .schedule.models import STATUS_ORDER, coerce_status

    store = YamlProjectStore(args.project)
    engine = StatusTransitionEngine(await store.reload(), updater=store, source=store)
    card = find_card(engine.cards, args.card_id)
    if card is None:
        print(f"Error: Card not found: {args.card_id}", file=sys.stderr)
        sys.exit(1)
    target = coerce_status(args.status)
    if target is None:
        valid = ", ".join(s.value for s in STATUS_ORDER)
        print(f"Error: Unknown status: {args.status} (expected one of {valid})", file=sys.stderr)
        sys.exit(1)

    engine.begin_drag(card)
    result = await engine.complete_drop(target)
    if result.outcome is DropOutcome.COMMITTED:
        print(f"Moved {card.id} to {result.target_status.label}")
    elif result.outcome is DropOutcome.NOOP:
        print(f"Nothing to do: {card.id} stays in {card.status.label}")
    else:
        print(f"Error: move failed ({result.error}); board reloaded", file=sys.stderr)
        sys.exit(1)


def _tui_command(args) -> None:
    from planboard_tui.app import PlanBoardApp

    from .adapters.yaml_file import YamlProjectStore
    from .config import load_config

    app = PlanBoardApp(YamlProjectStore(args.project), config=load_config(args.config))
    app.run()
