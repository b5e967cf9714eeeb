from .engine import DropOutcome, DropResult, StatusTransitionEngine
from .interface import CardSource, DragController, ScheduleSource, TaskUpdater
from .transitions import BoardStats, apply_status, cards_by_status, count_by_status, find_card

__all__ = [
    "BoardStats",
    "CardSource",
    "DragController",
    "DropOutcome",
    "DropResult",
    "ScheduleSource",
    "StatusTransitionEngine",
    "TaskUpdater",
    "apply_status",
    "cards_by_status",
    "count_by_status",
    "find_card",
]
