"""Gantt timeline layout and kanban status transitions for project tracking."""

__version__ = "0.1.0"
