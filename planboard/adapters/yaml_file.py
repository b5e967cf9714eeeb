"""YAML project-file store.

Reads a single project file holding the schedule and task payloads in the
upstream API shape, and writes status changes back to it. State survives
process restarts, unlike InMemoryProjectStore.

File layout::

    project: Website relaunch
    schedule:
      items: [{id, name, startDate, endDate, progress, predecessorIds}, ...]
      criticalPath: [id, ...]
    tasks: [{id, name, status, description, endDate, priority, assignee}, ...]
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..exceptions import CardNotFoundError, ProjectFileError, UpdateRejectedError
from ..schedule.mapping import PrioritySource, cards_from_payload, schedule_items_from_payload
from ..schedule.models import KanbanCard, ScheduleItem, Status, coerce_status

logger = logging.getLogger(__name__)


class YamlProjectStore:
    """TaskUpdater, CardSource and ScheduleSource backed by a YAML file."""

    def __init__(self, path: Path | str, priority_source: PrioritySource | None = None):
        self.path = Path(path)
        self._priority_source = priority_source

    def _load(self) -> dict:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ProjectFileError(self.path, f"cannot read ({exc.strerror or exc})") from exc
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ProjectFileError(self.path, f"invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ProjectFileError(self.path, "expected a mapping at top level")
        return data

    def _save(self, data: dict) -> None:
        try:
            self.path.write_text(
                yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ProjectFileError(self.path, f"cannot write ({exc.strerror or exc})") from exc

    @property
    def project_name(self) -> str:
        return str(self._load().get("project") or self.path.stem)

    async def get_schedule(self) -> list[ScheduleItem]:
        return schedule_items_from_payload(self._load().get("schedule"))

    async def reload(self) -> list[KanbanCard]:
        return cards_from_payload(self._load().get("tasks"), self._priority_source)

    async def update_status(self, card_id: str, status: Status) -> None:
        resolved = coerce_status(status)
        if resolved is None:
            raise UpdateRejectedError(card_id, status, "unknown status")
        data = self._load()
        for task in data.get("tasks") or []:
            if isinstance(task, dict) and str(task.get("id")) == card_id:
                task["status"] = resolved.value
                break
        else:
            raise CardNotFoundError(card_id)
        self._save(data)
        logger.debug("Wrote status %s for %s to %s", resolved.value, card_id, self.path)
