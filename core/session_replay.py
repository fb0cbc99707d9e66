"""Replay a scripted sequence of host events against the local host."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from activity.local_host import LocalProject
from activity.settings import load_project_settings
from core.event_bus import ActivityEvent, EventBus
from core.policy_runtime import read_config_file

logger = logging.getLogger("activity.replay")


@dataclass
class ReplaySession:
    """Local projects created while replaying a script, keyed by name."""

    config: dict[str, Any]
    projects: dict[str, LocalProject] = field(default_factory=dict)

    def project(self, name: str, base_path: str = "") -> LocalProject:
        project = self.projects.get(name)
        if project is None or project.is_disposed:
            project = LocalProject(
                name=name,
                base_path=base_path,
                settings=load_project_settings(self.config, name),
            )
            self.projects[name] = project
        return project


def parse_timestamp(value: Any) -> datetime | None:
    """Accept datetimes or ISO-8601 strings; naive values are taken as UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as exc:
            raise ValueError(f"Invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def load_script(path: Path) -> list[dict[str, Any]]:
    """Load an event script: a mapping with an ``events`` list."""
    if not path.exists():
        raise ValueError(f"Event script not found: {path}")
    data = read_config_file(path)
    events = data.get("events", [])
    if not isinstance(events, list) or not all(isinstance(item, dict) for item in events):
        raise ValueError(f"'events' must be a list of mappings: {path}")
    return events


def replay(events: list[dict[str, Any]], bus: EventBus, session: ReplaySession) -> int:
    """Emit every scripted event on ``bus``; returns the number emitted."""
    emitted = 0
    for index, entry in enumerate(events):
        try:
            event = ActivityEvent.parse(str(entry.get("event", "")))
        except ValueError as exc:
            raise ValueError(f"Event #{index}: {exc}") from None
        project_name = entry.get("project")
        if not project_name:
            raise ValueError(f"Event #{index}: missing 'project'")
        project = session.project(str(project_name), str(entry.get("base_path", "")))
        payload: dict[str, Any] = {"project": project, "at": parse_timestamp(entry.get("at"))}

        path = entry.get("file")
        if path is not None:
            if event is ActivityEvent.FILE_CLOSED:
                handle = project.find_file(str(path))
            else:
                handle = project.open_file(str(path), writable=bool(entry.get("writable", True)))
            payload["file"] = handle

        bus.emit(event, payload)
        emitted += 1

        if event is ActivityEvent.FILE_CLOSED and payload.get("file") is not None:
            project.close_file(payload["file"])
        elif event is ActivityEvent.PROJECT_CLOSED:
            project.dispose()
        logger.debug("Replayed %s for %s", event.value, project.name)
    return emitted
