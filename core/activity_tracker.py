"""Turns host events into snapshot edits and answers "what is active"."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from activity.fields import FieldKind, most_recent
from activity.file_data import FileData, FileDataBuilder
from activity.host import FileHandle, ProjectHandle
from activity.project_data import ProjectData, ProjectDataBuilder
from activity.settings import ApplicationSettings
from activity.timestamps import Clock, utc_now
from core.event_bus import ActivityEvent, EventBus
from core.state_manager import ActivityState

logger = logging.getLogger("activity.tracker")


@dataclass(frozen=True)
class ActiveContext:
    """The project (and file, if any) currently shown as active."""

    project: ProjectData
    file: FileData | None = None

    def fields(self, kind: FieldKind) -> frozenset[str]:
        if self.file is None:
            return frozenset()
        return self.file.get_field(kind)

    def elapsed(self, now: datetime) -> timedelta:
        return now - self.project.opened_at


class ActivityTracker:
    """Subscribes to host events and keeps :class:`ActivityState` current."""

    def __init__(
        self,
        state: ActivityState,
        settings: ApplicationSettings | None = None,
        bus: EventBus | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.state = state
        self.settings = settings or ApplicationSettings()
        self.clock = clock
        self._last_touched: dict[ProjectHandle, FileHandle] = {}
        self.bus = bus or EventBus()
        self.bus.subscribe(ActivityEvent.PROJECT_OPENED, self._on_project_opened)
        self.bus.subscribe(ActivityEvent.PROJECT_CLOSED, self._on_project_closed)
        self.bus.subscribe(ActivityEvent.FILE_OPENED, self._on_file_opened)
        self.bus.subscribe(ActivityEvent.FILE_ACCESSED, self._on_file_accessed)
        self.bus.subscribe(ActivityEvent.FILE_CLOSED, self._on_file_closed)

    def _at(self, payload: dict[str, Any]) -> datetime:
        at = payload.get("at")
        return at if isinstance(at, datetime) else self.clock()

    def _on_project_opened(self, payload: dict[str, Any]) -> None:
        project: ProjectHandle | None = payload.get("project")
        if project is None:
            logger.debug("Ignoring project.opened without a project")
            return
        self.state.open_project(project, at=self._at(payload))

    def _on_project_closed(self, payload: dict[str, Any]) -> None:
        project: ProjectHandle | None = payload.get("project")
        if project is not None:
            self._last_touched.pop(project, None)
        self.state.close_project(project)

    def _on_file_opened(self, payload: dict[str, Any]) -> None:
        project: ProjectHandle | None = payload.get("project")
        file: FileHandle | None = payload.get("file")
        if project is None or file is None:
            logger.debug("Ignoring file.opened without project or file")
            return
        at = self._at(payload)
        if project not in self.state:
            self.state.open_project(project, at=at)
        with self.state.edit(project) as builder:
            _open_or_touch(builder, file, at)
            self._last_touched[project] = file

    def _on_file_accessed(self, payload: dict[str, Any]) -> None:
        project: ProjectHandle | None = payload.get("project")
        file: FileHandle | None = payload.get("file")
        if project is None:
            logger.debug("Ignoring file.accessed without a project")
            return
        at = self._at(payload)
        if project not in self.state:
            self.state.open_project(project, at=at)
        with self.state.edit(project) as builder:
            if (
                self.settings.reset_open_time_after_inactivity
                and at - builder.accessed_at > self.settings.inactivity_timeout
            ):
                logger.debug("Project '%s' was idle; resetting open time", project.name)
                builder.set_opened_at(at)
            _open_or_touch(builder, file, at)
            if file is not None:
                self._last_touched[project] = file

    def _on_file_closed(self, payload: dict[str, Any]) -> None:
        project: ProjectHandle | None = payload.get("project")
        if project not in self.state:
            logger.debug("Ignoring file.closed for untracked project")
            return
        file: FileHandle | None = payload.get("file")
        with self.state.edit(project) as builder:
            builder.remove(file)
            if file is not None and self._last_touched.get(project) is file:
                del self._last_touched[project]

    def current(self, now: datetime | None = None) -> ActiveContext | None:
        """Return the active project and file, or None when nothing should be shown."""
        if not self.settings.enabled:
            return None
        candidates = [data for data in self.state.projects() if data.settings.enabled]
        project = most_recent(candidates)
        if project is None:
            return None
        now = now or self.clock()
        if self.settings.hide_after_inactivity and now - project.accessed_at > self.settings.inactivity_timeout:
            return None
        if not self.settings.show_files:
            return ActiveContext(project)
        files = project.files.values()
        if self.settings.hide_read_only_files:
            files = [data for data in files if data.is_writeable]
        return ActiveContext(project, _latest_file(files, self._last_touched.get(project.platform)))


def _latest_file(files: Iterable[FileData], last_touched: FileHandle | None) -> FileData | None:
    """Most recently accessed file; on equal times the last touched file wins."""
    return max(files, key=lambda data: (data.accessed_at, data.handle is last_touched), default=None)


def _open_or_touch(builder: ProjectDataBuilder, file: FileHandle | None, at: datetime) -> None:
    """Record an access on a tracked file, or start tracking it as opened at ``at``."""
    if file in builder:
        builder.update(file, lambda child: child.touch(at))
        return

    def opened(child: FileDataBuilder) -> None:
        child.set_opened_at(at)
        child.set_accessed_at(at)

    builder.add(file, opened)
