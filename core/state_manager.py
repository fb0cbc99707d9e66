"""Process-wide publication point for project snapshots."""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from activity.host import ProjectHandle, TitleResolver, plain_title
from activity.project_data import ProjectData, ProjectDataBuilder
from activity.timestamps import Clock, utc_now

logger = logging.getLogger("activity.state")


class ActivityState:
    """Holds the current snapshot of every open project.

    Readers never wait on an edit: they see the last published snapshot.
    Writers edit a private builder under a per-project lock and swap the
    built snapshot in when done. A build is only published if the snapshot
    it started from is still the current one.
    """

    def __init__(self, title_resolver: TitleResolver = plain_title, clock: Clock = utc_now) -> None:
        self.title_resolver = title_resolver
        self.clock = clock
        self._projects: dict[ProjectHandle, ProjectData] = {}
        # Writer locks outlive close/reopen so one project never has two writers.
        self._locks: weakref.WeakKeyDictionary[ProjectHandle, threading.RLock] = weakref.WeakKeyDictionary()
        self._registry_lock = threading.Lock()

    def get(self, project: ProjectHandle | None) -> ProjectData | None:
        if project is None:
            return None
        return self._projects.get(project)

    def projects(self) -> list[ProjectData]:
        with self._registry_lock:
            return list(self._projects.values())

    def __contains__(self, project: object) -> bool:
        return project is not None and project in self._projects

    def _lock_for(self, project: ProjectHandle) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(project)
            if lock is None:
                lock = threading.RLock()
                self._locks[project] = lock
            return lock

    def _new_builder(self, project: ProjectHandle, opened_at: datetime | None = None) -> ProjectDataBuilder:
        return ProjectDataBuilder(
            project,
            opened_at=opened_at,
            title_resolver=self.title_resolver,
            clock=self.clock,
        )

    @contextmanager
    def edit(self, project: ProjectHandle) -> Iterator[ProjectDataBuilder]:
        """Yield a builder for ``project`` and publish its snapshot on exit.

        The snapshot is dropped when the project was closed, or closed and
        reopened, while the edit was running.
        """
        with self._lock_for(project):
            current = self._projects.get(project)
            builder = current.builder() if current is not None else self._new_builder(project)
            yield builder
            snapshot = builder.build()
            with self._registry_lock:
                if self._projects.get(project) is not current:
                    logger.debug("Project '%s' changed during edit; dropping snapshot", snapshot.name)
                    return
                self._projects[project] = snapshot

    def open_project(self, project: ProjectHandle, at: datetime | None = None) -> ProjectData:
        """Start tracking ``project``; an already open project keeps its state."""
        with self._lock_for(project):
            current = self._projects.get(project)
            if current is not None:
                return current
            snapshot = self._new_builder(project, opened_at=at).build()
            with self._registry_lock:
                self._projects[project] = snapshot
        logger.info("Project opened: %s", snapshot.name)
        return snapshot

    def close_project(self, project: ProjectHandle | None) -> None:
        if project is None:
            return
        with self._registry_lock:
            removed = self._projects.pop(project, None)
        if removed is not None:
            logger.info("Project closed: %s", removed.name)
