"""Immutable open-project snapshot and its builder."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from activity.fields import most_recent
from activity.file_data import FileData, FileDataBuilder
from activity.host import FileHandle, ProjectHandle, TitleResolver, plain_title
from activity.timestamps import Clock, utc_now

if TYPE_CHECKING:
    from activity.settings import ProjectSettings

FileEdit = Callable[[FileDataBuilder], None]


def _no_edit(builder: FileDataBuilder) -> None:
    _ = builder


@dataclass(frozen=True)
class ProjectData:
    """Snapshot of one open project and its open files.

    ``accessed_at`` is not stored: it is the latest access over the files,
    or ``opened_at`` for a project without files.
    """

    platform: ProjectHandle = field(compare=False, repr=False)
    opened_at: datetime
    files: Mapping[FileHandle, FileData] = field(default_factory=dict, hash=False)
    name: str = field(init=False)
    title_resolver: TitleResolver = field(default=plain_title, compare=False, repr=False)
    clock: Clock = field(default=utc_now, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.platform.name)
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    @property
    def accessed_at(self) -> datetime:
        latest = most_recent(self.files.values())
        return latest.accessed_at if latest is not None else self.opened_at

    @property
    def settings(self) -> ProjectSettings:
        return self.platform.settings

    def file(self, handle: FileHandle | None) -> FileData | None:
        if handle is None:
            return None
        return self.files.get(handle)

    def most_recent_file(self) -> FileData | None:
        return most_recent(self.files.values())

    def builder(self) -> ProjectDataBuilder:
        return ProjectDataBuilder(
            self.platform,
            opened_at=self.opened_at,
            files=self.files,
            title_resolver=self.title_resolver,
            clock=self.clock,
        )

    def to_dict(self) -> dict[str, Any]:
        files = sorted(self.files.values(), key=lambda data: data.accessed_at, reverse=True)
        return {
            "name": self.name,
            "opened_at": self.opened_at.isoformat(),
            "accessed_at": self.accessed_at.isoformat(),
            "files": [data.to_dict() for data in files],
        }


class ProjectDataBuilder:
    """Mutable staging area for a project's next snapshot.

    The file builders are private to this object until :meth:`build` turns
    them into snapshots. Every method accepting a file handle treats ``None``
    as a no-op, since host events may arrive for files that are already gone.
    """

    def __init__(
        self,
        platform: ProjectHandle,
        opened_at: datetime | None = None,
        files: Mapping[FileHandle, FileData] | None = None,
        *,
        title_resolver: TitleResolver = plain_title,
        clock: Clock = utc_now,
    ) -> None:
        self.platform = platform
        self.title_resolver = title_resolver
        self._clock = clock
        self._opened_at = opened_at or clock()
        self._files: dict[FileHandle, FileDataBuilder] = {
            handle: data.builder() for handle, data in (files or {}).items()
        }

    @property
    def opened_at(self) -> datetime:
        return self._opened_at

    def set_opened_at(self, opened_at: datetime) -> None:
        """Move the project open time; files opened earlier are moved with it."""
        self._opened_at = opened_at
        for child in self._files.values():
            if child.opened_at < opened_at:
                child.set_opened_at(opened_at)

    @property
    def accessed_at(self) -> datetime:
        latest = max((child.accessed_at for child in self._files.values()), default=self._opened_at)
        return max(latest, self._opened_at)

    def add(self, handle: FileHandle | None, edit: FileEdit = _no_edit) -> None:
        """Track ``handle`` if needed, then apply ``edit`` to its builder."""
        if handle is None:
            return
        child = self._files.get(handle)
        if child is None:
            child = FileDataBuilder(self.platform, title_resolver=self.title_resolver, clock=self._clock)
            self._files[handle] = child
        edit(child)

    def update(self, handle: FileHandle | None, edit: FileEdit) -> None:
        """Apply ``edit`` to an already tracked file; untracked files are ignored."""
        if handle is None:
            return
        child = self._files.get(handle)
        if child is not None:
            edit(child)

    def remove(self, handle: FileHandle | None) -> None:
        if handle is None:
            return
        self._files.pop(handle, None)

    def file_builder(self, handle: FileHandle | None) -> FileDataBuilder | None:
        if handle is None:
            return None
        return self._files.get(handle)

    def __contains__(self, handle: object) -> bool:
        return handle is not None and handle in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[FileHandle]:
        return iter(list(self._files))

    def build(self) -> ProjectData:
        return ProjectData(
            platform=self.platform,
            opened_at=self._opened_at,
            files={handle: child.build(handle) for handle, child in self._files.items()},
            title_resolver=self.title_resolver,
            clock=self._clock,
        )
