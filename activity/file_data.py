"""Immutable open-file snapshot and its builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Any

from activity.fields import FieldKind
from activity.host import FileHandle, HostDisposedError, ProjectHandle, TitleResolver, plain_title
from activity.timestamps import Clock, TimestampPair, utc_now

logger = logging.getLogger("activity.file_data")


def split_name(name: str) -> tuple[frozenset[str], frozenset[str]]:
    """Split a file name at every dot into basename and extension candidates.

    ``archive.tar.gz`` yields ``{archive, archive.tar}`` and ``{.tar.gz, .gz}``.
    """
    dots = [index for index, char in enumerate(name) if char == "."]
    base_names = frozenset(name[:index] for index in dots)
    extensions = frozenset(name[index:] for index in dots)
    return base_names, extensions


def to_unix_separators(path: str) -> str:
    return path.replace("\\", "/")


@dataclass(frozen=True)
class FileData:
    """Snapshot of one open file.

    Identity fields are read from the host handle when the snapshot is built.
    Derived values are computed on first read and cached for the lifetime of
    the snapshot.
    """

    name: str
    path: str
    is_writeable: bool
    opened_at: datetime
    accessed_at: datetime
    handle: FileHandle = field(compare=False, repr=False)
    project: ProjectHandle = field(compare=False, repr=False)
    title_resolver: TitleResolver = field(default=plain_title, compare=False, repr=False)

    @cached_property
    def _split(self) -> tuple[frozenset[str], frozenset[str]]:
        return split_name(self.name)

    @property
    def base_names(self) -> frozenset[str]:
        return self._split[0]

    @property
    def extensions(self) -> frozenset[str]:
        return self._split[1]

    @cached_property
    def relative_path(self) -> str:
        return to_unix_separators(self.path)

    @cached_property
    def unique_name(self) -> str:
        """Editor title for the file, or its plain name once the project is gone."""
        if self.project.is_disposed:
            return self.name
        try:
            return self.title_resolver(self.project, self.handle)
        except HostDisposedError:
            logger.debug("Project disposed while resolving title of %s", self.path)
            return self.name

    def get_field(self, kind: FieldKind) -> frozenset[str]:
        if kind is FieldKind.EXTENSION:
            return self.extensions
        if kind is FieldKind.NAME:
            return frozenset({self.name})
        if kind is FieldKind.BASENAME:
            return self.base_names
        if kind is FieldKind.PATH:
            return frozenset({self.relative_path})
        raise ValueError(f"Unsupported field kind: {kind!r}")

    def builder(self) -> FileDataBuilder:
        return FileDataBuilder(
            self.project,
            opened_at=self.opened_at,
            accessed_at=self.accessed_at,
            title_resolver=self.title_resolver,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "unique_name": self.unique_name,
            "path": self.relative_path,
            "writeable": self.is_writeable,
            "opened_at": self.opened_at.isoformat(),
            "accessed_at": self.accessed_at.isoformat(),
        }


class FileDataBuilder:
    """Mutable timestamps of an open file, owned by one project builder."""

    def __init__(
        self,
        project: ProjectHandle,
        opened_at: datetime | None = None,
        accessed_at: datetime | None = None,
        *,
        title_resolver: TitleResolver = plain_title,
        clock: Clock = utc_now,
    ) -> None:
        self.project = project
        self.title_resolver = title_resolver
        self._clock = clock
        self._times = TimestampPair.start(opened_at or clock(), accessed_at)

    @property
    def opened_at(self) -> datetime:
        return self._times.opened_at

    @property
    def accessed_at(self) -> datetime:
        return self._times.accessed_at

    def set_opened_at(self, opened_at: datetime) -> None:
        self._times = self._times.with_opened_at(opened_at)

    def set_accessed_at(self, accessed_at: datetime) -> None:
        self._times = self._times.with_accessed_at(accessed_at)

    def touch(self, at: datetime | None = None) -> None:
        """Record an access, now by default."""
        self.set_accessed_at(at or self._clock())

    def build(self, handle: FileHandle) -> FileData:
        return FileData(
            name=handle.name,
            path=handle.path,
            is_writeable=handle.is_writable,
            opened_at=self.opened_at,
            accessed_at=self.accessed_at,
            handle=handle,
            project=self.project,
            title_resolver=self.title_resolver,
        )
