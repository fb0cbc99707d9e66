"""Boundary contracts for host-owned files, projects and titles.

The core never mutates these objects. It only reads their identity fields
when a snapshot is built.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from activity.settings import ProjectSettings


class HostDisposedError(RuntimeError):
    """Raised by a host when it is queried about a disposed project."""


class FileHandle(Protocol):
    """Host file. Hashed by identity and used as a mapping key."""

    @property
    def name(self) -> str: ...

    @property
    def path(self) -> str: ...

    @property
    def is_writable(self) -> bool: ...


class ProjectHandle(Protocol):
    """Host project. Hashed by identity and used as a mapping key."""

    @property
    def name(self) -> str: ...

    @property
    def is_disposed(self) -> bool: ...

    @property
    def settings(self) -> ProjectSettings: ...


TitleResolver = Callable[[ProjectHandle, FileHandle], str]


def plain_title(project: ProjectHandle, file: FileHandle) -> str:
    """Title resolver that uses the bare file name."""
    _ = project
    return file.name
