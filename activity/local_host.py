"""In-process host used when no IDE is attached (CLI replay, tests)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from activity.file_data import to_unix_separators
from activity.host import FileHandle, HostDisposedError, ProjectHandle
from activity.settings import ProjectSettings


@dataclass(eq=False)
class LocalFile:
    """File handle backed by a plain path string."""

    path: str
    is_writable: bool = True

    @property
    def name(self) -> str:
        return PurePosixPath(to_unix_separators(self.path)).name

    def rename(self, new_path: str) -> None:
        self.path = new_path

    def set_writable(self, writable: bool) -> None:
        self.is_writable = writable


@dataclass(eq=False)
class LocalProject:
    """Project handle that keeps its own list of open files."""

    name: str
    base_path: str = ""
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    is_disposed: bool = False
    files: list[LocalFile] = field(default_factory=list)

    def open_file(self, path: str, writable: bool = True) -> LocalFile:
        """Return the open handle for ``path``, opening it if needed."""
        for existing in self.files:
            if existing.path == path:
                return existing
        handle = LocalFile(path=path, is_writable=writable)
        self.files.append(handle)
        return handle

    def find_file(self, path: str) -> LocalFile | None:
        return next((existing for existing in self.files if existing.path == path), None)

    def close_file(self, handle: LocalFile) -> None:
        if handle in self.files:
            self.files.remove(handle)

    def dispose(self) -> None:
        self.is_disposed = True
        self.files.clear()


def _parent_label(project: LocalProject, file: FileHandle) -> str:
    parent = PurePosixPath(to_unix_separators(file.path)).parent
    base = PurePosixPath(to_unix_separators(project.base_path)) if project.base_path else None
    if base is not None and parent.is_relative_to(base):
        parent = parent.relative_to(base)
    return parent.as_posix()


def disambiguated_title(project: ProjectHandle, file: FileHandle) -> str:
    """Editor-tab style title: the file name, plus its folder when the name is shared."""
    if project.is_disposed:
        raise HostDisposedError(f"Project '{project.name}' is disposed")
    if not isinstance(project, LocalProject):
        return file.name
    clashes = [other for other in project.files if other is not file and other.name == file.name]
    if not clashes:
        return file.name
    return f"{file.name} [{_parent_label(project, file)}]"
