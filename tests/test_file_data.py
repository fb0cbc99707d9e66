"""File snapshot and builder tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from activity.fields import FieldKind, FieldProvider
from activity.file_data import FileData, FileDataBuilder, split_name
from activity.host import HostDisposedError
from activity.local_host import LocalFile, LocalProject

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def build_file(name: str = "archive.tar.gz", path: str | None = None) -> tuple[LocalProject, LocalFile, FileData]:
    project = LocalProject(name="demo")
    handle = project.open_file(path or f"src/{name}")
    data = FileDataBuilder(project, opened_at=T0).build(handle)
    return project, handle, data


def test_multi_dot_name_yields_every_split() -> None:
    _, _, data = build_file("archive.tar.gz")
    assert data.get_field(FieldKind.EXTENSION) == {".tar.gz", ".gz"}
    assert data.get_field(FieldKind.BASENAME) == {"archive", "archive.tar"}
    assert data.get_field(FieldKind.NAME) == {"archive.tar.gz"}


def test_name_without_dot_has_no_extension() -> None:
    assert split_name("Makefile") == (frozenset(), frozenset())


def test_leading_dot_name() -> None:
    base_names, extensions = split_name(".gitignore")
    assert base_names == {""}
    assert extensions == {".gitignore"}


def test_path_field_uses_unix_separators() -> None:
    _, _, data = build_file("main.py", path="C:\\work\\demo\\main.py")
    assert data.get_field(FieldKind.PATH) == {"C:/work/demo/main.py"}


def test_file_data_is_field_provider() -> None:
    _, _, data = build_file()
    assert isinstance(data, FieldProvider)


def test_build_reads_identity_from_live_handle() -> None:
    project, handle, data = build_file("notes.txt")
    handle.rename("docs/readme.md")
    handle.set_writable(False)
    rebuilt = data.builder().build(handle)
    assert rebuilt.name == "readme.md"
    assert rebuilt.path == "docs/readme.md"
    assert rebuilt.is_writeable is False
    assert rebuilt.opened_at == data.opened_at
    assert rebuilt.accessed_at == data.accessed_at
    assert rebuilt.project is project


def test_round_trip_without_edits_is_equal() -> None:
    _, handle, data = build_file()
    assert data.builder().build(handle) == data


def test_builder_keeps_open_before_access() -> None:
    builder = FileDataBuilder(LocalProject(name="demo"), opened_at=T0)
    builder.set_accessed_at(T0 - timedelta(minutes=1))
    assert builder.accessed_at == T0
    builder.set_opened_at(T0 + timedelta(minutes=2))
    assert builder.accessed_at == T0 + timedelta(minutes=2)
    builder.touch(T0 + timedelta(minutes=5))
    assert builder.accessed_at == T0 + timedelta(minutes=5)


def test_builder_defaults_to_clock() -> None:
    clock = MagicMock(return_value=T0)
    builder = FileDataBuilder(LocalProject(name="demo"), clock=clock)
    assert builder.opened_at == T0
    assert builder.accessed_at == T0


def test_unique_name_is_resolved_once() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("a/main.py")
    resolver = MagicMock(return_value="main.py [a]")
    data = FileDataBuilder(project, opened_at=T0, title_resolver=resolver).build(handle)
    assert data.unique_name == "main.py [a]"
    assert data.unique_name == "main.py [a]"
    resolver.assert_called_once_with(project, handle)


def test_unique_name_falls_back_when_project_disposed() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("a/main.py")
    resolver = MagicMock(return_value="unused")
    data = FileDataBuilder(project, opened_at=T0, title_resolver=resolver).build(handle)
    project.dispose()
    assert data.unique_name == "main.py"
    resolver.assert_not_called()


def test_unique_name_falls_back_when_disposed_during_lookup() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("a/main.py")
    resolver = MagicMock(side_effect=HostDisposedError("gone"))
    data = FileDataBuilder(project, opened_at=T0, title_resolver=resolver).build(handle)
    assert data.unique_name == "main.py"


def test_field_kind_parse() -> None:
    assert FieldKind.parse(" Extension ") is FieldKind.EXTENSION
    with pytest.raises(ValueError):
        FieldKind.parse("size")
