"""Project snapshot and builder tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from activity.file_data import FileDataBuilder
from activity.local_host import LocalProject
from activity.project_data import ProjectData, ProjectDataBuilder
from activity.settings import ProjectSettings

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
T1 = T0 + timedelta(minutes=5)
T2 = T0 + timedelta(minutes=9)


class SteppingClock:
    """Clock returning a preset time that tests move by hand."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_empty_project_accessed_at_is_open_time() -> None:
    builder = ProjectDataBuilder(LocalProject(name="demo"), opened_at=T0)
    assert builder.accessed_at == T0
    assert builder.build().accessed_at == T0


def test_recency_scenario() -> None:
    clock = SteppingClock(T0)
    project = LocalProject(name="demo")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=clock)
    file_a = project.open_file("a.py")
    file_b = project.open_file("b.py")

    builder.add(file_a)
    assert builder.file_builder(file_a).opened_at == T0
    assert builder.file_builder(file_a).accessed_at == T0

    builder.update(file_a, lambda child: child.set_accessed_at(T1))
    assert builder.accessed_at == T1
    assert builder.build().accessed_at == T1

    clock.now = T2
    builder.add(file_b)
    assert builder.accessed_at == T2

    builder.remove(file_a)
    assert builder.accessed_at == T2
    assert builder.build().accessed_at == T2


def test_accessed_at_is_max_of_open_and_children() -> None:
    project = LocalProject(name="demo")
    builder = ProjectDataBuilder(project, opened_at=T1, clock=SteppingClock(T0))
    builder.add(project.open_file("early.py"))
    assert builder.accessed_at == T1
    builder.add(project.open_file("late.py"), lambda child: child.touch(T2))
    assert builder.accessed_at == T2


def test_add_twice_keeps_one_entry_and_applies_edit() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("main.py")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=SteppingClock(T0))
    builder.add(handle)
    builder.add(handle, lambda child: child.touch(T1))
    assert len(builder) == 1
    assert builder.file_builder(handle).accessed_at == T1
    assert builder.file_builder(handle).opened_at == T0


def test_update_untracked_file_is_noop() -> None:
    project = LocalProject(name="demo")
    builder = ProjectDataBuilder(project, opened_at=T0)
    calls: list[FileDataBuilder] = []
    builder.update(project.open_file("main.py"), calls.append)
    builder.update(None, calls.append)
    assert calls == []
    assert len(builder) == 0


def test_none_handles_are_ignored() -> None:
    builder = ProjectDataBuilder(LocalProject(name="demo"), opened_at=T0)
    builder.add(None)
    builder.remove(None)
    assert None not in builder
    assert len(builder) == 0


def test_remove_then_contains() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("main.py")
    builder = ProjectDataBuilder(project, opened_at=T0)
    builder.add(handle)
    assert handle in builder
    builder.remove(handle)
    assert handle not in builder
    builder.remove(handle)
    assert handle not in builder


def test_moving_open_time_forward_moves_children() -> None:
    project = LocalProject(name="demo")
    early = project.open_file("early.py")
    late = project.open_file("late.py")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=SteppingClock(T0))
    builder.add(early)
    builder.add(late, lambda child: (child.set_opened_at(T2), child.touch(T2)))

    builder.set_opened_at(T1)

    assert builder.file_builder(early).opened_at == T1
    assert builder.file_builder(early).accessed_at == T1
    assert builder.file_builder(late).opened_at == T2


def test_moving_open_time_backward_leaves_children() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("main.py")
    builder = ProjectDataBuilder(project, opened_at=T1, clock=SteppingClock(T1))
    builder.add(handle)
    builder.set_opened_at(T0)
    assert builder.opened_at == T0
    assert builder.file_builder(handle).opened_at == T1


def test_round_trip_without_edits_is_equal() -> None:
    project = LocalProject(name="demo")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=SteppingClock(T0))
    builder.add(project.open_file("a.py"), lambda child: child.touch(T1))
    builder.add(project.open_file("b.py"), lambda child: child.touch(T2))
    snapshot = builder.build()
    assert snapshot.builder().build() == snapshot


def test_snapshot_is_isolated_from_builder() -> None:
    project = LocalProject(name="demo")
    handle = project.open_file("a.py")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=SteppingClock(T0))
    builder.add(handle)
    snapshot = builder.build()

    builder.update(handle, lambda child: child.touch(T2))
    builder.add(project.open_file("b.py"))

    assert snapshot.accessed_at == T0
    assert list(snapshot.files) == [handle]
    next_builder = snapshot.builder()
    next_builder.remove(handle)
    assert handle in snapshot.files


def test_snapshot_files_are_read_only() -> None:
    project = LocalProject(name="demo")
    snapshot = ProjectDataBuilder(project, opened_at=T0).build()
    with pytest.raises(TypeError):
        snapshot.files[project.open_file("x.py")] = None  # type: ignore[index]


def test_settings_read_through() -> None:
    project = LocalProject(name="demo", settings=ProjectSettings(description="first"))
    snapshot = ProjectDataBuilder(project, opened_at=T0).build()
    project.settings = ProjectSettings(description="second")
    assert snapshot.settings.description == "second"
    assert snapshot.name == "demo"


def test_most_recent_file_and_dump() -> None:
    project = LocalProject(name="demo")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=SteppingClock(T0))
    first = project.open_file("a.py")
    builder.add(first)
    builder.add(project.open_file("b.py"), lambda child: child.touch(T1))
    snapshot: ProjectData = builder.build()

    assert snapshot.most_recent_file().name == "b.py"
    assert snapshot.file(first).name == "a.py"
    assert snapshot.file(None) is None
    dumped = snapshot.to_dict()
    assert dumped["name"] == "demo"
    assert dumped["accessed_at"] == T1.isoformat()
    assert [item["name"] for item in dumped["files"]] == ["b.py", "a.py"]


def test_snapshots_are_hashable() -> None:
    project = LocalProject(name="demo")
    builder = ProjectDataBuilder(project, opened_at=T0, clock=SteppingClock(T0))
    builder.add(project.open_file("a.py"), lambda child: child.touch(T1))
    snapshot = builder.build()
    rebuilt = snapshot.builder().build()
    assert hash(snapshot) == hash(rebuilt)
    assert len({snapshot, rebuilt}) == 1
