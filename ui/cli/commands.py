"""Typer command handlers."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import typer

from activity.fields import FieldKind
from core.activity_tracker import ActiveContext
from core.orchestrator import Orchestrator, RuntimeBundle
from core.policy_runtime import configure_logging, load_effective_config
from core.session_replay import ReplaySession, load_script, parse_timestamp, replay as replay_events


def _runtime(root: Path | None = None) -> RuntimeBundle:
    bundle = Orchestrator(root=root).build()
    return bundle


def _replayed(script: Path, root: Path | None = None) -> RuntimeBundle:
    bundle = _runtime(root)
    try:
        events = load_script(script)
        replay_events(events, bus=bundle.bus, session=ReplaySession(config=bundle.config))
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return bundle


def _last_event_time(bundle: RuntimeBundle) -> datetime | None:
    return max((data.accessed_at for data in bundle.state.projects()), default=None)


def setup_logging(debug: bool = False, root: Path | None = None) -> None:
    """Apply logging settings from the effective configuration."""
    root_dir = Orchestrator(root=root).root
    configure_logging(load_effective_config(root_dir), debug=debug)


def replay(script: Path, at: str | None = None) -> None:
    """Replay a script and print the active project/file."""
    bundle = _replayed(script)
    try:
        now = parse_timestamp(at) or _last_event_time(bundle)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--at") from exc
    active = bundle.tracker.current(now=now)
    if active is None:
        typer.echo("No active project.")
        return
    _echo_active(active, now)


def dump(script: Path) -> None:
    """Replay a script and print every project snapshot as JSON."""
    bundle = _replayed(script)
    projects = sorted(bundle.state.projects(), key=lambda data: data.accessed_at, reverse=True)
    typer.echo(json.dumps([data.to_dict() for data in projects], indent=2))


def fields(script: Path, kind: str) -> None:
    """Replay a script and print one field kind of the active file."""
    try:
        field_kind = FieldKind.parse(kind)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="KIND") from exc
    bundle = _replayed(script)
    active = bundle.tracker.current(now=_last_event_time(bundle))
    if active is None:
        typer.echo("No active project.")
        return
    for value in sorted(active.fields(field_kind)):
        typer.echo(value)


def config_show() -> None:
    """Show effective runtime config."""
    bundle = _runtime()
    typer.echo(json.dumps(bundle.config, indent=2))


def _echo_active(active: ActiveContext, now: datetime | None) -> None:
    project = active.project
    typer.echo(f"Project: {project.name}")
    if project.settings.description:
        typer.echo(f"Description: {project.settings.description}")
    if now is not None:
        typer.echo(f"Elapsed: {active.elapsed(now)}")
    if active.file is None:
        typer.echo("File: -")
        return
    typer.echo(f"File: {active.file.unique_name}")
    for kind in FieldKind:
        values = ", ".join(sorted(active.fields(kind))) or "-"
        typer.echo(f"  {kind.value}: {values}")
