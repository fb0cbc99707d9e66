"""CLI entrypoint for the activity tracker."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Open project/file activity tracker")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    commands.setup_logging(debug=debug)


@app.command("replay")
def replay_cmd(
    script: Path = typer.Argument(..., help="YAML event script to replay"),
    at: str | None = typer.Option(None, "--at", help="Evaluate the active project at this ISO-8601 time"),
) -> None:
    """Replay events and show the active project and file."""
    commands.replay(script=script, at=at)


@app.command("dump")
def dump_cmd(
    script: Path = typer.Argument(..., help="YAML event script to replay"),
) -> None:
    """Replay events and dump every project snapshot."""
    commands.dump(script=script)


@app.command("fields")
def fields_cmd(
    script: Path = typer.Argument(..., help="YAML event script to replay"),
    kind: str = typer.Argument(..., help="Field kind: extension, name, basename or path"),
) -> None:
    """Replay events and list field values of the active file."""
    commands.fields(script=script, kind=kind)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
