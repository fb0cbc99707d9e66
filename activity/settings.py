"""Application and per-project presence settings."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field, ValidationError


class ProjectSettings(BaseModel):
    """Settings owned by the host for a single project."""

    enabled: bool = True
    description: str = Field(default="", max_length=128)


class ApplicationSettings(BaseModel):
    """Settings that apply to every tracked project."""

    enabled: bool = True
    show_files: bool = True
    hide_read_only_files: bool = False
    hide_after_inactivity: bool = False
    inactivity_timeout_minutes: int = Field(default=10, ge=1)
    reset_open_time_after_inactivity: bool = False
    debug_logging: bool = False

    @property
    def inactivity_timeout(self) -> timedelta:
        return timedelta(minutes=self.inactivity_timeout_minutes)


def load_application_settings(config: dict[str, Any]) -> ApplicationSettings:
    """Build application settings from the ``application`` config section."""
    section = config.get("application") or {}
    if not isinstance(section, dict):
        raise ValueError("Config section 'application' must be a mapping.")
    try:
        return ApplicationSettings(**section)
    except ValidationError as exc:
        raise ValueError(f"Invalid 'application' settings: {exc}") from exc


def load_project_settings(config: dict[str, Any], project_name: str) -> ProjectSettings:
    """Build settings for ``project_name`` from the ``projects`` config section."""
    projects = config.get("projects") or {}
    if not isinstance(projects, dict):
        raise ValueError("Config section 'projects' must be a mapping.")
    section = projects.get(project_name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config for project '{project_name}' must be a mapping.")
    try:
        return ProjectSettings(**section)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings for project '{project_name}': {exc}") from exc
