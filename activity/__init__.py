"""Snapshot model of open projects and files."""

from activity.fields import AccessedAt, FieldKind, FieldProvider, most_recent
from activity.file_data import FileData, FileDataBuilder
from activity.host import FileHandle, HostDisposedError, ProjectHandle, TitleResolver, plain_title
from activity.project_data import ProjectData, ProjectDataBuilder
from activity.settings import ApplicationSettings, ProjectSettings
from activity.timestamps import TimestampPair, utc_now

__all__ = [
    "AccessedAt",
    "ApplicationSettings",
    "FieldKind",
    "FieldProvider",
    "FileData",
    "FileDataBuilder",
    "FileHandle",
    "HostDisposedError",
    "ProjectData",
    "ProjectDataBuilder",
    "ProjectHandle",
    "ProjectSettings",
    "TimestampPair",
    "TitleResolver",
    "most_recent",
    "plain_title",
    "utc_now",
]
