"""Pydantic data models for the saved project list and resolution results."""

from teleproj.models.project import ProjectEntry, ProjectList, project_name
from teleproj.models.resolution import MatchKind, Resolution

__all__ = [
    "MatchKind",
    "ProjectEntry",
    "ProjectList",
    "Resolution",
    "project_name",
]
