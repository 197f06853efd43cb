"""File-based storage for the saved project list."""

from teleproj.storage.store import ProjectStore

__all__ = ["ProjectStore"]
