"""ProjectStore -- file-based storage for the saved project list.

The whole list lives in one JSON document (``~/.teleproj.json`` by default)
shaped ``{"paths": [...]}``.  Each invocation loads the entire document,
performs at most one mutation, and rewrites the entire document.  Writes are
atomic (write-to-temp + rename), so a crash mid-write never leaves a
truncated file behind.  There is no locking: if two invocations race, the
last full rewrite wins.

Typical usage::

    store = ProjectStore("/home/me/.teleproj.json")
    projects = store.load()

    store.list(projects)               # [ProjectEntry(index=0, path=...), ...]
    index = store.add(projects, "/home/me/src/blog")
    removed = store.remove(projects, 0)
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from teleproj.errors import (
    InvalidPath,
    MalformedStore,
    OutOfRange,
    PersistenceFailure,
)
from teleproj.models.project import ProjectEntry, ProjectList

logger = logging.getLogger(__name__)


class ProjectStore:
    """Load-entire/save-entire persistence for a :class:`ProjectList`.

    The store holds no list state of its own: every operation takes the
    list it works on and mutating operations persist it before returning.

    Parameters
    ----------
    store_path:
        Path to the JSON document.  The file is created on the first save.
    """

    def __init__(self, store_path: Union[str, Path]) -> None:
        self._path = Path(store_path)

    # ------------------------------------------------------------------
    # Public API -- whole-document I/O
    # ------------------------------------------------------------------

    def load(self) -> ProjectList:
        """Read the project list from disk.

        A missing file is an empty list.

        Raises
        ------
        PersistenceFailure
            The file exists but cannot be read.
        MalformedStore
            The content is not JSON or not shaped ``{"paths": [str, ...]}``
            with non-empty strings.
        """
        if not self._path.exists():
            logger.debug("No project list at %s. Starting empty.", self._path)
            return ProjectList()

        try:
            with open(self._path, "r", encoding="utf-8") as fp:
                data = json.load(fp)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedStore(self._path, f"invalid JSON ({exc})") from exc
        except OSError as exc:
            raise PersistenceFailure(self._path, f"cannot read ({exc})") from exc

        if not isinstance(data, dict):
            raise MalformedStore(self._path, "expected a JSON object")
        try:
            projects = ProjectList.from_json_dict(data)
        except ValidationError as exc:
            raise MalformedStore(
                self._path, f"expected a list of non-empty path strings ({exc})"
            ) from exc

        logger.debug("Loaded %d project(s) from %s", len(projects), self._path)
        return projects

    def save(self, projects: ProjectList) -> Path:
        """Rewrite the whole document with *projects*.

        Returns
        -------
        Path
            The path to the written file.

        Raises
        ------
        PersistenceFailure
            The document could not be written, including paths that cannot
            be encoded as UTF-8 (undecodable POSIX file names).
        """
        try:
            self._atomic_write(self._path, projects.to_json_dict())
        except (OSError, UnicodeError) as exc:
            raise PersistenceFailure(self._path, f"cannot write ({exc})") from exc
        logger.info("Saved %d project(s) to %s", len(projects), self._path)
        return self._path

    # ------------------------------------------------------------------
    # Public API -- list operations
    # ------------------------------------------------------------------

    def list(self, projects: ProjectList) -> list[ProjectEntry]:
        """Return every entry annotated with its index.  No side effects."""
        return projects.entries()

    def add(self, projects: ProjectList, path: str) -> int:
        """Append *path* as given and persist.

        Duplicates are kept.  Returns the new entry's index.

        Raises
        ------
        InvalidPath
            *path* is empty.
        PersistenceFailure
            The list could not be written.
        """
        if not path:
            raise InvalidPath("Cannot add an empty path.")
        projects.paths.append(path)
        index = len(projects) - 1
        logger.debug("Appended %s at index %d", path, index)
        self.save(projects)
        return index

    def remove(self, projects: ProjectList, index: int) -> str:
        """Delete the entry at *index* and persist.

        Later entries shift down by one.  If persisting fails, *projects*
        still reflects the removal and :class:`PersistenceFailure` is raised.

        Returns
        -------
        str
            The removed path.

        Raises
        ------
        OutOfRange
            *index* is negative or ``>= len(projects)``.
        """
        if index < 0 or index >= len(projects):
            raise OutOfRange(index, len(projects))
        removed = projects.paths.pop(index)
        logger.debug("Removed %s from index %d", removed, index)
        self.save(projects)
        return removed

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def store_path(self) -> Path:
        """The document this store reads and writes."""
        return self._path

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _atomic_write(target: Path, data: dict) -> None:
        """Write *data* as formatted JSON to *target* atomically.

        The temp file is created in the same directory as *target* so the
        final ``os.replace`` stays on one filesystem.  On any failure before
        the rename the temp file is removed and *target* is left untouched.
        """
        target.parent.mkdir(parents=True, exist_ok=True)

        fd = None
        tmp_path: Optional[str] = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=".tmp_",
                suffix=".json",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                fd = None  # os.fdopen takes ownership of the fd
                json.dump(data, fp, indent=2, ensure_ascii=False)
                fp.write("\n")
                fp.flush()
                os.fsync(fp.fileno())

            os.replace(tmp_path, str(target))
            tmp_path = None

        except BaseException:
            if fd is not None:
                os.close(fd)
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_path)
            raise
