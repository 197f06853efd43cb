"""teleproj exceptions."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence, Union

if TYPE_CHECKING:
    from teleproj.models.project import ProjectEntry

# Index text longer than this is shortened in messages.
_MAX_INDEX_DISPLAY = 20


class TeleprojError(Exception):
    """Base exception for teleproj."""


class InvalidPath(TeleprojError, ValueError):
    """A path that can never be stored, such as the empty string."""


# ---------------------------------------------------------------------------
# Resolution and index errors -- expected outcomes of user input
# ---------------------------------------------------------------------------


class ResolutionError(TeleprojError):
    """A query or index did not designate exactly one saved project."""


class OutOfRange(ResolutionError):
    """An index is not in ``0..len-1``.

    ``index`` is the integer when it was converted, or the raw digit text
    when it was too long to be worth converting.
    """

    def __init__(self, index: Union[int, str], length: int) -> None:
        self.index = index
        self.length = length
        shown = str(index)
        if len(shown) > _MAX_INDEX_DISPLAY:
            shown = f"{shown[:_MAX_INDEX_DISPLAY]}... ({len(shown)} digits)"
        if length == 0:
            message = f"Index {shown} is out of range (no projects saved)"
        else:
            message = f"Index {shown} is out of range (valid: 0..{length - 1})"
        super().__init__(message)


class NoMatch(ResolutionError):
    """Nothing in the list matches the query."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"No project found matching '{query}'")


class Ambiguous(ResolutionError):
    """Two or more projects tie for the best fuzzy match.

    ``candidates`` holds the tied entries in index order.
    """

    def __init__(self, query: str, candidates: Sequence[ProjectEntry]) -> None:
        self.query = query
        self.candidates = list(candidates)
        super().__init__(
            f"Multiple projects match '{query}' ({len(self.candidates)} tied)"
        )

    @property
    def indices(self) -> list[int]:
        return [entry.index for entry in self.candidates]


# ---------------------------------------------------------------------------
# Store errors -- fatal for the current invocation
# ---------------------------------------------------------------------------


class StoreError(TeleprojError):
    """The durable project list could not be read or written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class PersistenceFailure(StoreError):
    """I/O error while reading or writing the store file."""


class MalformedStore(StoreError):
    """The store file does not contain a valid project list."""
