"""ProjectList model -- the ordered list of saved project directories.

A ProjectList is the single persistence unit: the store loads the whole
document, at most one entry is added or removed, and the whole document is
written back.  An entry's identity is its position, so removing an entry
shifts every later index down by one.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from pydantic import BaseModel, Field, field_validator


def project_name(path: str) -> str:
    """Return the final path component used as the project's name.

    Trailing separators are ignored.  A path without a final component
    (``/``) yields an empty string.
    """
    return PurePath(path).name


class ProjectList(BaseModel):
    """Ordered, duplicate-permitting list of absolute project paths."""

    paths: list[str] = Field(
        default_factory=list,
        description="Saved project paths in insertion order.",
    )

    @field_validator("paths")
    @classmethod
    def reject_empty_entries(cls, value: list[str]) -> list[str]:
        for index, path in enumerate(value):
            if not path:
                raise ValueError(f"Entry {index} is an empty path.")
        return value

    def __len__(self) -> int:
        return len(self.paths)

    def entries(self) -> list["ProjectEntry"]:
        """Return every saved path annotated with its index."""
        return [
            ProjectEntry(index=index, path=path)
            for index, path in enumerate(self.paths)
        ]

    # -- Serialization helpers ------------------------------------------------

    def to_json_dict(self) -> dict:
        """Serialize to the on-disk document shape."""
        return {"paths": list(self.paths)}

    @classmethod
    def from_json_dict(cls, data: dict) -> "ProjectList":
        """Deserialize from the on-disk document shape."""
        return cls.model_validate(data)


class ProjectEntry(BaseModel):
    """A saved path together with its current index."""

    index: int = Field(ge=0, description="Position in the project list.")
    path: str = Field(description="The saved path, original casing.")

    @property
    def name(self) -> str:
        """The basename, or the full path when it has no final component."""
        return project_name(self.path) or self.path

    def exists(self) -> bool:
        """Best-effort check that the saved directory is still there."""
        return Path(self.path).is_dir()
