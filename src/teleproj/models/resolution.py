"""Resolution model -- the successful outcome of resolving a query."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class MatchKind(str, Enum):
    """How a query designated its project."""

    BY_INDEX = "by_index"
    EXACT_NAME = "exact_name"
    FUZZY = "fuzzy"


class Resolution(BaseModel):
    """A query resolved to exactly one saved project."""

    kind: MatchKind = Field(description="Which resolution stage matched.")
    index: int = Field(ge=0, description="Index of the matched entry.")
    path: str = Field(description="The matched path, original casing.")
