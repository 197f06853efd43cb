"""Query resolution: map an index or a fuzzy name to one saved project."""

from teleproj.resolver.resolver import (
    FuzzyTier,
    is_index_query,
    rank_key,
    resolve,
)

__all__ = ["FuzzyTier", "is_index_query", "rank_key", "resolve"]
