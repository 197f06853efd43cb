"""Resolver -- decide which saved project a query designates.

Resolution runs in three stages and stops at the first that applies:

1. **Index** -- a query made only of ASCII digits is a position in the list.
   An index past the end is an error; it never falls through to name
   matching.
2. **Exact name** -- the lowercased query equals the lowercased basename of
   exactly one entry.
3. **Fuzzy** -- every entry whose lowercased basename contains the query as
   a subsequence is ranked by ``(tier, basename length, index)``.  Tiers
   order prefix matches before substring matches before subsequence-only
   matches.  The leader wins only if no other candidate shares its
   ``(tier, basename length)``; otherwise every tied entry is reported as
   :class:`~teleproj.errors.Ambiguous`.

Ranking uses integer tuples only, so tie detection is exact.

Typical usage::

    from teleproj.resolver import resolve

    resolution = resolve(store.list(projects), "blog")
    print(resolution.path)
"""

from __future__ import annotations

import logging
import re
from enum import IntEnum
from typing import Optional, Sequence

from teleproj.errors import Ambiguous, NoMatch, OutOfRange
from teleproj.models.project import ProjectEntry, project_name
from teleproj.models.resolution import MatchKind, Resolution

logger = logging.getLogger(__name__)

# Unsigned decimal, nothing else: "+1", " 1", "-1" and "1a" are names.
_INDEX_PATTERN = re.compile(r"[0-9]+")


class FuzzyTier(IntEnum):
    """Quality of a fuzzy match.  Lower is better."""

    PREFIX = 0
    SUBSTRING = 1
    SUBSEQUENCE = 2


def is_index_query(query: str) -> bool:
    """Return *True* if *query* should be read as a list index."""
    return _INDEX_PATTERN.fullmatch(query) is not None


def is_subsequence(needle: str, haystack: str) -> bool:
    """Return *True* if every character of *needle* appears in *haystack* in order."""
    remaining = iter(haystack)
    return all(ch in remaining for ch in needle)


def fuzzy_tier(name: str, query: str) -> Optional[FuzzyTier]:
    """Classify how *query* matches *name*.  Both must already be lowercase.

    Returns *None* when *query* is not a subsequence of *name*.
    """
    if not query:
        return None
    if name.startswith(query):
        return FuzzyTier.PREFIX
    if query in name:
        return FuzzyTier.SUBSTRING
    if is_subsequence(query, name):
        return FuzzyTier.SUBSEQUENCE
    return None


def rank_key(entry: ProjectEntry, query: str) -> Optional[tuple[int, int, int]]:
    """Return the ``(tier, basename length, index)`` tuple for *entry*.

    *query* must already be lowercase.  Returns *None* for entries that do
    not match at all.  Smaller tuples rank higher.
    """
    name = project_name(entry.path).lower()
    tier = fuzzy_tier(name, query)
    if tier is None:
        return None
    return (int(tier), len(name), entry.index)


def resolve(entries: Sequence[ProjectEntry], query: str) -> Resolution:
    """Resolve *query* against *entries* (as returned by ``ProjectStore.list``).

    Returns
    -------
    Resolution
        The single designated entry and the stage that found it.

    Raises
    ------
    OutOfRange
        *query* is an index ``>= len(entries)``.
    Ambiguous
        Several entries tie for the best fuzzy rank.
    NoMatch
        Nothing matches.
    """
    if is_index_query(query):
        return _resolve_index(entries, query)

    lowered = query.lower()

    exact = [
        entry for entry in entries
        if project_name(entry.path) and project_name(entry.path).lower() == lowered
    ]
    if len(exact) == 1:
        logger.debug("Exact name match for %r: %s", query, exact[0].path)
        return Resolution(
            kind=MatchKind.EXACT_NAME,
            index=exact[0].index,
            path=exact[0].path,
        )

    return _resolve_fuzzy(entries, query, lowered)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _resolve_index(entries: Sequence[ProjectEntry], digits: str) -> Resolution:
    # More significant digits than len(entries) has is past the end; such
    # text is never passed to int().
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(len(entries))):
        raise OutOfRange(significant, len(entries))
    index = int(significant)
    if index >= len(entries):
        raise OutOfRange(index, len(entries))
    entry = entries[index]
    return Resolution(kind=MatchKind.BY_INDEX, index=entry.index, path=entry.path)


def _resolve_fuzzy(
    entries: Sequence[ProjectEntry],
    query: str,
    lowered: str,
) -> Resolution:
    ranked = []
    for entry in entries:
        key = rank_key(entry, lowered)
        if key is not None:
            ranked.append((key, entry))

    if not ranked:
        raise NoMatch(query)

    ranked.sort(key=lambda item: item[0])
    best_key = ranked[0][0]
    tied = [entry for key, entry in ranked if key[:2] == best_key[:2]]

    if len(tied) > 1:
        logger.debug(
            "Query %r is ambiguous between indices %s",
            query,
            [entry.index for entry in tied],
        )
        raise Ambiguous(query, tied)

    winner = tied[0]
    logger.debug("Fuzzy match for %r: %s (rank %s)", query, winner.path, best_key)
    return Resolution(kind=MatchKind.FUZZY, index=winner.index, path=winner.path)
