"""
Constraint-relaxation matching of a partial query against a rule catalog.

For every query field the search either applies the equality constraint or,
when the caller gave a present value, relaxes it. The largest surviving set
wins and is then ranked by specificity.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from ranker.specificity import rank_by_specificity
from shared.models import Entry, Query, WildcardMode, is_absent


@dataclass(frozen=True)
class MatchSet:
    """Catalog positions that survive one relaxation attempt."""

    indices: tuple[int, ...]
    applied: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.indices)


@dataclass
class MatchOutcome:
    """Result of matching a query against a catalog."""

    entries: list[Entry]
    applied: list[str] = field(default_factory=list)
    relaxed: list[str] = field(default_factory=list)
    search_calls: int = 0


class RelaxationSearch:
    """One search over a fixed catalog and query."""

    def __init__(
        self,
        catalog: list[Entry],
        query: Query,
        wildcard_mode: WildcardMode = WildcardMode.NULL,
        memoize: bool = True,
    ):
        self.catalog = catalog
        self.query = query
        self.wildcard_mode = wildcard_mode
        self.memoize = memoize
        self.calls = 0
        self.cache_hits = 0
        self._cache: dict[tuple[tuple[int, ...], tuple[str, ...]], MatchSet] = {}

    def run(self) -> MatchSet:
        """Search the whole catalog with every query field still open."""
        return self._search(tuple(range(len(self.catalog))), tuple(self.query))

    def _search(self, indices: tuple[int, ...], remaining: tuple[str, ...]) -> MatchSet:
        # ``remaining`` always keeps the query's key order, so this key is
        # unique per (field set, filtered rows) pair.
        key = (indices, remaining)
        if self.memoize and key in self._cache:
            self.cache_hits += 1
            return self._cache[key]

        self.calls += 1
        result = self._expand(indices, remaining)

        if self.memoize:
            self._cache[key] = result
        return result

    def _expand(self, indices: tuple[int, ...], remaining: tuple[str, ...]) -> MatchSet:
        if not remaining:
            return MatchSet(indices)

        best: Optional[MatchSet] = None
        for position, name in enumerate(remaining):
            rest = remaining[:position] + remaining[position + 1 :]
            expected = self.query[name]

            kept = tuple(i for i in indices if self.catalog[i].get(name) == expected)
            applied = self._search(kept, rest)
            candidates = [MatchSet(applied.indices, (name,) + applied.applied)]

            if not is_absent(expected, self.wildcard_mode):
                candidates.append(self._search(indices, rest))

            # Strictly longer only: the first generated candidate wins ties
            for candidate in candidates:
                if best is None or len(candidate) > len(best):
                    best = candidate

        return best


def _check_inputs(catalog: Iterable[Entry], query: Query) -> list[Entry]:
    if not isinstance(query, Mapping):
        raise TypeError(f"query must be a mapping, got {type(query).__name__}")
    if isinstance(catalog, (str, bytes, Mapping)) or not isinstance(catalog, Iterable):
        raise TypeError(
            f"catalog must be an iterable of mappings, got {type(catalog).__name__}"
        )

    rows = list(catalog)
    for position, entry in enumerate(rows):
        if not isinstance(entry, Mapping):
            raise TypeError(
                f"catalog entry #{position} must be a mapping, got {type(entry).__name__}"
            )
    return rows


def match_with_trace(
    catalog: Iterable[Entry],
    query: Query,
    *,
    wildcard_mode: WildcardMode = WildcardMode.NULL,
    memoize: bool = True,
) -> MatchOutcome:
    """
    Match ``query`` against ``catalog`` and report how the winner was found.

    Args:
        catalog: Rule rows; never modified
        query: Field name to value; only its keys are searched
        wildcard_mode: Which values count as absent
        memoize: Reuse results of repeated sub-problems

    Returns:
        MatchOutcome with the ranked rows and the applied/relaxed fields

    Raises:
        TypeError: If the catalog is not an iterable of mappings or the query
            is not a mapping
    """
    rows = _check_inputs(catalog, query)
    wildcard_mode = WildcardMode(wildcard_mode)

    search = RelaxationSearch(rows, query, wildcard_mode=wildcard_mode, memoize=memoize)
    winner = search.run()

    ranked = rank_by_specificity(
        (rows[i] for i in winner.indices), wildcard_mode=wildcard_mode
    )
    relaxed = [name for name in query if name not in winner.applied]

    logger.debug(
        f"Matched {len(ranked)}/{len(rows)} rules "
        f"(applied: {list(winner.applied)}, relaxed: {relaxed}, "
        f"calls: {search.calls}, cache hits: {search.cache_hits})"
    )

    return MatchOutcome(
        entries=ranked,
        applied=list(winner.applied),
        relaxed=relaxed,
        search_calls=search.calls,
    )


def match(
    catalog: Iterable[Entry],
    query: Query,
    *,
    wildcard_mode: WildcardMode = WildcardMode.NULL,
    memoize: bool = True,
) -> list[Entry]:
    """Return the catalog rows that best satisfy ``query``, most specific first."""
    return match_with_trace(
        catalog, query, wildcard_mode=wildcard_mode, memoize=memoize
    ).entries
