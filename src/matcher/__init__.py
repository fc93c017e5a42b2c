"""
Matcher Service - constraint-relaxation rule matching.

Given a catalog of rule rows whose fields may be wildcards and a partial
query, finds the largest set of rows the query can be relaxed to match and
ranks them by specificity.
"""

from .catalog import QueryTooWideError, RuleCatalog
from .relaxation import MatchOutcome, MatchSet, match, match_with_trace

__all__ = [
    "MatchOutcome",
    "MatchSet",
    "QueryTooWideError",
    "RuleCatalog",
    "match",
    "match_with_trace",
]
