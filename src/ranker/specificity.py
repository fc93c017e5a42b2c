"""
Specificity ranking for matched catalog rows.
Rows that pin down more of their own fields sort first.
"""

from collections.abc import Iterable

from shared.models import Entry, WildcardMode, is_absent


def specificity(entry: Entry, wildcard_mode: WildcardMode = WildcardMode.NULL) -> int:
    """Count the fields of ``entry`` that hold a present value."""
    return sum(1 for value in entry.values() if not is_absent(value, wildcard_mode))


def rank_by_specificity(
    entries: Iterable[Entry],
    wildcard_mode: WildcardMode = WildcardMode.NULL,
) -> list[Entry]:
    """
    Order entries by specificity, most specific first.

    The query plays no part here. Equal scores keep their incoming order
    (``sorted`` is stable, also with ``reverse=True``).
    """
    return sorted(
        entries,
        key=lambda entry: specificity(entry, wildcard_mode),
        reverse=True,
    )
