"""
Query building from user input.

Blank inputs are encoded as ``None`` (a wildcard), never as omitted keys:
an omitted key does not constrain the search at all, while a ``None``
value only matches rows that leave that field open.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import yaml


def parse_value(raw: str) -> Any:
    """
    Coerce a raw string into a scalar value.

    Uses YAML scalar rules: ``2`` -> 2, ``null``/``~``/blank -> None,
    ``true`` -> True. Non-scalar YAML (lists, mappings) is kept as text.
    """
    text = raw.strip()
    if not text:
        return None

    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError:
        return text

    if isinstance(value, (list, dict)):
        return text
    return value


def parse_field_option(option: str) -> tuple[str, Any]:
    """Split a ``name=value`` option into its name and coerced value."""
    name, sep, raw = option.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Expected NAME=VALUE, got {option!r}")
    return name, parse_value(raw)


def build_query(options: Iterable[str]) -> dict[str, Any]:
    """
    Build a query from ``name=value`` options, keeping their order.

    Field order decides tie-breaks in the relaxation search. A repeated
    name keeps its first position and its last value.
    """
    query: dict[str, Any] = {}
    for option in options:
        name, value = parse_field_option(option)
        query[name] = value
    return query


def normalize_form(values: Mapping[str, Any]) -> dict[str, Any]:
    """Strip form strings and turn blank ones into wildcards."""
    query: dict[str, Any] = {}
    for name, value in values.items():
        if isinstance(value, str):
            value = value.strip() or None
        query[name] = value
    return query
