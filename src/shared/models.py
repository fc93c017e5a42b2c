"""
Shared types for rule catalogs and match queries.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

# A catalog row and a partial search query share the same shape.
Entry = Mapping[str, Any]
Query = Mapping[str, Any]


class WildcardMode(str, Enum):
    """How an absent (wildcard) field value is recognised."""

    NULL = "null"  # Only None is absent
    FALSY = "falsy"  # Any falsy value (0, "", False, None) is absent


def is_absent(value: Any, mode: WildcardMode = WildcardMode.NULL) -> bool:
    """Return True if ``value`` is a wildcard under ``mode``."""
    if mode == WildcardMode.FALSY:
        return not value
    return value is None


class CatalogFile(BaseModel):
    """Rule catalog as stored in YAML."""

    name: str = Field(default="rules", description="Catalog name")
    description: Optional[str] = Field(default=None)
    fields: list[str] = Field(
        default_factory=list,
        description="Declared dimensions; rows may only use these keys",
    )
    rules: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_declared_fields(self) -> "CatalogFile":
        if not self.fields:
            return self

        declared = set(self.fields)
        for position, rule in enumerate(self.rules):
            unknown = [key for key in rule if key not in declared]
            if unknown:
                raise ValueError(
                    f"Rule #{position} uses undeclared fields: {', '.join(unknown)}"
                )

        # Declared but omitted fields are wildcards
        self.rules = [
            {name: rule.get(name) for name in self.fields} for rule in self.rules
        ]
        return self
