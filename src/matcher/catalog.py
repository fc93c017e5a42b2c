"""
Rule catalog provider.
Loads rule rows from YAML and runs relaxation matching against them.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from shared.config import Settings, get_settings
from shared.models import CatalogFile, Entry, Query

from .relaxation import MatchOutcome, match_with_trace


class QueryTooWideError(ValueError):
    """Raised when a query has more fields than the matcher is allowed to search."""

    def __init__(self, field_count: int, limit: int):
        self.field_count = field_count
        self.limit = limit
        super().__init__(
            f"Query has {field_count} fields, at most {limit} are allowed"
        )


class RuleCatalog:
    """In-memory rule catalog with relaxation matching."""

    def __init__(
        self,
        catalog_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.name = "rules"
        self.fields: list[str] = []
        self._rules: list[Entry] = []

        if catalog_path:
            self.load(catalog_path)

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Entry],
        name: str = "rules",
        settings: Optional[Settings] = None,
    ) -> "RuleCatalog":
        """Wrap rows already loaded by a data-access layer."""
        catalog = cls(settings=settings)
        catalog.name = name
        catalog._rules = list(rows)
        return catalog

    def load(self, path: Path) -> list[Entry]:
        """Load rules from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            logger.warning(f"Catalog file is empty: {path}")
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Catalog file must contain a mapping: {path}")

        try:
            parsed = CatalogFile.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid catalog {path}: {e}")
            raise

        self.name = parsed.name
        self.fields = parsed.fields
        self._rules = parsed.rules

        logger.info(f"Loaded {len(self._rules)} rules from catalog '{self.name}'")
        return self._rules

    @property
    def rules(self) -> list[Entry]:
        """Get loaded rules."""
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def find(
        self,
        query: Query,
        memoize: Optional[bool] = None,
    ) -> MatchOutcome:
        """
        Find the rules that best satisfy a query.

        Args:
            query: Field name to value; None values are wildcards
            memoize: Override the configured sub-problem caching

        Returns:
            MatchOutcome with ranked rules

        Raises:
            QueryTooWideError: If the query exceeds max_query_fields
        """
        limit = self.settings.max_query_fields
        if len(query) > limit:
            raise QueryTooWideError(len(query), limit)

        if self.fields:
            unknown = [name for name in query if name not in self.fields]
            if unknown:
                logger.warning(
                    f"Query fields not declared by catalog '{self.name}': {unknown}"
                )

        if memoize is None:
            memoize = self.settings.matcher_memoize

        outcome = match_with_trace(
            self._rules,
            query,
            wildcard_mode=self.settings.wildcard_mode,
            memoize=memoize,
        )

        logger.info(
            f"Catalog '{self.name}': {len(outcome.entries)} of {len(self._rules)} "
            f"rules match {dict(query)}"
        )
        return outcome
