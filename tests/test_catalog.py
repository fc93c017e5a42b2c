"""Tests for the rule catalog provider"""
import pytest
from pydantic import ValidationError

from matcher.catalog import QueryTooWideError, RuleCatalog
from shared.config import Settings
from shared.models import CatalogFile, WildcardMode


@pytest.fixture
def write_catalog(tmp_path):
    """Write YAML text to a catalog file and return its path"""

    def _write(text, name="rules.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


class TestCatalogFile:
    def test_fills_declared_fields(self):
        parsed = CatalogFile(
            fields=["outcome", "species", "season"],
            rules=[{"species": 2}, {"season": 4, "outcome": 1}],
        )

        assert parsed.rules == [
            {"outcome": None, "species": 2, "season": None},
            {"outcome": 1, "species": None, "season": 4},
        ]

    def test_rejects_undeclared_fields(self):
        with pytest.raises(ValidationError, match="undeclared fields: colour"):
            CatalogFile(fields=["species"], rules=[{"species": 2, "colour": "red"}])

    def test_rows_untouched_without_declared_fields(self):
        parsed = CatalogFile(rules=[{"species": 2}, {"method": 3}])

        assert parsed.rules == [{"species": 2}, {"method": 3}]


class TestRuleCatalogLoad:
    def test_loads_sample_catalog(self, sample_catalog_path, settings):
        catalog = RuleCatalog(sample_catalog_path, settings=settings)

        assert catalog.name == "template_validation_rules"
        assert catalog.fields == ["outcome", "species", "method", "season"]
        assert len(catalog) == 6

    def test_missing_file(self, tmp_path, settings):
        with pytest.raises(FileNotFoundError, match="Catalog file not found"):
            RuleCatalog(tmp_path / "missing.yaml", settings=settings)

    def test_empty_file(self, write_catalog, settings):
        catalog = RuleCatalog(write_catalog(""), settings=settings)

        assert catalog.rules == []

    def test_non_mapping_document(self, write_catalog, settings):
        path = write_catalog("- species: 2\n- species: 3\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            RuleCatalog(path, settings=settings)

    def test_schema_violation(self, write_catalog, settings):
        path = write_catalog("fields: [species]\nrules:\n  - {species: 2, method: 3}\n")

        with pytest.raises(ValueError, match="undeclared fields: method"):
            RuleCatalog(path, settings=settings)

    def test_rules_must_be_mappings(self, write_catalog, settings):
        path = write_catalog("rules:\n  - 2\n")

        with pytest.raises(ValidationError):
            RuleCatalog(path, settings=settings)


class TestRuleCatalogFind:
    def test_scenario(self, sample_catalog_path, settings, scenario_query):
        catalog = RuleCatalog(sample_catalog_path, settings=settings)

        outcome = catalog.find(scenario_query)

        assert outcome.entries == [
            {"outcome": None, "species": 2, "method": None, "season": 4},
            {"outcome": None, "species": None, "method": None, "season": None},
        ]
        assert outcome.applied == ["outcome"]

    def test_from_rows(self, scenario_rules, scenario_query, settings):
        catalog = RuleCatalog.from_rows(scenario_rules, name="memory", settings=settings)

        outcome = catalog.find(scenario_query)

        assert catalog.name == "memory"
        assert outcome.entries[0] is scenario_rules[3]

    def test_rejects_wide_query(self, scenario_rules, scenario_query):
        settings = Settings(_env_file=None, max_query_fields=3)
        catalog = RuleCatalog.from_rows(scenario_rules, settings=settings)

        with pytest.raises(QueryTooWideError) as exc_info:
            catalog.find(scenario_query)

        assert exc_info.value.field_count == 4
        assert exc_info.value.limit == 3
        assert isinstance(exc_info.value, ValueError)

    def test_query_at_limit_is_accepted(self, scenario_rules, scenario_query):
        settings = Settings(_env_file=None, max_query_fields=4)
        catalog = RuleCatalog.from_rows(scenario_rules, settings=settings)

        assert len(catalog.find(scenario_query).entries) == 2

    def test_uses_configured_wildcard_mode(self):
        rows = [{"count": 0}, {"count": 5}]
        settings = Settings(_env_file=None, wildcard_mode=WildcardMode.FALSY)

        outcome = RuleCatalog.from_rows(rows, settings=settings).find({"count": 0})

        assert outcome.entries == [{"count": 0}]

    def test_memoize_override(self, scenario_rules, settings):
        catalog = RuleCatalog.from_rows(scenario_rules, settings=settings)
        query = {"species": 2, "method": 3, "season": 4}

        plain = catalog.find(query, memoize=False)
        cached = catalog.find(query)

        assert plain.search_calls == 79
        assert cached.search_calls < plain.search_calls
        assert plain.entries == cached.entries
