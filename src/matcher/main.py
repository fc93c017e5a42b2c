"""
Rule Matcher - Main entry point.
Finds the most applicable catalog rules for a partial query.

Usage:
    survey-matcher -f outcome=null -f species=2 -f method=3 -f season=4
    survey-matcher --catalog config/validation_rules.yaml --format json -f species=2
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from shared.config import get_settings
from shared.models import WildcardMode

from .catalog import QueryTooWideError, RuleCatalog
from .query import build_query


def setup_logging():
    """Configure loguru logging."""
    settings = get_settings()
    logger.remove()

    if settings.log_format == "json":
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            level=settings.log_level,
        )


def format_rule(rule: dict) -> str:
    """Render a rule row as ``name=value`` pairs, wildcards shown as *."""
    return ", ".join(
        f"{name}={'*' if value is None else value}" for name, value in rule.items()
    )


@click.command()
@click.option(
    "--catalog",
    "-c",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Rule catalog YAML file (defaults to CATALOG_PATH setting)",
)
@click.option(
    "--field",
    "-f",
    "fields",
    multiple=True,
    help="Query constraint as NAME=VALUE; repeat in priority order. Blank or null is a wildcard",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum rules to print",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option(
    "--wildcard-mode",
    type=click.Choice([mode.value for mode in WildcardMode]),
    default=None,
    help="Override which values count as wildcards",
)
@click.option(
    "--no-memoize",
    is_flag=True,
    help="Disable caching of repeated search sub-problems",
)
def main(
    catalog_path: Optional[Path],
    fields: tuple[str, ...],
    limit: Optional[int],
    output_format: str,
    wildcard_mode: Optional[str],
    no_memoize: bool,
):
    """Rule Matcher - Picks the most applicable rules for a partial query."""
    setup_logging()

    settings = get_settings()
    if wildcard_mode:
        settings = settings.model_copy(update={"wildcard_mode": WildcardMode(wildcard_mode)})

    try:
        query = build_query(fields)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--field")

    catalog_path = catalog_path or settings.catalog_path
    try:
        catalog = RuleCatalog(catalog_path, settings=settings)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    try:
        outcome = catalog.find(query, memoize=False if no_memoize else None)
    except QueryTooWideError as e:
        raise click.ClickException(str(e))

    rules = outcome.entries[:limit] if limit is not None else outcome.entries

    if output_format == "json":
        click.echo(
            json.dumps(
                {
                    "catalog": catalog.name,
                    "query": query,
                    "applied": outcome.applied,
                    "relaxed": outcome.relaxed,
                    "matches": [dict(rule) for rule in rules],
                },
                indent=2,
                default=str,
            )
        )
        return

    if not outcome.entries:
        click.echo("No matching rules")
        return

    for position, rule in enumerate(rules, start=1):
        click.echo(f"{position}. {format_rule(dict(rule))}")
    click.echo(
        f"Matched: {len(outcome.entries)}, "
        f"Applied: {', '.join(outcome.applied) or '-'}, "
        f"Relaxed: {', '.join(outcome.relaxed) or '-'}"
    )


if __name__ == "__main__":
    main()
