"""Command implementations for the MindbreezeClient CLI.

Business logic for commands, separated from click parameter handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

import click
from dateutil import parser as dt_parser

from MindbreezeClient.renderers import render_response
from MindbreezeClient.services.search import ConstraintSpec, SearchParams, SearchService


@dataclass(slots=True)
class SearchCommand:
    """Run one search and print the rendered result."""

    search_service: SearchService
    output_format: str

    def execute(self, params: SearchParams) -> None:
        response = self.search_service.search(params)
        click.echo(render_response(response, self.output_format, page=params.page), nl=False)


def parse_date(value: str) -> float:
    """Parse a date string into Unix seconds; naive values are taken as UTC.

    Raises:
        click.BadParameter: If the value is not a recognizable date.
    """
    try:
        parsed = dt_parser.parse(value)
    except (TypeError, ValueError, OverflowError) as error:
        raise click.BadParameter(f"invalid date: {value}") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def parse_date_range(start: str | None, end: str | None) -> tuple[float, float] | None:
    """Build an inclusive date range; an open end defaults to now."""
    if start is None and end is None:
        return None
    start_ts = parse_date(start) if start else 0.0
    end_ts = parse_date(end) if end else datetime.now(timezone.utc).timestamp()
    return (int(start_ts), int(end_ts))


def parse_constraint_options(kind: str, values: Sequence[str]) -> list[ConstraintSpec]:
    """Parse repeated ``LABEL=VALUE`` options into constraints.

    Values for the same label are grouped into one constraint.

    Raises:
        click.BadParameter: If an option has no ``=`` or an empty label.
    """
    grouped: dict[str, list[str]] = {}
    for item in values:
        label, sep, value = item.partition("=")
        if not sep or not label.strip():
            raise click.BadParameter(f"expected LABEL=VALUE, got {item!r}")
        grouped.setdefault(label.strip(), []).append(value)
    return [ConstraintSpec(label=label, kind=kind, data=items) for label, items in grouped.items()]
