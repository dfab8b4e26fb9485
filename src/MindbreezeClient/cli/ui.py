"""Click CLI interface definitions."""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from MindbreezeClient.cli.commands import parse_constraint_options, parse_date_range
from MindbreezeClient.cli.runner import CommandRunner
from MindbreezeClient.config import DEFAULT_CONFIG_PATH, load_config_with_defaults
from MindbreezeClient.services.search import SearchParams


@click.group(help="MindbreezeClient: query a Mindbreeze search endpoint.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file (merged over the defaults).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from a .env file before reading the config.
    """
    load_dotenv()
    ctx.obj = load_config_with_defaults(config_path)


@cli.command("search")
@click.argument("query")
@click.option("--page", type=int, default=1, show_default=True, help="1-based result page.")
@click.option("--order-by", type=click.Choice(["relevance", "date"], case_sensitive=False), default=None)
@click.option("--order", type=click.Choice(["asc", "desc"], case_sensitive=False), default=None)
@click.option("--datasource", default=None, help="Named datasource constraint from search.datasources.")
@click.option("--from", "date_from", default=None, help="Earliest document date.")
@click.option("--to", "date_to", default=None, help="Latest document date.")
@click.option("--regex", "regex_opts", multiple=True, metavar="LABEL=VALUE", help="Exact-match constraint.")
@click.option("--term", "term_opts", multiple=True, metavar="LABEL=VALUE", help="Quoted-term constraint.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None)
@click.pass_context
def search_cmd(
    ctx: click.Context,
    query: str,
    page: int,
    order_by: str | None,
    order: str | None,
    datasource: str | None,
    date_from: str | None,
    date_to: str | None,
    regex_opts: tuple[str, ...],
    term_opts: tuple[str, ...],
    output_format: str | None,
) -> None:
    """Search QUERY and print the normalized result.

    Page 2+ needs the continuation token of an earlier search for the same
    QUERY; use ``pagination.backend: sqlite`` to keep it between runs.
    """
    params = SearchParams(
        query=query,
        page=page,
        order_by=order_by,
        order=order,
        datasource=datasource,
        date_range=parse_date_range(date_from, date_to),
        constraints=tuple(parse_constraint_options("regex", regex_opts) + parse_constraint_options("term", term_opts)),
    )
    runner = CommandRunner(ctx.obj)
    runner.run_search(action=ctx.command.name, params=params, output_format=output_format)
