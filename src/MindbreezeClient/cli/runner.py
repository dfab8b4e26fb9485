"""Command runner for coordinating CLI execution.

Manages logging configuration, component lifecycle and error handling.
"""

from __future__ import annotations

import click

from MindbreezeClient.cli.commands import SearchCommand
from MindbreezeClient.config import AppConfig
from MindbreezeClient.services import SearchParams, create_search_service
from MindbreezeClient.storage import create_token_store
from MindbreezeClient.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_search(self, action: str, params: SearchParams, *, output_format: str | None = None) -> None:
        """Execute one search with full resource management.

        Args:
            action: The CLI command name (e.g. 'search').
            params: Search parameters from the command line.
            output_format: Overrides ``output.format`` when given.

        Raises:
            click.Abort: When the search fails.
        """
        configure_logging(
            level=self.config.runtime.log_level,
            action=action,
            log_to_file=self.config.runtime.log_to_file,
            log_dir=self.config.runtime.log_dir,
        )
        db_manager = None
        search_service = None
        try:
            db_manager, token_store = create_token_store(self.config)
            search_service = create_search_service(self.config, token_store)
            command = SearchCommand(
                search_service=search_service,
                output_format=output_format or self.config.runtime.output_format,
            )
            command.execute(params)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e
        finally:
            if search_service is not None:
                search_service.close()
            if db_manager is not None:
                db_manager.close()
