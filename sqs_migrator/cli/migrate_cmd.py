"""CLI command handler for the migrate workflow."""

from __future__ import annotations

import logging
import sys
from datetime import timedelta
from pathlib import Path
from types import SimpleNamespace

import click

from sqs_migrator.cli.common import DURATION, cli, connection_options, handle_exception
from sqs_migrator.cli.report import print_run_summary, write_report
from sqs_migrator.constants import DEFAULT_LIMIT, DEFAULT_MAX_AGE_TEXT
from sqs_migrator.core.config import MigrationConfig, format_duration, load_config
from sqs_migrator.core.context import MigrationContext
from sqs_migrator.core.migrator import QueueMigrator
from sqs_migrator.core.state import RunSummary
from sqs_migrator.services.queue_client import QueueClient
from sqs_migrator.utils.logging import log_with_context, setup_logger

# Create logger instance
logger = logging.getLogger("sqs_migrator")


# ---------------------------------------------------------------------------
# migrate subcommand
# ---------------------------------------------------------------------------


@cli.command()
@connection_options
@click.option("--source", default="", help="Source queue to read from")
@click.option("--dest", default="", help="Queue to potentially move data to")
@click.option(
    "--execute",
    is_flag=True,
    default=False,
    help="Perform migration of the messages to the destination queue",
)
@click.option(
    "--max-age",
    type=DURATION,
    default=DEFAULT_MAX_AGE_TEXT,
    show_default=True,
    help="Only messages younger than this (e.g. 12h, 30m, 1h30m) are migrated",
)
@click.option(
    "--limit",
    type=int,
    default=DEFAULT_LIMIT,
    show_default=True,
    help="Maximum number of messages to attempt to migrate",
)
@click.option(
    "--filter",
    "body_filter",
    default="",
    help="Only messages whose body contains this string are migrated",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Print the body of every message to be transmitted",
)
@click.option(
    "--progress",
    is_flag=True,
    default=False,
    help="Show a progress bar of attempted messages",
)
@click.option(
    "--output-dir",
    default=None,
    help="Directory for migration.log and migration_report.yaml",
)
def migrate(
    source: str,
    dest: str,
    execute: bool,
    max_age: timedelta,
    limit: int,
    body_filter: str,
    verbose: bool,
    progress: bool,
    output_dir: str | None,
    config: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    debug_api: bool,
) -> None:
    """Move messages from one SQS queue to another (dry run unless --execute).

    Args:
        source: Source queue name.
        dest: Destination queue name, required with --execute.
        execute: Send and delete instead of only reporting.
        max_age: Messages this old or older are left on the source.
        limit: Maximum number of messages to attempt.
        body_filter: Substring a message body must contain.
        verbose: Log message bodies and DEBUG output.
        progress: Show a progress bar.
        output_dir: Optional directory for the log file and report.
        config: Path to config YAML.
        region: AWS region override.
        profile: AWS profile override.
        endpoint_url: SQS endpoint override.
        debug_api: Enable botocore request/response logging.
    """
    args = SimpleNamespace(
        source=source,
        dest=dest,
        execute=execute,
        max_age=max_age,
        limit=limit,
        body_filter=body_filter,
        verbose=verbose,
        progress=progress,
        output_dir=output_dir,
        config=config,
        region=region,
        profile=profile,
        endpoint_url=endpoint_url,
        debug_api=debug_api,
    )

    setup_logger(verbose, debug_api, output_dir)

    try:
        summary = run_from_args(args)
    except (Exception, KeyboardInterrupt) as e:
        handle_exception(e)
        sys.exit(1)

    report_file = write_report(summary, output_dir) if output_dir else None
    print_run_summary(summary, report_file)


def run_from_args(args: SimpleNamespace) -> RunSummary:
    """Validate the arguments, build the client and run the migration.

    Validation happens before the client is created, so invalid flags never
    cause a network call.

    Args:
        args: Parsed CLI arguments.

    Returns:
        The run's counters.
    """
    migration_config = MigrationConfig(
        source=args.source,
        dest=args.dest,
        execute=args.execute,
        max_age=args.max_age,
        limit=args.limit,
        body_filter=args.body_filter,
        verbose=args.verbose,
    )
    migration_config.validate()

    client_config = load_config(Path(args.config)).with_overrides(
        region=args.region,
        profile=args.profile,
        endpoint_url=args.endpoint_url,
    )
    migration_config.visibility_timeout = client_config.visibility_timeout
    migration_config.wait_time_seconds = client_config.wait_time_seconds

    log_startup_info(migration_config)

    client = QueueClient.from_config(client_config)
    context = MigrationContext(config=migration_config)
    return QueueMigrator(client, context, show_progress=args.progress).run()


def log_startup_info(config: MigrationConfig) -> None:
    """Log startup information.

    Args:
        config: The validated run parameters.
    """
    log_with_context(logging.INFO, "Starting migration with the following parameters:")
    log_with_context(logging.INFO, f"- Source queue: {config.source}")
    log_with_context(logging.INFO, f"- Destination queue: {config.dest or '(none)'}")
    log_with_context(logging.INFO, f"- Dry run: {config.dry_run}")
    log_with_context(logging.INFO, f"- Max age: {format_duration(config.max_age)}")
    log_with_context(logging.INFO, f"- Limit: {config.limit}")
    log_with_context(logging.INFO, f"- Filter: {config.body_filter!r}")
    log_with_context(logging.INFO, f"- Visibility timeout: {config.visibility_timeout}s")
