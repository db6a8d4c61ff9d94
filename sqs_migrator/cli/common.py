"""Shared CLI infrastructure: option types, error handlers, and the CLI group."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, ClassVar

import click

import sqs_migrator
from sqs_migrator.constants import (
    ACCESS_DENIED_ERRORS,
    DEFAULT_CONFIG_FILE,
    NON_EXISTENT_QUEUE_ERRORS,
    THROTTLING_ERRORS,
)
from sqs_migrator.core.config import parse_duration
from sqs_migrator.exceptions import (
    ConfigError,
    MigratorError,
    QueueAPIError,
    QueueResolutionError,
)
from sqs_migrator.utils.logging import log_with_context

# Create logger instance
logger = logging.getLogger("sqs_migrator")


# ---------------------------------------------------------------------------
# Custom click.Group that defaults to ``migrate``.
# When the first CLI token starts with ``-`` (i.e. a flag, not a subcommand)
# the group silently prepends ``migrate`` so that
#   ``sqs-migrator --source my-dlq --dest my-queue --execute``
# works without naming the subcommand.
# ---------------------------------------------------------------------------


class DefaultGroup(click.Group):
    """Click group that defaults to the ``migrate`` subcommand."""

    # Flags that belong to the group itself and should NOT trigger the
    # ``migrate`` default.
    _GROUP_FLAGS: ClassVar[set[str]] = {"--help", "--version", "-h"}

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        """Prepend ``migrate`` when the first token is a flag.

        Args:
            ctx: The current Click context.
            args: Raw CLI argument list.

        Returns:
            The (possibly modified) argument list for further parsing.
        """
        if args and args[0].startswith("-") and args[0] not in self._GROUP_FLAGS:
            args = ["migrate", *args]
        return super().parse_args(ctx, args)


class DurationType(click.ParamType):
    """Click parameter type for duration strings such as ``12h`` or ``1h30m``."""

    name = "duration"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> timedelta:
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(str(value))
        except ValueError as e:
            self.fail(f"{value!r} is not a valid duration ({e})", param, ctx)


DURATION = DurationType()


# ---------------------------------------------------------------------------
# Shared option decorator
# ---------------------------------------------------------------------------


def connection_options(f: Callable[..., None]) -> Callable[..., None]:
    """Decorator that adds the AWS connection options.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with connection options attached.
    """
    f = click.option(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        show_default=True,
        help="Path to config YAML (optional)",
    )(f)
    f = click.option(
        "--region",
        default=None,
        help="AWS region, overrides the config file",
    )(f)
    f = click.option(
        "--profile",
        default=None,
        help="AWS shared-credentials profile, overrides the config file",
    )(f)
    f = click.option(
        "--endpoint-url",
        default=None,
        help="Custom SQS endpoint URL (e.g. a local emulator)",
    )(f)
    f = click.option(
        "--debug-api",
        is_flag=True,
        default=False,
        help="Enable botocore request/response logging",
    )(f)
    return f


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(
    cls=DefaultGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=sqs_migrator.__version__, prog_name="sqs-migrator")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Migrate messages between SQS queues, filtered by age and content.

    Args:
        ctx: The Click context (injected by ``@click.pass_context``).
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def handle_queue_api_error(e: QueueAPIError) -> None:
    """Log a failed queue call with hints for the common SQS error codes.

    Args:
        e: The queue API error to handle.
    """
    log_with_context(logging.ERROR, str(e), queue=e.queue or None)

    if e.code in NON_EXISTENT_QUEUE_ERRORS:
        log_with_context(
            logging.INFO,
            f"Queue '{e.queue}' does not exist in this account and region. "
            "Check the queue name, --region and --profile.",
        )
    elif e.code in ACCESS_DENIED_ERRORS:
        log_with_context(
            logging.INFO,
            "The credentials in use are not allowed to perform this call. Please ensure "
            "sqs:GetQueueUrl, sqs:ReceiveMessage, sqs:SendMessage and sqs:DeleteMessage "
            "are granted on both queues.",
        )
    elif e.code in THROTTLING_ERRORS:
        log_with_context(
            logging.INFO,
            "The queue service throttled the request. Try again later or lower --limit.",
        )
    elif isinstance(e, QueueResolutionError):
        log_with_context(
            logging.INFO, "Encountered an error when attempting to identify the queue."
        )


def handle_exception(e: BaseException) -> None:
    """Handle different types of exceptions.

    Args:
        e: The exception to handle.
    """
    if isinstance(e, QueueAPIError):
        handle_queue_api_error(e)
    elif isinstance(e, ConfigError):
        log_with_context(logging.ERROR, f"Configuration error: {e}")
    elif isinstance(e, MigratorError):
        log_with_context(logging.ERROR, str(e))
    elif isinstance(e, KeyboardInterrupt):
        log_with_context(logging.WARNING, "Migration interrupted by user.")
        log_with_context(
            logging.INFO,
            "Messages received but not yet deleted become visible on the source "
            "queue again after the visibility timeout.",
        )
    else:
        log_with_context(logging.ERROR, f"Migration failed: {e}", exc_info=True)
