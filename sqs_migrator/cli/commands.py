#!/usr/bin/env python3
"""
Main execution module for the SQS queue migration tool.

Importing the command modules registers their subcommands on the shared
click group.
"""

from sqs_migrator.cli import config_cmd, migrate_cmd  # noqa: F401
from sqs_migrator.cli.common import cli, handle_exception

__all__ = ["cli", "handle_exception", "main"]


def main() -> None:
    """Main entry point for the SQS queue migration tool."""
    cli()


if __name__ == "__main__":
    main()
