"""CLI command handler for writing a default config file."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from sqs_migrator.cli.common import cli
from sqs_migrator.constants import DEFAULT_CONFIG_FILE
from sqs_migrator.core.config import create_default_config


@cli.command("init-config")
@click.option(
    "--config",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Where to write the config YAML",
)
def init_config(config: str) -> None:
    """Write a default config file (never overwrites an existing one)."""
    if not create_default_config(Path(config)):
        sys.exit(1)
    click.echo(f"Wrote default config to {config}")
