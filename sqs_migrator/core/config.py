"""
Configuration module for the SQS queue migration tool.

This module provides the typed run parameters of a migration, the optional
YAML file holding AWS connection settings and tuning values, and the parsing
of duration strings such as ``12h`` or ``1h30m`` used by ``--max-age``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from sqs_migrator.constants import (
    DEFAULT_LIMIT,
    DEFAULT_MAX_AGE,
    DEFAULT_VISIBILITY_TIMEOUT,
    MAX_BATCH_SIZE,
    MAX_VISIBILITY_TIMEOUT,
    MAX_WAIT_TIME_SECONDS,
)
from sqs_migrator.exceptions import ConfigError
from sqs_migrator.utils.logging import log_with_context

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # U+00B5 micro sign
    "μs": 1e-6,  # U+03BC Greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string such as ``12h``, ``1h30m``, ``90s`` or ``250ms``.

    A bare ``0`` and a leading ``+`` are accepted. A leading ``-`` is not:
    a negative age threshold has no meaning for the migration.

    Args:
        text: The duration string

    Returns:
        The parsed duration

    Raises:
        ValueError: If the string is not a valid duration
    """
    value = text.strip()
    if value.startswith("+"):
        value = value[1:]
    if value == "0":
        return timedelta(0)
    if not value:
        raise ValueError("empty duration")

    total = timedelta(0)
    pos = 0
    while pos < len(value):
        match = _DURATION_PART.match(value, pos)
        if not match:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        total += timedelta(seconds=float(number) * _DURATION_UNITS[unit])
        pos = match.end()
    return total


def format_duration(duration: timedelta) -> str:
    """Render a duration as ``12h0m0s`` style text for log output."""
    total = duration.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{seconds:g}s"
    if minutes:
        return f"{sign}{int(minutes)}m{seconds:g}s"
    return f"{sign}{seconds:g}s"


def _check_seconds(key: str, value: Any, maximum: int) -> None:
    # bool is an int subclass, reject it explicitly
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not 0 <= value <= maximum
    ):
        raise ConfigError(
            f"Config value '{key}' must be an integer between 0 and {maximum}"
        )


@dataclass
class ClientConfig:
    """AWS connection settings and receive tuning, loaded from YAML."""

    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    visibility_timeout: int = DEFAULT_VISIBILITY_TIMEOUT
    # None leaves the queue's own ReceiveMessageWaitTimeSeconds in effect
    wait_time_seconds: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientConfig:
        """Create a ClientConfig from a raw config dictionary."""
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the top level")

        for key in ("region", "profile", "endpoint_url"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"Config value '{key}' must be a string")

        visibility_timeout = data.get("visibility_timeout", DEFAULT_VISIBILITY_TIMEOUT)
        wait_time_seconds = data.get("wait_time_seconds")
        _check_seconds(
            "visibility_timeout", visibility_timeout, MAX_VISIBILITY_TIMEOUT
        )
        if wait_time_seconds is not None:
            _check_seconds(
                "wait_time_seconds", wait_time_seconds, MAX_WAIT_TIME_SECONDS
            )

        return cls(
            region=data.get("region"),
            profile=data.get("profile"),
            endpoint_url=data.get("endpoint_url"),
            visibility_timeout=visibility_timeout,
            wait_time_seconds=wait_time_seconds,
        )

    def with_overrides(self, **overrides: Any) -> ClientConfig:
        """Return a copy with every non-None override applied."""
        values = {
            "region": self.region,
            "profile": self.profile,
            "endpoint_url": self.endpoint_url,
            "visibility_timeout": self.visibility_timeout,
            "wait_time_seconds": self.wait_time_seconds,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ClientConfig(**values)


@dataclass
class MigrationConfig:
    """Typed run parameters for a single migration run."""

    source: str
    dest: str = ""
    execute: bool = False
    max_age: timedelta = DEFAULT_MAX_AGE
    limit: int = DEFAULT_LIMIT
    body_filter: str = ""
    verbose: bool = False
    visibility_timeout: int = DEFAULT_VISIBILITY_TIMEOUT
    wait_time_seconds: int | None = None
    max_batch_size: int = MAX_BATCH_SIZE

    @property
    def dry_run(self) -> bool:
        """True when eligible messages are only reported, never moved."""
        return not self.execute

    def validate(self) -> None:
        """
        Check the run parameters before any network call is made.

        Raises:
            ConfigError: If the parameters cannot describe a valid run
        """
        if not self.source:
            raise ConfigError(
                "Need to provide a source queue name properly to use this utility"
            )
        if self.execute and not self.dest:
            raise ConfigError(
                "Need to provide a destination queue name if attempting to execute a migration"
            )
        if self.execute and self.source == self.dest:
            raise ConfigError(
                "Need to provide a different queue name for source and destination"
            )
        if self.limit < 0:
            raise ConfigError(f"Limit must not be negative, got {self.limit}")
        if not 1 <= self.max_batch_size <= MAX_BATCH_SIZE:
            raise ConfigError(
                f"Batch size must be between 1 and {MAX_BATCH_SIZE}, got {self.max_batch_size}"
            )


def load_config(config_path: Path) -> ClientConfig:
    """
    Load connection settings from a YAML file and apply default values.

    If the file doesn't exist or is not valid YAML, a warning is logged and
    default settings are used. Values of the wrong type are an error.

    Args:
        config_path: Path to the config YAML file

    Returns:
        ClientConfig with all necessary defaults applied

    Raises:
        ConfigError: If a value in the file has the wrong type
    """
    raw: dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path) as f:
                loaded_config = yaml.safe_load(f)
                # Handle None result from empty file
                if loaded_config is not None:
                    raw = loaded_config
            log_with_context(logging.DEBUG, f"Loaded configuration from {config_path}")
        except (yaml.YAMLError, OSError) as e:
            log_with_context(
                logging.WARNING, f"Failed to load config file {config_path}: {e}"
            )
    else:
        log_with_context(
            logging.DEBUG,
            f"Config file {config_path} not found, using default settings",
        )

    return ClientConfig.from_dict(raw)


def create_default_config(output_path: Path) -> bool:
    """
    Create a default configuration file with the recommended settings.

    The function will not overwrite an existing configuration file.

    Args:
        output_path: Path where the default config should be saved

    Returns:
        True if the config file was created successfully, False otherwise
    """
    if output_path.exists():
        log_with_context(
            logging.WARNING,
            f"Config file {output_path} already exists, not overwriting",
        )
        return False

    default_config = {
        "region": "us-east-1",
        "profile": None,
        "endpoint_url": None,
        "visibility_timeout": DEFAULT_VISIBILITY_TIMEOUT,
    }

    try:
        with open(output_path, "w") as f:
            yaml.safe_dump(default_config, f, default_flow_style=False)
        log_with_context(logging.INFO, f"Created default config file at {output_path}")
        return True
    except OSError as e:
        log_with_context(logging.ERROR, f"Failed to create default config file: {e}")
        return False
