"""Immutable migration context.

MigrationContext is a frozen dataclass that holds the run parameters, the
logger every component writes to, and the single reference instant used to
compute message age for the whole run.  It is created once per run and
passed explicitly to the migrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqs_migrator.core.config import MigrationConfig
from sqs_migrator.utils.logging import LOGGER_NAME


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MigrationContext:
    """Immutable context for a migration run. Created once, shared everywhere."""

    config: MigrationConfig

    # Fixed at creation so age thresholds do not drift during the run
    run_time: datetime = field(default_factory=_utc_now)

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(LOGGER_NAME)
    )

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    @property
    def log_prefix(self) -> str:
        """Mode-aware log prefix, ``"[DRY RUN] "`` when nothing will be moved."""
        if self.dry_run:
            return "[DRY RUN] "
        return ""
