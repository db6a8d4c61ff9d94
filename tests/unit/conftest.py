"""Unit test configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from sqs_migrator.core.config import MigrationConfig
from sqs_migrator.core.context import MigrationContext
from sqs_migrator.services.queue_client import QueueClient
from sqs_migrator.types import QueueMessage

# ---------------------------------------------------------------------------
# Data builders
# ---------------------------------------------------------------------------


def _build_message(
    message_id: str = "msg-0001",
    body: str = "hello",
    age: timedelta = timedelta(minutes=5),
    run_time: datetime = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    receipt_handle: str = "AQEBwJnKyrHigUMZj6rYigCgxlaS3SLy0a",
) -> QueueMessage:
    return QueueMessage(
        message_id=message_id,
        body=body,
        receipt_handle=receipt_handle,
        sent_at=run_time - age,
    )


@pytest.fixture()
def make_message():
    """Factory fixture: build a QueueMessage of a given age at the run time.

    Usage in tests::

        def test_something(make_message):
            m = make_message(body="order-1", age=timedelta(hours=2))
    """
    return _build_message


@pytest.fixture()
def make_migrator_context(run_time):
    """Factory fixture: build a MigrationContext with a fixed run time.

    Keyword arguments are MigrationConfig fields; ``source`` defaults to
    ``"source"``.
    """

    def _build(**kwargs: Any) -> MigrationContext:
        kwargs.setdefault("source", "source")
        return MigrationContext(config=MigrationConfig(**kwargs), run_time=run_time)

    return _build


@pytest.fixture()
def queue_client(fake_sqs):
    """A QueueClient backed by the in-memory fake SQS client."""
    return QueueClient(fake_sqs)
