"""
Batch sizing and eligibility rules for the migration loop.

These helpers are independent of the queue transport so the loop's
accounting and filter policy can be checked in isolation.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from sqs_migrator.constants import MAX_BATCH_SIZE
from sqs_migrator.types import QueueMessage


def next_batch_size(remaining: int, max_batch_size: int = MAX_BATCH_SIZE) -> int:
    """
    Compute how many messages to request in the next receive call.

    Args:
        remaining: Messages still allowed under the run limit
        max_batch_size: Largest batch the queue API accepts

    Returns:
        ``min(remaining, max_batch_size)``, or 0 when the budget is spent
    """
    if remaining <= 0:
        return 0
    return min(remaining, max_batch_size)


def message_age(message: QueueMessage, run_time: datetime) -> timedelta:
    """Age of a message measured from the run's reference instant."""
    return run_time - message.sent_at


def is_eligible(
    message: QueueMessage,
    run_time: datetime,
    max_age: timedelta,
    body_filter: str = "",
) -> bool:
    """
    Decide whether a message should be migrated.

    A message is eligible when it is younger than ``max_age`` at
    ``run_time`` and its body contains ``body_filter``.  An empty filter
    matches every body.
    """
    if message_age(message, run_time) >= max_age:
        return False
    return body_filter in message.body
