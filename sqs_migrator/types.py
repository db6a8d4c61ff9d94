"""Shared type definitions for the SQS queue migration tool.

Provides TypedDicts for the raw SQS API shapes the tool reads and sends, and
dataclasses for the domain values flowing through the migration loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TypedDict

from sqs_migrator.constants import RECEIPT_PREVIEW_LENGTH

# ---------------------------------------------------------------------------
# SQS API request/response shapes
# ---------------------------------------------------------------------------


class SQSMessage(TypedDict, total=False):
    """A message entry from a ``ReceiveMessage`` response."""

    MessageId: str
    ReceiptHandle: str
    MD5OfBody: str
    Body: str
    Attributes: dict[str, str]


class SendEntry(TypedDict):
    """An entry of a ``SendMessageBatch`` request."""

    Id: str
    MessageBody: str


class DeleteEntry(TypedDict):
    """An entry of a ``DeleteMessageBatch`` request."""

    Id: str
    ReceiptHandle: str


# ---------------------------------------------------------------------------
# Domain types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QueueMessage:
    """A message received from the source queue."""

    message_id: str
    body: str
    receipt_handle: str
    sent_at: datetime

    @property
    def receipt_preview(self) -> str:
        """Leading characters of the receipt handle, safe to log."""
        return self.receipt_handle[:RECEIPT_PREVIEW_LENGTH]


@dataclass(frozen=True)
class BatchSuccess:
    """A batch entry the queue service accepted."""

    entry_id: str
    message_id: str = ""


@dataclass(frozen=True)
class BatchFailure:
    """A batch entry the queue service rejected inside a successful call."""

    entry_id: str
    code: str = ""
    message: str = ""
    sender_fault: bool = False


@dataclass
class BatchResult:
    """Outcome of a send or delete batch call."""

    successful: list[BatchSuccess] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)
