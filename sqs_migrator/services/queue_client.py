"""
Queue client for the SQS queue migration tool.

Wraps a boto3 SQS client with the four calls the migration loop needs,
converting API responses into domain types and SDK errors into
``QueueAPIError`` so callers never handle botocore exceptions directly.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sqs_migrator.constants import SENT_TIMESTAMP_ATTRIBUTE
from sqs_migrator.core.config import ClientConfig
from sqs_migrator.exceptions import ConfigError, QueueAPIError, QueueResolutionError
from sqs_migrator.types import (
    BatchFailure,
    BatchResult,
    BatchSuccess,
    DeleteEntry,
    QueueMessage,
    SendEntry,
    SQSMessage,
)
from sqs_migrator.utils.logging import log_with_context

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def create_sqs_client(config: ClientConfig) -> Any:
    """
    Build a boto3 SQS client from connection settings.

    Credentials come from the SDK's default chain, optionally narrowed to a
    named profile.

    Args:
        config: Connection settings (region, profile, endpoint URL)

    Returns:
        A boto3 SQS client

    Raises:
        ConfigError: If the profile or region cannot be used to build a client
    """
    try:
        session = boto3.session.Session(
            profile_name=config.profile, region_name=config.region
        )
        return session.client("sqs", endpoint_url=config.endpoint_url)
    except BotoCoreError as e:
        raise ConfigError(f"Unable to create SQS client: {e}") from e


def parse_sent_timestamp(message: SQSMessage) -> datetime:
    """
    Read the enqueue instant from a received message.

    ``SentTimestamp`` is epoch milliseconds; it is truncated to whole
    seconds.  A missing or malformed value maps to the epoch, which makes
    the message too old for any age threshold.
    """
    raw = message.get("Attributes", {}).get(SENT_TIMESTAMP_ATTRIBUTE)
    try:
        millis = int(raw)
    except (TypeError, ValueError):
        log_with_context(
            logging.WARNING,
            f"Message {message.get('MessageId')} has no usable {SENT_TIMESTAMP_ATTRIBUTE}: {raw!r}",
            message_id=message.get("MessageId"),
        )
        return _EPOCH
    return datetime.fromtimestamp(millis // 1000, tz=timezone.utc)


def _to_queue_message(message: SQSMessage) -> QueueMessage:
    return QueueMessage(
        message_id=message["MessageId"],
        body=message.get("Body", ""),
        receipt_handle=message["ReceiptHandle"],
        sent_at=parse_sent_timestamp(message),
    )


def _to_batch_result(response: dict[str, Any]) -> BatchResult:
    return BatchResult(
        successful=[
            BatchSuccess(entry_id=entry["Id"], message_id=entry.get("MessageId", ""))
            for entry in response.get("Successful", [])
        ],
        failed=[
            BatchFailure(
                entry_id=entry["Id"],
                code=entry.get("Code", ""),
                message=entry.get("Message", ""),
                sender_fault=entry.get("SenderFault", False),
            )
            for entry in response.get("Failed", [])
        ],
    )


class QueueClient:
    """SQS client wrapper for migration operations."""

    def __init__(self, client: Any) -> None:
        """
        Args:
            client: A boto3 SQS client (or an object with the same methods)
        """
        self._client = client

    @classmethod
    def from_config(cls, config: ClientConfig) -> QueueClient:
        return cls(create_sqs_client(config))

    def _call(
        self,
        operation: str,
        queue: str,
        method: Callable[..., dict[str, Any]],
        error_cls: type[QueueAPIError] = QueueAPIError,
        **kwargs: Any,
    ) -> dict[str, Any]:
        log_with_context(logging.DEBUG, f"API Request: {operation}", queue=queue)
        try:
            return method(**kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            raise error_cls(
                f"{operation} failed for queue {queue}: {e}",
                operation=operation,
                queue=queue,
                code=code,
            ) from e
        except BotoCoreError as e:
            raise error_cls(
                f"{operation} failed for queue {queue}: {e}",
                operation=operation,
                queue=queue,
            ) from e

    def resolve_queue_url(self, queue_name: str) -> str:
        """
        Resolve a queue name to its URL.

        Raises:
            QueueResolutionError: If the queue cannot be found or accessed
        """
        response = self._call(
            "GetQueueUrl",
            queue_name,
            self._client.get_queue_url,
            error_cls=QueueResolutionError,
            QueueName=queue_name,
        )
        return response["QueueUrl"]

    def receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout: int,
        wait_time_seconds: int | None = None,
    ) -> list[QueueMessage]:
        """
        Receive up to ``max_messages`` messages with their ``SentTimestamp``.

        Received messages stay hidden from other consumers for
        ``visibility_timeout`` seconds unless deleted.  Without
        ``wait_time_seconds`` the queue's own long-poll setting applies.

        Raises:
            QueueAPIError: If the receive call fails
        """
        params: dict[str, Any] = {
            "QueueUrl": queue_url,
            # Endpoints that predate MessageSystemAttributeNames only honour AttributeNames
            "AttributeNames": [SENT_TIMESTAMP_ATTRIBUTE],
            "MessageSystemAttributeNames": [SENT_TIMESTAMP_ATTRIBUTE],
            "MaxNumberOfMessages": max_messages,
            "VisibilityTimeout": visibility_timeout,
        }
        if wait_time_seconds is not None:
            params["WaitTimeSeconds"] = wait_time_seconds

        response = self._call(
            "ReceiveMessage", queue_url, self._client.receive_message, **params
        )
        return [_to_queue_message(m) for m in response.get("Messages", [])]

    def send_message_batch(
        self, queue_url: str, messages: list[QueueMessage]
    ) -> BatchResult:
        """
        Send messages to a queue in one batch call.

        Each entry's ``Id`` is the source message id, so results can be
        matched back to the source receipt handles.

        Raises:
            QueueAPIError: If the call as a whole fails
        """
        entries: list[SendEntry] = [
            {"Id": m.message_id, "MessageBody": m.body} for m in messages
        ]
        response = self._call(
            "SendMessageBatch",
            queue_url,
            self._client.send_message_batch,
            QueueUrl=queue_url,
            Entries=entries,
        )
        return _to_batch_result(response)

    def delete_message_batch(
        self, queue_url: str, entries: list[DeleteEntry]
    ) -> BatchResult:
        """
        Delete messages from a queue in one batch call.

        Raises:
            QueueAPIError: If the call as a whole fails
        """
        response = self._call(
            "DeleteMessageBatch",
            queue_url,
            self._client.delete_message_batch,
            QueueUrl=queue_url,
            Entries=entries,
        )
        return _to_batch_result(response)
