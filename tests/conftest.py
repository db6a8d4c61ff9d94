"""Shared test fixtures for the sqs_migrator test suite."""

from __future__ import annotations

import itertools
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from botocore.exceptions import ClientError

RUN_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def sent_timestamp(age: timedelta, run_time: datetime = RUN_TIME) -> str:
    """Return the ``SentTimestamp`` attribute value for a message of ``age``."""
    return str(int((run_time - age).timestamp() * 1000))


def client_error(code: str, operation: str = "Operation") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


class FakeSQSClient:
    """In-memory stand-in for a boto3 SQS client.

    Implements the four calls the migrator makes.  Received messages stay
    invisible for the rest of the test, like a visibility timeout that
    outlasts the run.  Every call is recorded in ``calls`` as
    ``(operation, kwargs)``.
    """

    def __init__(self, queue_names: tuple[str, ...] = ("source", "dest")) -> None:
        self.urls = {
            name: f"https://sqs.us-east-1.amazonaws.com/123456789012/{name}"
            for name in queue_names
        }
        self.queues: dict[str, list[dict[str, Any]]] = {
            url: [] for url in self.urls.values()
        }
        self.in_flight: dict[str, dict[str, dict[str, Any]]] = {
            url: {} for url in self.urls.values()
        }
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_send_ids: set[str] = set()
        self.fail_delete_ids: set[str] = set()
        self.errors: dict[str, Exception] = {}
        self._ids = itertools.count(1)

    # -- helpers -----------------------------------------------------------

    def add_message(
        self,
        body: str,
        age: timedelta = timedelta(minutes=5),
        queue: str = "source",
        message_id: str | None = None,
    ) -> str:
        message_id = message_id or f"msg-{next(self._ids):04d}"
        self.queues[self.urls[queue]].append(
            {
                "MessageId": message_id,
                "Body": body,
                "Attributes": {"SentTimestamp": sent_timestamp(age)},
            }
        )
        return message_id

    def bodies(self, queue: str) -> list[str]:
        url = self.urls[queue]
        stored = self.queues[url] + list(self.in_flight[url].values())
        return [m["Body"] for m in stored]

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _record(self, operation: str, **kwargs: Any) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.errors:
            raise self.errors[operation]

    # -- SQS API -----------------------------------------------------------

    def get_queue_url(self, QueueName: str) -> dict[str, Any]:
        self._record("get_queue_url", QueueName=QueueName)
        if QueueName not in self.urls:
            raise client_error("AWS.SimpleQueueService.NonExistentQueue", "GetQueueUrl")
        return {"QueueUrl": self.urls[QueueName]}

    def receive_message(self, **kwargs: Any) -> dict[str, Any]:
        self._record("receive_message", **kwargs)
        url = kwargs["QueueUrl"]
        visible = self.queues[url]
        taken, self.queues[url] = (
            visible[: kwargs["MaxNumberOfMessages"]],
            visible[kwargs["MaxNumberOfMessages"] :],
        )
        messages = []
        for stored in taken:
            receipt = f"receipt-handle-{stored['MessageId']}-{next(self._ids)}"
            self.in_flight[url][receipt] = stored
            messages.append({**stored, "ReceiptHandle": receipt})
        if not messages:
            return {}
        return {"Messages": messages}

    def send_message_batch(self, QueueUrl: str, Entries: list[dict[str, str]]) -> dict:
        self._record("send_message_batch", QueueUrl=QueueUrl, Entries=Entries)
        successful, failed = [], []
        for entry in Entries:
            if entry["Id"] in self.fail_send_ids:
                failed.append(
                    {
                        "Id": entry["Id"],
                        "SenderFault": False,
                        "Code": "InternalError",
                        "Message": "send rejected",
                    }
                )
                continue
            new_id = f"dest-{next(self._ids):04d}"
            self.queues[QueueUrl].append(
                {"MessageId": new_id, "Body": entry["MessageBody"], "Attributes": {}}
            )
            successful.append({"Id": entry["Id"], "MessageId": new_id})
        response: dict[str, Any] = {"Successful": successful}
        if failed:
            response["Failed"] = failed
        return response

    def delete_message_batch(
        self, QueueUrl: str, Entries: list[dict[str, str]]
    ) -> dict[str, Any]:
        self._record("delete_message_batch", QueueUrl=QueueUrl, Entries=Entries)
        successful, failed = [], []
        for entry in Entries:
            if entry["Id"] in self.fail_delete_ids:
                failed.append(
                    {
                        "Id": entry["Id"],
                        "SenderFault": True,
                        "Code": "ReceiptHandleIsInvalid",
                        "Message": "bad receipt",
                    }
                )
                continue
            self.in_flight[QueueUrl].pop(entry["ReceiptHandle"], None)
            successful.append({"Id": entry["Id"]})
        response: dict[str, Any] = {"Successful": successful}
        if failed:
            response["Failed"] = failed
        return response


@pytest.fixture()
def fake_sqs():
    """Return an in-memory SQS client with ``source`` and ``dest`` queues."""
    return FakeSQSClient()


@pytest.fixture()
def run_time():
    return RUN_TIME


@pytest.fixture(autouse=True)
def _clean_logger():
    """Remove all handlers from the sqs_migrator logger after each test."""
    yield
    for name in ("sqs_migrator", "botocore"):
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
    logging.getLogger("botocore").setLevel(logging.NOTSET)


@pytest.fixture()
def make_client_error():
    """Factory fixture for botocore ``ClientError`` instances."""
    return client_error


@pytest.fixture()
def make_sent_timestamp():
    """Factory fixture for ``SentTimestamp`` values relative to the run time."""
    return sent_timestamp
