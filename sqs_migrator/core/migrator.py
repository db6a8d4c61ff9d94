"""
Main migrator class for the SQS queue migration tool
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from tqdm import tqdm

from sqs_migrator.constants import (
    DEFAULT_LIMIT,
    DEFAULT_MAX_AGE,
    RECEIPT_PREVIEW_LENGTH,
)
from sqs_migrator.core.batching import is_eligible, message_age, next_batch_size
from sqs_migrator.core.config import MigrationConfig, format_duration
from sqs_migrator.core.context import MigrationContext
from sqs_migrator.core.state import RunSummary
from sqs_migrator.services.queue_client import QueueClient
from sqs_migrator.types import BatchResult, DeleteEntry, QueueMessage
from sqs_migrator.utils.logging import log_with_context


class QueueMigrator:
    """Moves eligible messages from a source queue to a destination queue.

    Each iteration receives one bounded batch, filters it by age and body
    content, forwards the eligible messages in one send call and deletes
    from the source only the messages the destination acknowledged.  Any
    failure of a call as a whole raises ``QueueAPIError`` and ends the run;
    per-entry failures inside a successful call are logged and counted.
    """

    def __init__(
        self,
        client: QueueClient,
        context: MigrationContext,
        show_progress: bool = False,
    ) -> None:
        self.client = client
        self.ctx = context
        self.config = context.config
        self.show_progress = show_progress
        self.summary = RunSummary(run_time=context.run_time, dry_run=context.dry_run)
        self.source_url: str | None = None
        self.dest_url: str | None = None

    def _log(self, level: int, message: str, **kwargs) -> None:
        log_with_context(level, message, logger=self.ctx.logger, **kwargs)

    def run(self) -> RunSummary:
        """
        Run the migration loop until the limit is reached or the source
        queue returns no more messages.

        Returns:
            The run's counters

        Raises:
            ConfigError: If the run parameters are invalid (no call is made)
            QueueAPIError: If any queue call fails as a whole
        """
        self.config.validate()
        self._resolve_queues()

        self._log(
            logging.INFO,
            f"{self.ctx.log_prefix}Attempting to load messages less than "
            f"{format_duration(self.config.max_age)} old from source queue "
            f"{self.config.source}",
        )

        with tqdm(
            total=self.config.limit,
            desc="Migrating",
            unit="msg",
            disable=not self.show_progress,
        ) as progress:
            while True:
                batch_size = next_batch_size(
                    self.config.limit - self.summary.processed,
                    self.config.max_batch_size,
                )
                if batch_size <= 0:
                    break

                batch = self.client.receive_messages(
                    self.source_url,
                    batch_size,
                    self.config.visibility_timeout,
                    self.config.wait_time_seconds,
                )
                if not batch:
                    self._log(logging.INFO, "No more messages available in source queue")
                    break

                self.summary.batches += 1
                eligible = self._select_eligible(batch)
                self.summary.processed += len(eligible)
                progress.update(len(eligible))

                if not eligible:
                    continue

                if self.ctx.dry_run:
                    self._log(
                        logging.INFO,
                        f"{self.ctx.log_prefix}This batch would have attempted to "
                        f"process {len(eligible)} messages",
                        batch=self.summary.batches,
                    )
                    continue

                self._migrate_batch(eligible)

        self._log_final_summary()
        return self.summary

    def _resolve_queues(self) -> None:
        """Resolve queue names to URLs; any failure aborts the run."""
        self.source_url = self.client.resolve_queue_url(self.config.source)
        self._log(
            logging.DEBUG,
            f"Resolved source queue {self.config.source} to {self.source_url}",
            queue=self.config.source,
        )
        if self.config.dest:
            self.dest_url = self.client.resolve_queue_url(self.config.dest)
            self._log(
                logging.DEBUG,
                f"Resolved destination queue {self.config.dest} to {self.dest_url}",
                queue=self.config.dest,
            )

    def _select_eligible(self, batch: list[QueueMessage]) -> list[QueueMessage]:
        eligible = []
        for message in batch:
            if not is_eligible(
                message,
                self.ctx.run_time,
                self.config.max_age,
                self.config.body_filter,
            ):
                self.summary.skipped += 1
                self._log(
                    logging.DEBUG,
                    f"Skipping message ID: {message.message_id}",
                    message_id=message.message_id,
                )
                continue

            age = message_age(message, self.ctx.run_time)
            self._log(
                logging.INFO,
                f"{self.ctx.log_prefix}Staging message Age: {format_duration(age)} "
                f"ID: {message.message_id} Receipt: {message.receipt_preview}",
                message_id=message.message_id,
            )
            if self.config.verbose:
                self._log(
                    logging.INFO,
                    f"{message.message_id} - {message.body}",
                    message_id=message.message_id,
                )
            eligible.append(message)
        return eligible

    def _migrate_batch(self, eligible: list[QueueMessage]) -> None:
        """Forward one batch and remove the acknowledged messages from the source."""
        # Send results reference the entry Id; deletion needs the source receipt
        receipts = {m.message_id: m.receipt_handle for m in eligible}

        sent = self.client.send_message_batch(self.dest_url, eligible)
        for failure in sent.failed:
            self._log(
                logging.ERROR,
                f"err with {failure.entry_id} - {failure.code} {failure.message}".rstrip(),
                message_id=failure.entry_id,
                queue=self.config.dest,
            )

        self.summary.sent += len(sent.successful)
        self.summary.send_failed += len(sent.failed)
        self._log(
            logging.INFO,
            f"Completed transferring messages for batch {self.summary.batches}. "
            f"Successes: {len(sent.successful)}, Failed: {len(sent.failed)}",
            batch=self.summary.batches,
        )

        self._remove_from_source(sent, receipts)

    def _remove_from_source(
        self, sent: BatchResult, receipts: dict[str, str]
    ) -> None:
        entries: list[DeleteEntry] = []
        for success in sent.successful:
            receipt = receipts.get(success.entry_id)
            if receipt is None:
                self._log(
                    logging.WARNING,
                    f"Send result references unknown entry {success.entry_id}, not deleting",
                    message_id=success.entry_id,
                )
                continue
            self._log(
                logging.DEBUG,
                f"Staging for removal ID: {success.entry_id} "
                f"Message ID: {success.message_id} Receipt: {receipt[:RECEIPT_PREVIEW_LENGTH]}",
                message_id=success.entry_id,
            )
            entries.append({"Id": success.entry_id, "ReceiptHandle": receipt})

        if not entries:
            self._log(logging.WARNING, "No messages were sent in this batch, nothing to remove")
            return

        self._log(logging.INFO, "Removing messages from source queue")
        removed = self.client.delete_message_batch(self.source_url, entries)
        for failure in removed.failed:
            self._log(
                logging.ERROR,
                f"Failed to remove {failure.entry_id} from source - {failure.code} {failure.message}".rstrip(),
                message_id=failure.entry_id,
                queue=self.config.source,
            )

        self.summary.deleted += len(removed.successful)
        self.summary.delete_failed += len(removed.failed)
        self._log(
            logging.INFO,
            f"Completed removal of messages for batch {self.summary.batches}. "
            f"Successful Removals: {len(removed.successful)}, "
            f"Failed Removals: {len(removed.failed)}",
            batch=self.summary.batches,
        )

    def _log_final_summary(self) -> None:
        s = self.summary
        if not self.ctx.dry_run:
            self._log(
                logging.INFO,
                f"Migration totals. Successes: {s.sent}, Failed: {s.send_failed}, "
                f"Removed: {s.deleted}, Failed Removals: {s.delete_failed}",
            )
        self._log(
            logging.INFO,
            f"{self.ctx.log_prefix}Processed {s.processed} messages in total",
        )


def run_migration(
    client: QueueClient,
    source: str,
    dest: str = "",
    execute: bool = False,
    max_age: timedelta = DEFAULT_MAX_AGE,
    limit: int = DEFAULT_LIMIT,
    body_filter: str = "",
    verbose: bool = False,
    run_time: datetime | None = None,
    logger: logging.Logger | None = None,
) -> RunSummary:
    """
    Run one migration with explicit parameters.

    Args:
        client: Queue client used for every call
        source: Source queue name
        dest: Destination queue name, required when ``execute`` is True
        execute: Send and delete; when False only report eligible messages
        max_age: Messages this old or older at ``run_time`` are skipped
        limit: Maximum number of messages to attempt
        body_filter: Substring a message body must contain
        verbose: Also log the body of each eligible message
        run_time: Reference instant for message age; defaults to now
        logger: Logger to write to; defaults to the package logger

    Returns:
        The run's counters
    """
    config = MigrationConfig(
        source=source,
        dest=dest,
        execute=execute,
        max_age=max_age,
        limit=limit,
        body_filter=body_filter,
        verbose=verbose,
    )
    context_kwargs = {}
    if run_time is not None:
        context_kwargs["run_time"] = run_time
    if logger is not None:
        context_kwargs["logger"] = logger
    context = MigrationContext(config=config, **context_kwargs)
    return QueueMigrator(client, context).run()
