"""Constants shared across the SQS queue migration tool."""

from datetime import timedelta

# SQS accepts at most 10 entries per receive/send/delete batch call
MAX_BATCH_SIZE = 10

DEFAULT_LIMIT = 10
DEFAULT_MAX_AGE = timedelta(hours=12)
DEFAULT_MAX_AGE_TEXT = "12h"

# Seconds a received message stays hidden from other consumers
DEFAULT_VISIBILITY_TIMEOUT = 60

# Upper bounds SQS enforces on ReceiveMessage
MAX_VISIBILITY_TIMEOUT = 43200
MAX_WAIT_TIME_SECONDS = 20

DEFAULT_CONFIG_FILE = "sqs-migrator.yaml"

SENT_TIMESTAMP_ATTRIBUTE = "SentTimestamp"

# Receipt handles are long; only this many characters are logged
RECEIPT_PREVIEW_LENGTH = 15

# SQS error codes that get tailored CLI hints
NON_EXISTENT_QUEUE_ERRORS = frozenset(
    {"AWS.SimpleQueueService.NonExistentQueue", "QueueDoesNotExist"}
)
ACCESS_DENIED_ERRORS = frozenset(
    {"AccessDenied", "AccessDeniedException", "InvalidClientTokenId"}
)
THROTTLING_ERRORS = frozenset(
    {"Throttling", "ThrottlingException", "RequestThrottled"}
)
