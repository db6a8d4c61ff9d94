"""Service integrations for the queue API."""

__all__ = [
    "queue_client",
]
