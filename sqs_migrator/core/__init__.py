"""Core migration logic including configuration and orchestration."""

__all__ = [
    "batching",
    "config",
    "context",
    "migrator",
    "state",
]
