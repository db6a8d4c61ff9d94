"""
Migration state container for a queue migration run.

Mutable counters for a run, separated from the immutable MigrationContext
for clear ownership boundaries.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass
class RunSummary:
    """Aggregate counters for a migration run.

    ``processed`` counts messages judged eligible, whether or not they were
    sent (dry runs included).  Confirmed delivery is tracked separately by
    ``sent`` and ``deleted``.
    """

    run_time: datetime
    dry_run: bool = True
    processed: int = 0
    skipped: int = 0
    batches: int = 0
    sent: int = 0
    send_failed: int = 0
    deleted: int = 0
    delete_failed: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["run_time"] = self.run_time.isoformat()
        return data
