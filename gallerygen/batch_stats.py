"""
BatchStats - Statistics for a gallery build.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class BatchStats:
    """
    Statistics for one batch run.

    Attributes:
        total_to_process: Assets scheduled in the batch
        processed: Assets that produced a manifest entry
        errors: Assets that failed and were left out of the manifest
        degraded: Failed animated assets whose original was copied as fallback
        static_processed: Processed static images
        animated_processed: Processed animated images
        bytes_generated: Total bytes of variants written
        start_time: Start timestamp
        error_details: List of error messages
    """
    total_to_process: int = 0
    processed: int = 0
    errors: int = 0
    degraded: int = 0
    static_processed: int = 0
    animated_processed: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_minute(self) -> float:
        """Processing rate in assets per minute."""
        elapsed = self.elapsed_seconds
        if elapsed > 0:
            return self.completed_count / elapsed * 60
        return 0.0

    @property
    def completed_count(self) -> int:
        """Total settled (processed + errors)."""
        return self.processed + self.errors

    @property
    def remaining_count(self) -> int:
        return self.total_to_process - self.completed_count

    def record_error(self, message: str, degraded: bool = False) -> None:
        self.errors += 1
        if degraded:
            self.degraded += 1
        self.error_details.append(message)
