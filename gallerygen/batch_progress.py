"""
BatchProgress - Reports per-asset results and periodic progress.
"""

import logging
from typing import Optional

from .batch_stats import BatchStats
from .source_asset import SourceAsset


class BatchProgress:
    """
    Displays batch progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 25,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each asset as it settles
            log_interval: Log summary progress every N assets (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_asset_start(self, asset: SourceAsset, index: int, total: int) -> None:
        if self.show_files:
            print(f"  [{index}/{total}] {asset.path} ({asset.kind.value})")

    def on_asset_processed(
        self,
        asset: SourceAsset,
        success: bool,
        size: Optional[int] = None,
        error: Optional[str] = None
    ) -> None:
        """
        Called when an asset has settled.

        Args:
            asset: The source asset
            success: Whether a manifest entry was produced
            size: Bytes written for the asset's variants (if success)
            error: Error message (if failed)
        """
        if not self.show_files:
            return
        if success:
            size_str = self._format_bytes(size) if size else "unknown"
            print(f"  [OK] {asset.path} -> {size_str}")
        else:
            print(f"  [ERROR] {asset.path} -> {error or 'failed'}")

    def on_progress_update(self, stats: BatchStats) -> None:
        """Log a progress line every ``log_interval`` settled assets."""
        done = stats.completed_count
        if self.show_files or done - self.last_logged < self.log_interval:
            return
        self.last_logged = done
        self.logger.info(
            f"Progress: {stats.processed} processed, {stats.errors} errors, "
            f"{stats.remaining_count} left ({stats.rate_per_minute:.1f}/min)"
        )

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"

    def __call__(self, stats: BatchStats) -> None:
        self.on_progress_update(stats)
