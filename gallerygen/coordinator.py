"""
BatchCoordinator - Drives scanned assets through the matching transcoder.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .batch_progress import BatchProgress
from .batch_stats import BatchStats
from .encoder import EncodeError
from .image_transcoder import ImageTranscoder
from .manifest import Manifest
from .manifest_entry import ManifestEntry
from .source_asset import AssetKind, SourceAsset
from .video_transcoder import VideoTranscoder


@dataclass
class BatchResult:
    """
    Outcome of one batch.

    Attributes:
        manifest: Entries for every asset that completed, in processing order
        stats: Counters and error details
    """
    manifest: Manifest = field(default_factory=Manifest)
    stats: BatchStats = field(default_factory=BatchStats)


class BatchCoordinator:
    """
    Processes assets one at a time and isolates per-asset failures.

    Only the encodes inside a single asset run concurrently; the next asset
    starts after the current one has settled. A failure is logged and the
    asset is left out of the manifest; the batch always runs to the end.
    """

    def __init__(
        self,
        image_transcoder: ImageTranscoder,
        video_transcoder: VideoTranscoder,
        project_root: str = '.',
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize coordinator.

        Args:
            image_transcoder: Transcoder for static images
            video_transcoder: Transcoder for animated images
            project_root: Root that manifest paths are relative to
            logger: Optional logger instance
        """
        self.image_transcoder = image_transcoder
        self.video_transcoder = video_transcoder
        self.project_root = Path(project_root)
        self.logger = logger or logging.getLogger(__name__)
        self._stop_requested = False

    def stop(self) -> None:
        """Request the coordinator to stop after the current asset."""
        self._stop_requested = True

    def run(
        self,
        assets: Iterable[SourceAsset],
        progress: Optional[BatchProgress] = None
    ) -> BatchResult:
        """
        Transcode every asset in order.

        Args:
            assets: Ordered assets from the scanner
            progress: Optional progress tracker

        Returns:
            BatchResult with the manifest of completed assets
        """
        assets = list(assets)
        result = BatchResult(stats=BatchStats(total_to_process=len(assets)))
        stats = result.stats

        self.logger.info(f"Found {len(assets)} files to process.")

        for index, asset in enumerate(assets, start=1):
            if self._stop_requested:
                self.logger.info("Stop requested, halting batch")
                break

            if progress:
                progress.on_asset_start(asset, index, len(assets))
            self.logger.info(f"Processing: {asset.path}")

            entry = self._process_asset(asset, stats, progress)
            if entry is not None:
                result.manifest.add_entry(entry)

            if progress:
                progress.on_progress_update(stats)

        self.logger.info(
            f"Done! {stats.processed} items processed, {stats.errors} failed "
            f"({stats.elapsed_seconds:.1f}s)"
        )
        return result

    def _process_asset(
        self,
        asset: SourceAsset,
        stats: BatchStats,
        progress: Optional[BatchProgress]
    ) -> Optional[ManifestEntry]:
        """Transcode a single asset. Returns its entry, or None on failure."""
        try:
            if asset.kind is AssetKind.ANIMATED:
                entry = self.video_transcoder.transcode(asset)
            else:
                entry = self.image_transcoder.transcode(asset)
            size = self._entry_size(entry)
        except EncodeError as e:
            self._record_failure(asset, stats, progress, e.message, degraded=e.degraded)
            return None
        except Exception as e:
            self._record_failure(asset, stats, progress, f"{type(e).__name__}: {e}")
            return None

        stats.processed += 1
        stats.bytes_generated += size
        if asset.kind is AssetKind.ANIMATED:
            stats.animated_processed += 1
        else:
            stats.static_processed += 1

        if progress:
            progress.on_asset_processed(asset, success=True, size=size)
        return entry

    def _record_failure(
        self,
        asset: SourceAsset,
        stats: BatchStats,
        progress: Optional[BatchProgress],
        message: str,
        degraded: bool = False
    ) -> None:
        self.logger.error(f"Error processing {asset.path}: {message}")
        stats.record_error(f"{asset.path}: {message}", degraded=degraded)
        if progress:
            progress.on_asset_processed(asset, success=False, error=message)

    def _entry_size(self, entry: ManifestEntry) -> int:
        """Total bytes of the entry's files; raises if any referenced file is missing."""
        return sum((self.project_root / path).stat().st_size for path in entry.paths())
