"""
Scanner - Walks the source tree and enumerates media files to transcode.
"""

import logging
import os
import time
from typing import List, Optional

from .config import PipelineConfig
from .source_asset import AssetKind, SourceAsset


class Scanner:
    """
    Enumerates candidate files under the source root.

    Files are matched by extension only. Static images are ordered before
    animated ones so cheap encodes run first; within each kind the walk
    order (directories and names sorted) is kept.
    """

    def __init__(
        self,
        config: PipelineConfig,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize scanner.

        Args:
            config: Pipeline configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def scan(self, limit: Optional[int] = None) -> List[SourceAsset]:
        """
        Scan the source root.

        Args:
            limit: Optional limit on number of assets returned (for testing)

        Returns:
            Ordered list of assets: all static, then all animated.
            Empty when nothing matches.
        """
        start_time = time.time()
        root = self.config.source_root

        if not root.is_dir():
            self.logger.warning(f"Source directory not found: {root}")
            return []

        self.logger.info(f"Scanning: {root}")

        statics: List[SourceAsset] = []
        animated: List[SourceAsset] = []
        skipped = 0

        for asset_or_none in self._walk(root):
            if asset_or_none is None:
                skipped += 1
                continue
            if asset_or_none.kind is AssetKind.ANIMATED:
                animated.append(asset_or_none)
            else:
                statics.append(asset_or_none)

        assets = statics + animated
        if limit:
            self.logger.info(f"Limit: {limit} assets (testing mode)")
            assets = assets[:limit]

        self.logger.info(
            f"Scan complete: {len(statics)} static, {len(animated)} animated, "
            f"{skipped} ignored ({time.time() - start_time:.1f}s)"
        )
        return assets

    def _walk(self, root):
        """Yield a SourceAsset (or None for unsupported files) per file."""
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for name in sorted(filenames):
                relative = self.config.relative(os.path.join(dirpath, name))
                asset = SourceAsset.from_path(relative)
                if asset is None:
                    self.logger.debug(f"Ignoring: {relative}")
                yield asset
