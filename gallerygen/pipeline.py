"""
Pipeline - One gallery build: scan, transcode, write the manifest.
"""

import logging
from typing import Optional

from .batch_progress import BatchProgress
from .config import PipelineConfig
from .coordinator import BatchCoordinator, BatchResult
from .encoder import FFmpegRunner
from .image_transcoder import ImageTranscoder
from .scanner import Scanner
from .video_transcoder import VideoTranscoder


class Pipeline:
    """
    Wires scanner, transcoders, coordinator and manifest together.
    """

    def __init__(
        self,
        config: PipelineConfig,
        runner: Optional[FFmpegRunner] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
            runner: Encoder runner (default: ffmpeg from config)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.runner = runner or FFmpegRunner(
            binary=config.ffmpeg_binary,
            timeout=config.encoder_timeout,
            logger=self.logger,
        )
        self.scanner = Scanner(config, self.logger)
        self.coordinator = BatchCoordinator(
            image_transcoder=ImageTranscoder(config, self.logger),
            video_transcoder=VideoTranscoder(config, runner=self.runner, logger=self.logger),
            project_root=config.project_root,
            logger=self.logger,
        )

    def check_encoder(self) -> bool:
        """Log whether the video encoder is usable. Never aborts the run."""
        version = self.runner.version()
        if version is None:
            self.logger.warning(
                f"{self.runner.binary} not found or not runnable. "
                f"Animated images will fail to convert."
            )
            return False
        self.logger.info(f"Encoder detected: {version}")
        return True

    def run(
        self,
        progress: Optional[BatchProgress] = None,
        limit: Optional[int] = None
    ) -> Optional[BatchResult]:
        """
        Run one build.

        Args:
            progress: Optional progress tracker
            limit: Optional limit on number of assets (for testing)

        Returns:
            BatchResult, or None when no candidate files were found
            (no manifest is written in that case)
        """
        self.config.optimized_root.mkdir(parents=True, exist_ok=True)
        self.config.thumbs_root.mkdir(parents=True, exist_ok=True)

        self.check_encoder()

        assets = self.scanner.scan(limit=limit)
        if not assets:
            self.logger.error(f"No images found in {self.config.source_root}")
            return None

        result = self.coordinator.run(assets, progress=progress)
        result.manifest.save(str(self.config.manifest_file), logger=self.logger)
        return result
