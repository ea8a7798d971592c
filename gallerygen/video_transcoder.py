"""
VideoTranscoder - Converts animated images to WebM renditions with ffmpeg.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

from .config import PipelineConfig
from .encoder import (
    DEFAULT_FALLBACK_CHAIN,
    THUMBNAIL_PROFILE,
    EncodeError,
    EncoderProfile,
    EncodeResult,
    FFmpegRunner,
    build_args,
)
from .manifest_entry import Tier, VariantSet, VideoEntry
from .source_asset import AssetKind, SourceAsset
from .staging import StagedOutputs


class VideoTranscoder:
    """
    Produces a full-length WebM and a short square WebM thumbnail for a GIF.

    Full rendition: each profile of the fallback chain is tried in order
    until one succeeds. If every profile fails, the original file is copied
    into the full-tier root as a degraded artifact and the asset fails.

    Thumbnail rendition: a single attempt, only after an encoded full
    rendition. Both renditions are committed together; if the thumbnail
    fails neither is written and the asset fails.
    """

    STDERR_EXCERPT = 1000
    THUMB_STDERR_EXCERPT = 800

    def __init__(
        self,
        config: PipelineConfig,
        runner: Optional[FFmpegRunner] = None,
        fallback_chain: Sequence[EncoderProfile] = DEFAULT_FALLBACK_CHAIN,
        thumbnail_profile: EncoderProfile = THUMBNAIL_PROFILE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize video transcoder.

        Args:
            config: Pipeline configuration
            runner: Encoder runner (default: ffmpeg from config)
            fallback_chain: Profiles tried in order for the full rendition
            thumbnail_profile: Profile for the thumbnail rendition
            logger: Optional logger instance
        """
        if not fallback_chain:
            raise ValueError("fallback_chain must contain at least one profile")
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.runner = runner or FFmpegRunner(
            binary=config.ffmpeg_binary,
            timeout=config.encoder_timeout,
            logger=self.logger,
        )
        self.fallback_chain = tuple(fallback_chain)
        self.thumbnail_profile = thumbnail_profile

    @property
    def full_filter(self) -> str:
        c = self.config
        return f"fps={c.video_fps},scale='min({c.video_max_width},iw)':-2:flags=lanczos"

    @property
    def thumbnail_filter(self) -> str:
        c = self.config
        size = c.video_thumb_size
        return (
            f"fps={c.video_thumb_fps},"
            f"scale={size}:{size}:force_original_aspect_ratio=increase,"
            f"crop={size}:{size},setsar=1"
        )

    def output_paths(self, asset: SourceAsset):
        """Return (full rendition path, thumbnail path)."""
        return (
            self.config.optimized_root / f"{asset.stem}.webm",
            self.config.thumbs_root / f"{asset.stem}.webm",
        )

    def transcode(self, asset: SourceAsset) -> VideoEntry:
        """
        Transcode an animated image.

        Args:
            asset: Asset of kind ``animated``

        Returns:
            VideoEntry referencing both renditions

        Raises:
            EncodeError: if the full or thumbnail rendition could not be produced
        """
        if asset.kind is not AssetKind.ANIMATED:
            raise ValueError(f"Not an animated image: {asset.path}")

        source = self.config.root / asset.path
        full_path, thumb_path = self.output_paths(asset)

        # Nothing is committed until both renditions exist
        with StagedOutputs(self.logger) as staged:
            profile = self._encode_full(asset, source, staged.stage(full_path))
            if profile is None:
                fallback = self._copy_original(asset, source)
                if fallback is None:
                    raise EncodeError(asset.path, "all encoder profiles failed")
                raise EncodeError(
                    asset.path,
                    f"all encoder profiles failed; copied original to {fallback}",
                    degraded=True,
                )
            self.logger.info(f"Encoded full {asset.filename} ({profile.name})")

            result = self._encode_thumbnail(source, staged.stage(thumb_path))
            if not result.ok:
                self.logger.error(
                    f"Failed to create thumbnail for {asset.path} ({result.describe()}): "
                    f"{result.stderr[:self.THUMB_STDERR_EXCERPT]}"
                )
                raise EncodeError(asset.path, f"thumbnail encode failed ({result.describe()})")

            staged.commit()

        self.logger.info(
            f"Converted {asset.filename} -> {self.config.relative(full_path)}, "
            f"{self.config.relative(thumb_path)}"
        )

        return VideoEntry(
            original=asset.path,
            optimized=VariantSet(Tier.FULL, {'webm': self.config.relative(full_path)}),
            thumbnail=VariantSet(Tier.THUMBNAIL, {'webm': self.config.relative(thumb_path)}),
        )

    def _encode_full(
        self,
        asset: SourceAsset,
        source: Path,
        output: Path
    ) -> Optional[EncoderProfile]:
        """Try each profile in turn. Returns the profile that succeeded, or None."""
        last: Optional[EncodeResult] = None

        for attempt, profile in enumerate(self.fallback_chain):
            if attempt > 0:
                self.logger.warning(
                    f"{self.fallback_chain[attempt - 1].name} failed for {asset.path} "
                    f"({last.describe()}), retrying with {profile.name}"
                )
            output.unlink(missing_ok=True)
            last = self.runner.run(build_args(
                str(source), str(output), self.full_filter, profile,
            ))
            if last.ok and output.is_file():
                return profile
            if last.ok:
                last = EncodeResult(ok=False, stderr='encoder produced no output')

        self.logger.error(
            f"Encoder failed for {asset.path} ({last.describe()}): "
            f"{last.stderr[:self.STDERR_EXCERPT]}"
        )
        return None

    def _encode_thumbnail(self, source: Path, output: Path) -> EncodeResult:
        result = self.runner.run(build_args(
            str(source), str(output), self.thumbnail_filter,
            self.thumbnail_profile, duration=self.config.video_thumb_seconds,
        ))
        if result.ok and not output.is_file():
            return EncodeResult(ok=False, stderr='encoder produced no output')
        return result

    def _copy_original(self, asset: SourceAsset, source: Path) -> Optional[str]:
        """Copy the source into the full-tier root as a degraded artifact."""
        target = self.config.optimized_root / asset.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            self.logger.error(f"Could not copy original {asset.path}: {e}")
            return None
        self.logger.warning(f"Copied original {asset.filename} as fallback.")
        return self.config.relative(target)
