"""
PipelineConfig - Fixed presets and locations for a gallery build.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass
class PipelineConfig:
    """
    Configuration for one gallery build.

    All directory settings are relative to ``project_root``; manifest paths
    are written relative to it as well.

    Attributes:
        project_root: Root that every manifest path is relative to
        source_dir: Directory holding the raw media files
        optimized_dir: Output directory for full-tier variants
        thumbs_dir: Output directory for thumbnail-tier variants
        manifest_path: Manifest file written at the end of a run
        full_max_width: Width cap for full-tier static images
        thumb_size: Square edge for static thumbnails
        full_webp_quality: WebP quality for full-tier static images
        full_jpeg_quality: JPEG quality for full-tier static images
        thumb_webp_quality: WebP quality for static thumbnails
        thumb_jpeg_quality: JPEG quality for static thumbnails
        ffmpeg_binary: Video encoder executable
        encoder_timeout: Wall-clock budget per encoder invocation (seconds)
        video_max_width: Width cap for the full animated rendition
        video_fps: Frame rate of the full animated rendition
        video_thumb_size: Square edge for the animated thumbnail
        video_thumb_fps: Frame rate of the animated thumbnail
        video_thumb_seconds: Duration of the animated thumbnail
    """
    project_root: str = '.'
    source_dir: str = 'images'
    optimized_dir: str = 'images-optimized'
    thumbs_dir: str = 'images-thumbs'
    manifest_path: str = 'index.json'
    full_max_width: int = 1600
    thumb_size: int = 360
    full_webp_quality: int = 80
    full_jpeg_quality: int = 82
    thumb_webp_quality: int = 60
    thumb_jpeg_quality: int = 72
    ffmpeg_binary: str = 'ffmpeg'
    encoder_timeout: float = 90.0
    video_max_width: int = 1280
    video_fps: int = 30
    video_thumb_size: int = 480
    video_thumb_fps: int = 15
    video_thumb_seconds: float = 3.0

    ENV_PREFIX = 'GALLERYGEN_'

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Create configuration from GALLERYGEN_* environment variables."""
        env = os.environ
        p = cls.ENV_PREFIX
        defaults = cls()
        return cls(
            project_root=env.get(f'{p}ROOT', defaults.project_root),
            source_dir=env.get(f'{p}SOURCE_DIR', defaults.source_dir),
            optimized_dir=env.get(f'{p}OPTIMIZED_DIR', defaults.optimized_dir),
            thumbs_dir=env.get(f'{p}THUMBS_DIR', defaults.thumbs_dir),
            manifest_path=env.get(f'{p}MANIFEST', defaults.manifest_path),
            ffmpeg_binary=env.get(f'{p}FFMPEG', defaults.ffmpeg_binary),
            encoder_timeout=float(env.get(f'{p}ENCODER_TIMEOUT', defaults.encoder_timeout)),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not Path(self.project_root).is_dir():
            errors.append(f"Project root does not exist: {self.project_root}")

        for name in ('full_max_width', 'thumb_size', 'video_max_width',
                     'video_fps', 'video_thumb_size', 'video_thumb_fps'):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive")

        if self.encoder_timeout <= 0:
            errors.append("encoder_timeout must be positive")
        if self.video_thumb_seconds <= 0:
            errors.append("video_thumb_seconds must be positive")

        for name in ('full_webp_quality', 'full_jpeg_quality',
                     'thumb_webp_quality', 'thumb_jpeg_quality'):
            value = getattr(self, name)
            if not 1 <= value <= 100:
                errors.append(f"{name} must be between 1 and 100 (got {value})")

        # Outputs under the source root would be scanned as sources on the next run
        for name in ('optimized_dir', 'thumbs_dir'):
            if self._is_within(getattr(self, name), self.source_dir):
                errors.append(f"{name} must not be inside source_dir")
        if os.path.normpath(self.optimized_dir) == os.path.normpath(self.thumbs_dir):
            errors.append("optimized_dir and thumbs_dir must differ")

        return errors

    def _is_within(self, path: str, parent: str) -> bool:
        """True if ``path`` is ``parent`` or below it (both relative to the root)."""
        path = os.path.abspath(self.root / path)
        parent = os.path.abspath(self.root / parent)
        return os.path.commonpath([path, parent]) == parent

    @property
    def root(self) -> Path:
        return Path(self.project_root)

    @property
    def source_root(self) -> Path:
        return self.root / self.source_dir

    @property
    def optimized_root(self) -> Path:
        return self.root / self.optimized_dir

    @property
    def thumbs_root(self) -> Path:
        return self.root / self.thumbs_dir

    @property
    def manifest_file(self) -> Path:
        return self.root / self.manifest_path

    def relative(self, path: Path) -> str:
        """Project-relative path with forward slashes, safe to embed in a URL."""
        return Path(os.path.relpath(path, self.root)).as_posix()
