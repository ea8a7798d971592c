"""
Gallery asset pipeline

Turns a directory of raw media into web-ready assets:
    1. Scan: Enumerate static and animated images under the source root
    2. Transcode: Full and thumbnail tiers (WebP/JPEG via Pillow, WebM via ffmpeg)
    3. Manifest: Write the ordered index of everything that was produced
"""

__version__ = "1.0.0"

from .config import PipelineConfig
from .source_asset import AssetKind, SourceAsset, classify
from .scanner import Scanner
from .manifest_entry import (
    ImageEntry,
    ManifestEntry,
    Tier,
    VariantSet,
    VideoEntry,
    public_url,
    year_from_path,
)
from .manifest import Manifest
from .encoder import EncodeError, EncoderProfile, EncodeResult, FFmpegRunner
from .image_transcoder import ImageTranscoder
from .video_transcoder import VideoTranscoder
from .batch_stats import BatchStats
from .batch_progress import BatchProgress
from .coordinator import BatchCoordinator, BatchResult
from .pipeline import Pipeline
from .reporter import Reporter

__all__ = [
    "PipelineConfig",
    "AssetKind",
    "SourceAsset",
    "classify",
    "Scanner",
    "ImageEntry",
    "ManifestEntry",
    "Tier",
    "VariantSet",
    "VideoEntry",
    "public_url",
    "year_from_path",
    "Manifest",
    "EncodeError",
    "EncoderProfile",
    "EncodeResult",
    "FFmpegRunner",
    "ImageTranscoder",
    "VideoTranscoder",
    "BatchStats",
    "BatchProgress",
    "BatchCoordinator",
    "BatchResult",
    "Pipeline",
    "Reporter",
]
