"""
ImageTranscoder - Resizes static images into full and thumbnail tiers using Pillow.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Optional

from PIL import Image, ImageOps

from .config import PipelineConfig
from .manifest_entry import ImageEntry, Tier, VariantSet
from .source_asset import AssetKind, SourceAsset
from .staging import StagedOutputs


class ImageTranscoder:
    """
    Produces two tiers x two encodings (WebP, JPEG fallback) for a static image.

    The four encodes run concurrently. They are written to staging files
    and only renamed into place when all four succeed, so a failure never
    leaves a partial set behind.
    """

    ENCODINGS = {
        'webp': 'WEBP',
        'jpg': 'JPEG',
    }

    def __init__(
        self,
        config: PipelineConfig,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize image transcoder.

        Args:
            config: Pipeline configuration (sizes, qualities, output roots)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def output_paths(self, asset: SourceAsset) -> Dict[Tier, Dict[str, Path]]:
        """Final output locations for every variant of ``asset``."""
        roots = {
            Tier.FULL: self.config.optimized_root,
            Tier.THUMBNAIL: self.config.thumbs_root,
        }
        return {
            tier: {enc: root / f"{asset.stem}.{enc}" for enc in self.ENCODINGS}
            for tier, root in roots.items()
        }

    def transcode(self, asset: SourceAsset) -> ImageEntry:
        """
        Transcode a static image.

        Args:
            asset: Asset of kind ``static``

        Returns:
            ImageEntry referencing all four written files

        Raises:
            Whatever Pillow raises for unreadable or unencodable input;
            no output file exists for the asset in that case.
        """
        if asset.kind is not AssetKind.STATIC:
            raise ValueError(f"Not a static image: {asset.path}")

        source = self.config.root / asset.path
        with Image.open(source) as img:
            img.load()
            img = self._normalize_mode(img)
            full = self.resize_full(img)
            thumb = self.resize_thumbnail(img)

        tier_images = {Tier.FULL: full, Tier.THUMBNAIL: thumb}
        qualities = {
            (Tier.FULL, 'webp'): self.config.full_webp_quality,
            (Tier.FULL, 'jpg'): self.config.full_jpeg_quality,
            (Tier.THUMBNAIL, 'webp'): self.config.thumb_webp_quality,
            (Tier.THUMBNAIL, 'jpg'): self.config.thumb_jpeg_quality,
        }
        paths = self.output_paths(asset)

        with StagedOutputs(self.logger) as staged:
            jobs = []
            for tier, by_encoding in paths.items():
                for encoding, final_path in by_encoding.items():
                    jobs.append((
                        tier_images[tier].copy(),
                        encoding,
                        qualities[(tier, encoding)],
                        staged.stage(final_path),
                    ))

            with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
                futures = [pool.submit(self._encode, *job) for job in jobs]
                # Wait for every encode to settle before raising the first error
                errors = [f.exception() for f in futures]
            for error in errors:
                if error is not None:
                    raise error

            staged.commit()

        self.logger.debug(f"Wrote {len(jobs)} variants for {asset.path}")

        return ImageEntry(
            original=asset.path,
            optimized=self._variant_set(Tier.FULL, paths),
            thumbnail=self._variant_set(Tier.THUMBNAIL, paths),
        )

    def resize_full(self, img: Image.Image) -> Image.Image:
        """Scale down to the width cap, keeping aspect ratio. Never upscales."""
        max_width = self.config.full_max_width
        if img.width <= max_width:
            return img.copy()
        height = max(1, round(img.height * max_width / img.width))
        return img.resize((max_width, height), Image.Resampling.LANCZOS)

    def resize_thumbnail(self, img: Image.Image) -> Image.Image:
        """Cover-resize and center-crop to a square."""
        size = self.config.thumb_size
        return ImageOps.fit(
            img, (size, size), Image.Resampling.LANCZOS, centering=(0.5, 0.5)
        )

    def _encode(self, img: Image.Image, encoding: str, quality: int, path: Path) -> None:
        """Encode one variant to ``path``."""
        output_format = self.ENCODINGS[encoding]
        if output_format == 'JPEG':
            img = self._convert_color_mode(img)
            img.save(path, format='JPEG', quality=quality, optimize=True, progressive=True)
        else:
            img.save(path, format='WEBP', quality=quality, method=4)

    def _normalize_mode(self, img: Image.Image) -> Image.Image:
        """Convert palette and high-bit-depth modes so resampling filters apply."""
        if img.mode in ('RGB', 'RGBA'):
            return img
        return img.convert('RGBA' if self._has_alpha(img) else 'RGB')

    @staticmethod
    def _has_alpha(img: Image.Image) -> bool:
        return img.mode in ('RGBA', 'LA', 'PA') or (
            img.mode == 'P' and 'transparency' in img.info
        )

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white for JPEG output."""
        if img.mode == 'RGBA':
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        return img

    def _variant_set(self, tier: Tier, paths: Dict[Tier, Dict[str, Path]]) -> VariantSet:
        return VariantSet(
            tier=tier,
            files={enc: self.config.relative(p) for enc, p in paths[tier].items()},
        )

