"""
ManifestEntry - Records describing the files produced for one source asset.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Iterator, Optional, Tuple, Type


YEAR_PATTERN = re.compile(r'^(\d{4})[-_.]')


def year_from_path(path: str) -> Optional[str]:
    """
    Extract a leading year from the file name of a manifest path.

    '2023-04-01_beach.jpg' -> '2023', 'beach.jpg' -> None
    """
    name = path.replace('\\', '/').rsplit('/', 1)[-1]
    match = YEAR_PATTERN.match(name)
    return match.group(1) if match else None


def public_url(base_url: str, path: str) -> str:
    """Join a base URL and a manifest path."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class Tier(str, Enum):
    FULL = 'full'
    THUMBNAIL = 'thumbnail'


@dataclass
class VariantSet:
    """
    Derived files for one tier, keyed by encoding (e.g. 'webp', 'jpg', 'webm').

    Attributes:
        tier: Size tier of every file in the set
        files: Mapping of encoding -> project-relative path
    """
    tier: Tier
    files: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return dict(self.files)

    @classmethod
    def from_dict(cls, tier: Tier, data: dict) -> 'VariantSet':
        return cls(tier=tier, files={str(k): str(v) for k, v in data.items()})


class ManifestEntry:
    """
    Base record for one successfully transcoded asset.

    Subclasses fix the ``format`` tag and the encodings both tiers must
    carry. Entries are only built once every referenced file is on disk.
    """

    format: ClassVar[str] = ''
    encodings: ClassVar[Tuple[str, ...]] = ()

    _registry: ClassVar[Dict[str, Type['ManifestEntry']]] = {}

    def __init__(self, original: str, optimized: VariantSet, thumbnail: VariantSet):
        for variants, tier in ((optimized, Tier.FULL), (thumbnail, Tier.THUMBNAIL)):
            if variants.tier is not tier:
                raise ValueError(f"Expected {tier.value} variants, got {variants.tier.value}")
            missing = [e for e in self.encodings if e not in variants.files]
            if missing:
                raise ValueError(
                    f"{self.format} entry for {original} is missing "
                    f"{tier.value} encodings: {', '.join(missing)}"
                )
        self.original = original
        self.optimized = optimized
        self.thumbnail = thumbnail

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        ManifestEntry._registry[cls.format] = cls

    def __eq__(self, other) -> bool:
        if not isinstance(other, ManifestEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(original={self.original!r})"

    @property
    def year(self) -> Optional[str]:
        return year_from_path(self.original)

    @property
    def filename(self) -> str:
        return self.original.rsplit('/', 1)[-1]

    def paths(self) -> Iterator[str]:
        """Yield every produced path this entry references."""
        yield from self.optimized.files.values()
        yield from self.thumbnail.files.values()

    def to_dict(self) -> dict:
        """Convert to the serialized manifest shape."""
        return {
            'original': self.original,
            'optimized': self.optimized.to_dict(),
            'thumbnail': self.thumbnail.to_dict(),
            'format': self.format,
        }

    @staticmethod
    def from_dict(data: dict) -> 'ManifestEntry':
        """Create the entry subclass matching ``data['format']``."""
        fmt = data.get('format')
        entry_cls = ManifestEntry._registry.get(fmt)
        if entry_cls is None:
            raise ValueError(f"Unknown manifest entry format: {fmt!r}")
        return entry_cls(
            original=data['original'],
            optimized=VariantSet.from_dict(Tier.FULL, data['optimized']),
            thumbnail=VariantSet.from_dict(Tier.THUMBNAIL, data['thumbnail']),
        )


class ImageEntry(ManifestEntry):
    """Static image: WebP plus JPEG fallback at both tiers."""
    format = 'image'
    encodings = ('webp', 'jpg')


class VideoEntry(ManifestEntry):
    """Animated image: a WebM rendition at both tiers."""
    format = 'webm'
    encodings = ('webm',)
