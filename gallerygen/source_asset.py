"""
SourceAsset - A raw media file discovered under the source root.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AssetKind(str, Enum):
    """Processing kind, decided purely by file extension."""
    STATIC = 'static'
    ANIMATED = 'animated'


STATIC_EXTENSIONS = frozenset({'.jpg', '.jpeg', '.png', '.webp'})
ANIMATED_EXTENSIONS = frozenset({'.gif'})


def classify(filename: str) -> Optional[AssetKind]:
    """
    Classify a file by its extension (case-insensitive).

    Returns:
        AssetKind, or None when the extension is not on the allow-list
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext in STATIC_EXTENSIONS:
        return AssetKind.STATIC
    if ext in ANIMATED_EXTENSIONS:
        return AssetKind.ANIMATED
    return None


@dataclass(frozen=True)
class SourceAsset:
    """
    A raw media file scheduled for transcoding.

    Attributes:
        path: Project-relative path with forward slashes (e.g. 'images/cat.png')
        kind: Static raster image or animated image
    """
    path: str
    kind: AssetKind

    @classmethod
    def from_path(cls, path: str) -> Optional['SourceAsset']:
        """Create an asset for a project-relative path, or None if unsupported."""
        kind = classify(path)
        if kind is None:
            return None
        return cls(path=path.replace('\\', '/'), kind=kind)

    @property
    def filename(self) -> str:
        return self.path.rsplit('/', 1)[-1]

    @property
    def extension(self) -> str:
        """Lower-cased extension including the dot."""
        return os.path.splitext(self.filename)[1].lower()

    @property
    def stem(self) -> str:
        """Base name without extension; output files are named after it."""
        return os.path.splitext(self.filename)[0]

    @property
    def is_animated(self) -> bool:
        return self.kind is AssetKind.ANIMATED
