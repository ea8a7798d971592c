"""
Manifest - Ordered list of produced assets, written as the gallery index.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .manifest_entry import ManifestEntry


ALL_YEARS = 'ALL'


@dataclass
class Manifest:
    """
    Ordered manifest of transcoded assets.

    Entry order is the batch processing order; the manifest never sorts.
    The serialized form is a bare JSON array of entries, fully replacing
    any previous file.

    Attributes:
        entries: Entries in processing order
    """
    entries: List[ManifestEntry] = field(default_factory=list)

    def add_entry(self, entry: ManifestEntry) -> None:
        """Append an entry. Entries are never updated in place."""
        self.entries.append(entry)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    @property
    def total_entries(self) -> int:
        return len(self.entries)

    @property
    def originals(self) -> List[str]:
        return [e.original for e in self.entries]

    def get_entry(self, original: str) -> Optional[ManifestEntry]:
        """Find the entry for an original path."""
        for entry in self.entries:
            if entry.original == original:
                return entry
        return None

    def count_by_format(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for entry in self.entries:
            counts[entry.format] = counts.get(entry.format, 0) + 1
        return counts

    def years(self) -> List[str]:
        """Distinct years found in original file names, newest first."""
        found = {e.year for e in self.entries if e.year}
        return sorted(found, key=int, reverse=True)

    def entries_for_year(self, year: str) -> Iterator[ManifestEntry]:
        """Yield entries whose original is prefixed with ``year`` ('ALL' yields everything)."""
        for entry in self.entries:
            if year == ALL_YEARS or entry.year == year:
                yield entry

    def verify(self, root: str) -> List[str]:
        """
        Check every referenced file exists under ``root``.

        Returns:
            Referenced paths that are missing on disk
        """
        base = Path(root)
        missing = []
        for entry in self.entries:
            for path in entry.paths():
                if not (base / path).is_file():
                    missing.append(path)
        return missing

    def to_list(self) -> List[dict]:
        """Convert to the serialized manifest shape."""
        return [entry.to_dict() for entry in self.entries]

    @classmethod
    def from_list(cls, data: list) -> 'Manifest':
        """Create from a list of entry dictionaries."""
        if not isinstance(data, list):
            raise ValueError("Manifest must be a JSON array")
        return cls(entries=[ManifestEntry.from_dict(item) for item in data if item])

    def save(self, filepath: str, logger: Optional[logging.Logger] = None) -> None:
        """
        Write the manifest to ``filepath``, replacing any previous file.

        The JSON is written to a temporary file in the same directory and
        moved into place, so readers never see a truncated manifest.
        """
        logger = logger or logging.getLogger(__name__)
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix='.tmp', dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self.to_list(), f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

        logger.info(f"Manifest saved: {path} ({len(self.entries)} entries)")

    @classmethod
    def load(cls, filepath: str) -> 'Manifest':
        """Load manifest from JSON file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_list(data)
