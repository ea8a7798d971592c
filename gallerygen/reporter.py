"""
Reporter - Human-readable reports from a gallery manifest.
"""

import logging
import sys
from typing import List, Optional, TextIO

from .manifest import ALL_YEARS, Manifest
from .manifest_entry import public_url


class Reporter:
    """
    Generates human-readable reports from manifest data.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def report_summary(self, manifest: Manifest) -> None:
        """Totals by format and by year."""
        self._print("=" * 70)
        self._print("GALLERY MANIFEST SUMMARY")
        self._print("=" * 70)
        self._print()

        counts = manifest.count_by_format()
        self._print("Overall Statistics:")
        self._print(f"  Total Items:   {manifest.total_entries:,}")
        self._print(f"  Images:        {counts.get('image', 0):,}")
        self._print(f"  Animations:    {counts.get('webm', 0):,}")
        self._print()

        years = manifest.years()
        undated = sum(1 for e in manifest if not e.year)
        self._print("By Year:")
        self._print("-" * 70)
        self._print(f"{'Year':<20} {'Items':>10}")
        self._print("-" * 70)
        for year in years:
            count = sum(1 for _ in manifest.entries_for_year(year))
            self._print(f"{year:<20} {count:>10,}")
        if undated:
            self._print(f"{'(no year)':<20} {undated:>10,}")
        self._print("-" * 70)
        self._print()

    def report_year(
        self,
        manifest: Manifest,
        year: str = ALL_YEARS,
        base_url: Optional[str] = None
    ) -> None:
        """List the items of one year (or all), in manifest order."""
        label = "All years" if year == ALL_YEARS else year
        self._print("=" * 70)
        self._print(f"GALLERY ITEMS: {label}")
        self._print("=" * 70)
        self._print()

        count = 0
        for entry in manifest.entries_for_year(year):
            count += 1
            target = public_url(base_url, entry.original) if base_url else entry.original
            self._print(f"  [{entry.format}] {target}")

        self._print()
        self._print(f"Total: {count:,}")
        self._print()

    def report_missing_files(self, manifest: Manifest, missing: List[str]) -> None:
        """List referenced files that are missing on disk."""
        self._print("=" * 70)
        self._print("MANIFEST VERIFICATION")
        self._print("=" * 70)
        self._print()

        if not missing:
            self._print(f"✓ All {manifest.total_entries:,} entries reference existing files")
            self._print()
            return

        for path in missing:
            self._print(f"  MISSING {path}")
        self._print()
        self._print(f"Total missing: {len(missing):,}")
        self._print()
