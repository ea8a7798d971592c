"""
StagedOutputs - Write variants beside their final names, commit them together.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple


class StagedOutputs:
    """
    Tracks staging files for one transcoding step.

    Each output is written to a hidden ``.<name>.partial`` file in the
    target directory. ``commit()`` renames every staged file into place;
    ``discard()`` removes whatever was staged. Final names are never
    touched until the whole step has succeeded.
    """

    SUFFIX = '.partial'

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._pending: List[Tuple[Path, Path]] = []

    def stage(self, final_path: Path) -> Path:
        """Reserve a staging path for ``final_path`` and return it."""
        final_path = Path(final_path)
        final_path.parent.mkdir(parents=True, exist_ok=True)
        staged = final_path.with_name(f".{final_path.name}{self.SUFFIX}")
        self._pending.append((staged, final_path))
        return staged

    def commit(self) -> List[Path]:
        """Move every staged file to its final path."""
        for staged, final in self._pending:
            if not staged.is_file():
                raise FileNotFoundError(f"Staged output missing: {staged}")
        committed = []
        for staged, final in self._pending:
            os.replace(staged, final)
            committed.append(final)
        self._pending = []
        return committed

    def discard(self) -> None:
        """Remove staged files that were written."""
        for staged, _ in self._pending:
            try:
                staged.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                self.logger.warning(f"Could not remove partial output {staged}: {e}")
        self._pending = []

    def __enter__(self) -> 'StagedOutputs':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None or self._pending:
            self.discard()
