"""Fatal errors raised by the duplicate detection engine.

Per-file problems are not exceptions: they are passed to the ``on_error``
callback and the offending path is skipped.
"""

from pathlib import Path
from typing import Sequence


class DedupeError(Exception):
    """Base class for errors that abort a run."""


class NoReadableRootError(DedupeError):
    """None of the requested root directories could be read."""

    def __init__(self, roots: Sequence[Path]):
        self.roots = list(roots)
        names = ", ".join(f"'{root}'" for root in self.roots)
        super().__init__(f"no readable directory among {names}")
