"""Data model shared by the duplicate detection pipeline."""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Sequence


class OutputMode(str, Enum):
    """Report flavour selected on the command line."""

    HUMAN = "human"
    MACHINE = "machine"


@dataclass(frozen=True)
class FileEntry:
    """A regular file discovered by the walker.

    ``path`` is the path as it will be reported: the root as given joined
    with the names below it. ``digest`` stays ``None`` until the file has
    been fingerprinted.
    """

    path: Path
    size: int
    digest: Optional[bytes] = None

    @property
    def abspath(self) -> str:
        """Absolute path without symlink resolution, used for ordering."""
        return os.path.abspath(self.path)

    def with_digest(self, digest: bytes) -> "FileEntry":
        return replace(self, digest=digest)


@dataclass
class DuplicateGroup:
    """Files sharing size and digest.

    The canonical member is the one with the smallest absolute path, every
    other member is a duplicate.
    """

    size: int
    digest: bytes
    canonical: FileEntry
    duplicates: List[FileEntry]

    @property
    def members(self) -> Iterator[FileEntry]:
        yield self.canonical
        yield from self.duplicates

    @property
    def wasted_bytes(self) -> int:
        return self.size * len(self.duplicates)


@dataclass(frozen=True)
class RunSummary:
    unique_files: int = 0
    duplicate_files: int = 0
    wasted_bytes: int = 0


@dataclass
class ScanResult:
    """Everything the report needs from one run."""

    groups: List[DuplicateGroup] = field(default_factory=list)
    singletons: List[FileEntry] = field(default_factory=list)
    files_scanned: int = 0
    files_hashed: int = 0
    errors: int = 0

    @property
    def summary(self) -> RunSummary:
        return RunSummary(
            unique_files=len(self.groups) + len(self.singletons),
            duplicate_files=sum(len(g.duplicates) for g in self.groups),
            wasted_bytes=sum(g.wasted_bytes for g in self.groups),
        )


@dataclass
class ScanConfig:
    """Run configuration built by the command line layer."""

    roots: Sequence[Path] = field(default_factory=lambda: [Path(".")])
    max_depth: int = 1
    jobs: int = 1
    follow_file_symlinks: bool = True

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {self.jobs}")
        self.roots = [Path(root) for root in self.roots]
