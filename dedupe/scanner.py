"""
Duplicate detection pipeline.

Walk → bucket by size → hash → group. Every stage hands its output to the
next one, nothing is kept between runs.
"""

from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from dedupe.bucketer import bucket_by_size
from dedupe.exceptions import NoReadableRootError
from dedupe.grouper import group_duplicates
from dedupe.hasher import ContentHasher, ProgressCallback
from dedupe.models import FileEntry, ScanConfig, ScanResult
from dedupe.walker import DirectoryWalker, ErrorCallback, ignore_error


def find_duplicates(
    config: ScanConfig,
    on_error: Optional[ErrorCallback] = None,
    on_progress: Optional[ProgressCallback] = None,
    on_hash_start: Optional[Callable[[int], None]] = None,
    hasher: Optional[ContentHasher] = None,
) -> ScanResult:
    """
    Find files with identical content under the configured roots.

    Args:
        config: Roots, depth and worker settings.
        on_error: Receives every non-fatal traversal or read error.
        on_progress: Called once per hashed file.
        on_hash_start: Called with the number of files about to be hashed.
        hasher: Fingerprinting strategy, SHA-256 with ``config.jobs`` workers
            by default.

    Returns:
        ScanResult with the duplicate groups and the unique files.

    Raises:
        NoReadableRootError: None of the roots could be listed.
    """
    report_error = on_error or ignore_error
    counters = {"scanned": 0, "errors": 0}

    def count_error(path: Path, exc: OSError) -> None:
        counters["errors"] += 1
        report_error(path, exc)

    def count_files(entries: Iterable[FileEntry]) -> Iterator[FileEntry]:
        for entry in entries:
            counters["scanned"] += 1
            yield entry

    walker = DirectoryWalker(
        config.roots,
        max_depth=config.max_depth,
        follow_file_symlinks=config.follow_file_symlinks,
        on_error=count_error,
    )
    buckets, size_singletons = bucket_by_size(count_files(walker))
    if walker.roots_opened == 0:
        raise NoReadableRootError(config.roots)

    candidates = [entry for files in buckets.values() for entry in files]
    if on_hash_start is not None:
        on_hash_start(len(candidates))

    hasher = hasher or ContentHasher(jobs=config.jobs)
    hashed = hasher.hash_entries(candidates, on_error=count_error, on_progress=on_progress)
    groups, hash_singletons = group_duplicates(hashed)

    singletons = sorted(size_singletons + hash_singletons, key=lambda entry: entry.abspath)
    return ScanResult(
        groups=groups,
        singletons=singletons,
        files_scanned=counters["scanned"],
        files_hashed=len(hashed),
        errors=counters["errors"],
    )
