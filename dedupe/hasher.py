"""
Pass 2: content fingerprints.

Only files that share their size with another file are hashed. Hashing is
the expensive step, so it optionally runs in a bounded thread pool. Results
are always returned sorted by absolute path, whatever the completion order.
"""

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from dedupe.models import FileEntry
from dedupe.walker import ErrorCallback, ignore_error

CHUNK_SIZE = 65536

ProgressCallback = Callable[[FileEntry], None]


def max_workers(jobs: int) -> int:
    """Bound the requested worker count by the number of CPUs."""
    return max(1, min(jobs, os.cpu_count() or 1))


class ContentHasher:
    """
    Streams files through a digest.

    Args:
        digest_factory: Callable returning a fresh object with ``update`` and
            ``digest`` methods. Defaults to SHA-256.
        chunk_size: Bytes read per call, keeps memory flat for large files.
        jobs: Worker threads used by :meth:`hash_entries`.
    """

    def __init__(
        self,
        digest_factory: Callable = hashlib.sha256,
        chunk_size: int = CHUNK_SIZE,
        jobs: int = 1,
    ):
        self.digest_factory = digest_factory
        self.chunk_size = chunk_size
        self.jobs = max_workers(jobs)

    def fingerprint(self, path: Path) -> bytes:
        """Return the digest of the file content. Raises OSError on read errors."""
        hasher = self.digest_factory()
        with open(path, "rb") as f:
            while chunk := f.read(self.chunk_size):
                hasher.update(chunk)
        return hasher.digest()

    def hash_entries(
        self,
        entries: Iterable[FileEntry],
        on_error: Optional[ErrorCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[FileEntry]:
        """
        Fingerprint every entry.

        Args:
            entries: Files to hash.
            on_error: Called for files that cannot be read. They are left out
                of the result.
            on_progress: Called once per processed file, failed or not.

        Returns:
            Hashed copies of the readable entries, sorted by absolute path.
        """
        on_error = on_error or ignore_error
        entries = list(entries)
        hashed: List[FileEntry] = []

        def collect(entry: FileEntry, digest: Optional[bytes], exc: Optional[OSError]):
            if exc is not None:
                on_error(entry.path, exc)
            else:
                hashed.append(entry.with_digest(digest))
            if on_progress is not None:
                on_progress(entry)

        if self.jobs == 1 or len(entries) < 2:
            for entry in entries:
                try:
                    digest = self.fingerprint(entry.path)
                except OSError as exc:
                    collect(entry, None, exc)
                else:
                    collect(entry, digest, None)
        else:
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                futures = {
                    executor.submit(self.fingerprint, entry.path): entry
                    for entry in entries
                }
                for future in as_completed(futures):
                    entry = futures[future]
                    try:
                        digest = future.result()
                    except OSError as exc:
                        collect(entry, None, exc)
                    else:
                        collect(entry, digest, None)

        hashed.sort(key=lambda entry: entry.abspath)
        return hashed
