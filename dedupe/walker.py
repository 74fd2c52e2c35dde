"""
Directory traversal.

Walks one or more roots with an explicit, depth-tracked stack instead of
recursion. Directory symlinks are never followed, so cycles cannot occur.
Entries of every directory are visited in sorted name order which makes the
walk deterministic on an unchanged tree.
"""

import os
import stat
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple

from dedupe.models import FileEntry

ErrorCallback = Callable[[Path, OSError], None]


def ignore_error(path: Path, exc: OSError) -> None:
    return None


class DirectoryWalker:
    """
    Lazily yield a FileEntry for every regular file under the given roots.

    Args:
        roots: Directories to scan, reported paths keep the form given here.
        max_depth: 0 lists only the files directly inside each root, N also
            descends N levels of subdirectories.
        follow_file_symlinks: Report symlinks to files with their target's
            size. When False such links are skipped.
        on_error: Called with the path and the exception for anything that
            cannot be read. The path is skipped and the walk continues.
    """

    def __init__(
        self,
        roots: Iterable[Path],
        max_depth: int = 1,
        follow_file_symlinks: bool = True,
        on_error: Optional[ErrorCallback] = None,
    ):
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.roots = [Path(root) for root in roots]
        self.max_depth = max_depth
        self.follow_file_symlinks = follow_file_symlinks
        self.on_error = on_error or ignore_error
        self.roots_opened = 0
        self._seen: Set[str] = set()

    def __iter__(self) -> Iterator[FileEntry]:
        for root in self.roots:
            yield from self._walk_root(root)

    def _walk_root(self, root: Path) -> Iterator[FileEntry]:
        stack: List[Tuple[Path, int]] = [(root, 0)]
        while stack:
            directory, depth = stack.pop()
            entries = self._list_directory(directory)
            if entries is None:
                continue
            if depth == 0:
                self.roots_opened += 1

            subdirs: List[Path] = []
            for entry in entries:
                path = Path(entry.path)
                try:
                    if entry.is_dir(follow_symlinks=False):
                        if depth < self.max_depth:
                            subdirs.append(path)
                        continue
                    info = self._stat_file(entry)
                except OSError as exc:
                    self.on_error(path, exc)
                    continue
                if info is None:
                    continue

                key = os.path.abspath(path)
                if key in self._seen:
                    continue
                self._seen.add(key)
                yield FileEntry(path=path, size=info.st_size)

            # Reversed so the smallest name is popped first.
            for subdir in reversed(subdirs):
                stack.append((subdir, depth + 1))

    def _list_directory(self, directory: Path) -> Optional[List[os.DirEntry]]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            self.on_error(directory, exc)
            return None

    def _stat_file(self, entry: os.DirEntry) -> Optional[os.stat_result]:
        """Return the stat of a reportable file, None for anything else."""
        if entry.is_symlink():
            if not self.follow_file_symlinks:
                return None
            # Follows the link, raises for dangling links.
            info = entry.stat()
            if stat.S_ISDIR(info.st_mode):
                return None
        else:
            info = entry.stat(follow_symlinks=False)
        if not stat.S_ISREG(info.st_mode):
            return None
        return info
