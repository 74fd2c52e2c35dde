"""Pass 1: group files by size."""

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from dedupe.models import FileEntry


def bucket_by_size(
    entries: Iterable[FileEntry],
) -> Tuple[Dict[int, List[FileEntry]], List[FileEntry]]:
    """
    Group files by their exact size.

    Args:
        entries: Files in walk order.

    Returns:
        A pair ``(buckets, singletons)``. ``buckets`` maps a size to the files
        of that size, for sizes shared by at least two files, in walk order.
        ``singletons`` holds the files whose size is unique. Those cannot have
        a duplicate and never need hashing.
    """
    files_by_size: Dict[int, List[FileEntry]] = defaultdict(list)
    for entry in entries:
        files_by_size[entry.size].append(entry)

    buckets = {size: files for size, files in files_by_size.items() if len(files) > 1}
    singletons = [files[0] for files in files_by_size.values() if len(files) == 1]
    return buckets, singletons
