"""Pass 3: turn fingerprinted files into duplicate groups."""

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from dedupe.models import DuplicateGroup, FileEntry


def group_duplicates(
    entries: Iterable[FileEntry],
) -> Tuple[List[DuplicateGroup], List[FileEntry]]:
    """
    Group hashed files by ``(size, digest)``.

    The canonical file of a group is the member with the lexicographically
    smallest absolute path; the others are its duplicates, also in path
    order. Groups come back ordered by their canonical path. A key matched by
    a single file (possible when its siblings failed to hash) is not a
    duplicate group and is returned among the singletons instead.

    Args:
        entries: Files with a digest.

    Returns:
        A pair ``(groups, singletons)``.
    """
    by_content: Dict[Tuple[int, bytes], List[FileEntry]] = defaultdict(list)
    for entry in entries:
        if entry.digest is None:
            raise ValueError(f"{entry.path} has not been hashed")
        by_content[(entry.size, entry.digest)].append(entry)

    groups: List[DuplicateGroup] = []
    singletons: List[FileEntry] = []
    for (size, digest), members in by_content.items():
        members.sort(key=lambda entry: entry.abspath)
        if len(members) == 1:
            singletons.append(members[0])
            continue
        groups.append(
            DuplicateGroup(
                size=size,
                digest=digest,
                canonical=members[0],
                duplicates=members[1:],
            )
        )

    groups.sort(key=lambda group: group.canonical.abspath)
    singletons.sort(key=lambda entry: entry.abspath)
    return groups, singletons
