"""
Duplicate File Hunter
=====================

Finds files with identical content across directory trees and reports them
for review or for piping into other tools. Files are never modified.
"""

__version__ = "0.2.0"

from dedupe.exceptions import DedupeError, NoReadableRootError
from dedupe.models import DuplicateGroup, FileEntry, OutputMode, RunSummary, ScanConfig, ScanResult
from dedupe.scanner import find_duplicates

__all__ = [
    "DedupeError",
    "DuplicateGroup",
    "FileEntry",
    "NoReadableRootError",
    "OutputMode",
    "RunSummary",
    "ScanConfig",
    "ScanResult",
    "find_duplicates",
]
