"""
Report rendering.

Both output modes are pure functions of a ScanResult so that the same scan
always renders to the same lines.
"""

from typing import Iterator, List, Tuple

from rich.text import Text

from dedupe.models import FileEntry, OutputMode, RunSummary, ScanResult

INDENT = "    "


def _content_groups(result: ScanResult) -> List[Tuple[FileEntry, List[FileEntry]]]:
    """Every distinct content as ``(canonical, duplicates)``, in path order."""
    groups = [(group.canonical, group.duplicates) for group in result.groups]
    groups.extend((entry, []) for entry in result.singletons)
    groups.sort(key=lambda group: group[0].abspath)
    return groups


def summary_text(summary: RunSummary) -> Text:
    """The closing line of the human report, unique and duplicate counts coloured."""
    return Text.assemble(
        "Unique files: ",
        (str(summary.unique_files), "green"),
        ". ",
        (str(summary.duplicate_files), "red"),
        f" files waste {summary.wasted_bytes} Bytes.",
    )


def format_summary(summary: RunSummary) -> str:
    return summary_text(summary).plain


def format_listing(result: ScanResult) -> Iterator[str]:
    """
    Yield the grouped listing of the human report, without the summary.

    Each distinct content starts with its canonical path, its duplicates
    follow on indented lines. Files without duplicates appear as a lone line.
    """
    for canonical, duplicates in _content_groups(result):
        yield str(canonical.path)
        for duplicate in duplicates:
            yield INDENT + str(duplicate.path)


def format_human(result: ScanResult) -> Iterator[str]:
    """Yield the human readable report, summary line last."""
    yield from format_listing(result)
    yield format_summary(result.summary)


def format_machine(result: ScanResult) -> Iterator[str]:
    """Yield only the duplicate paths, one per line, ready to be piped."""
    for group in result.groups:
        for duplicate in group.duplicates:
            yield str(duplicate.path)


def format_report(result: ScanResult, mode: OutputMode) -> Iterator[str]:
    if OutputMode(mode) is OutputMode.MACHINE:
        return format_machine(result)
    return format_human(result)


def format_size(size_bytes: int) -> str:
    """Format size in bytes to human readable string."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"
