"""
Command line interface.

Parses the arguments into a ScanConfig, runs the pipeline and prints the
report. The report is the only thing written to stdout; warnings, errors
and progress go to stderr.

``--output``, ``--human`` and ``--machine`` all set the same option and are
applied in command line order, so the last one given wins.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TextColumn

from dedupe import __version__
from dedupe.exceptions import DedupeError
from dedupe.models import OutputMode, ScanConfig, ScanResult
from dedupe.report import format_report, format_size, summary_text
from dedupe.scanner import find_duplicates

# Initialize Rich Consoles
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth {value!r}, expected an integer")
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid depth {value!r}, must not be negative")
    return number


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid job count {value!r}, expected an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"invalid job count {value!r}, must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dedupe",
        description="Find files with identical content in one or more directory trees.",
    )
    parser.add_argument(
        "directories",
        nargs="*",
        type=Path,
        metavar="DIRS",
        help="Directories to search (default: current directory)",
    )
    # --output must be registered before the shorthands so that its default
    # is the one argparse installs for the shared destination.
    parser.add_argument(
        "-o",
        "--output",
        choices=[mode.value for mode in OutputMode],
        default=OutputMode.HUMAN.value,
        help="Report format (default: human). The last of --output, --human "
        "and --machine wins.",
    )
    parser.add_argument(
        "--human",
        dest="output",
        action="store_const",
        const=OutputMode.HUMAN.value,
        help="Same as --output human",
    )
    parser.add_argument(
        "-m",
        "--machine",
        dest="output",
        action="store_const",
        const=OutputMode.MACHINE.value,
        help="Same as --output machine: print only the redundant paths",
    )
    parser.add_argument(
        "-d",
        "--max-depth",
        type=non_negative_int,
        default=1,
        metavar="N",
        help="Levels of subdirectories to descend, 0 scans only the given "
        "directories (default: 1)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=positive_int,
        default=1,
        metavar="N",
        help="Hash files with N worker threads, capped at the CPU count (default: 1)",
    )
    parser.add_argument(
        "--skip-file-symlinks",
        action="store_true",
        help="Ignore symlinks to files instead of comparing their targets",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print scan statistics to stderr"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> ScanConfig:
    return ScanConfig(
        roots=args.directories or [Path(".")],
        max_depth=args.max_depth,
        jobs=args.jobs,
        follow_file_symlinks=not args.skip_file_symlinks,
    )


def warn(path: Path, exc: OSError) -> None:
    reason = exc.strerror or str(exc)
    err_console.print(
        f"[yellow]Warning: cannot read '{escape(str(path))}': {escape(reason)}[/yellow]",
        soft_wrap=True,
    )


def scan(config: ScanConfig) -> ScanResult:
    """Run the pipeline with a progress bar on stderr while files are hashed."""
    with Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("({task.completed}/{task.total})"),
        console=err_console,
        transient=True,
        disable=not err_console.is_terminal,
    ) as progress:
        task = progress.add_task("Hashing candidates...", total=None, start=False)

        def on_hash_start(total: int) -> None:
            progress.update(task, total=total)
            progress.start_task(task)

        return find_duplicates(
            config,
            on_error=warn,
            on_progress=lambda entry: progress.advance(task),
            on_hash_start=on_hash_start,
        )


def print_report(result: ScanResult, mode: OutputMode) -> None:
    # Undecodable file names come back out as their original bytes.
    console.file.reconfigure(errors="surrogateescape")

    lines = list(format_report(result, mode))
    if mode is OutputMode.HUMAN:
        # The summary line is reprinted below with colours.
        lines.pop()
    for line in lines:
        console.out(line)
    if mode is OutputMode.HUMAN:
        console.print(summary_text(result.summary), soft_wrap=True)


def print_statistics(config: ScanConfig, result: ScanResult) -> None:
    summary = result.summary
    roots = ", ".join(str(root) for root in config.roots)
    err_console.print(
        f"[bold]Scanned:[/bold] {escape(roots)} (max depth {config.max_depth})", soft_wrap=True
    )
    err_console.print(
        f"{result.files_scanned} files found, {result.files_hashed} hashed, "
        f"{result.errors} unreadable."
    )
    err_console.print(
        f"[bold green]{len(result.groups)} groups of duplicates, "
        f"reclaimable space: {format_size(summary.wasted_bytes)}[/bold green]"
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        result = scan(config)
    except DedupeError as exc:
        err_console.print(f"[bold red]Error: {escape(str(exc))}[/bold red]", soft_wrap=True)
        return 1
    except KeyboardInterrupt:
        err_console.print("[bold red]Scan interrupted by user.[/bold red]", soft_wrap=True)
        return 1

    print_report(result, OutputMode(args.output))
    if args.verbose:
        print_statistics(config, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
