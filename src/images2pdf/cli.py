"""Command-line interface for images2pdf."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TimeElapsedColumn,
)

from . import ConversionResult, __version__, convert
from .config import (
    DEFAULT_DPI,
    DEFAULT_SCALE_HEIGHT,
    DEFAULT_SCALE_WIDTH,
    RunConfig,
)
from .errors import ImageDecodeError, Images2PdfError


def _format_size(num_bytes: int) -> str:
    """Format a byte count as a human-readable string."""
    value = float(num_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if abs(value) < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def _float_value(name: str) -> Callable[[str], float]:
    def parse(value: str) -> float:
        try:
            return float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(
                f"Value <{name}> could not be parsed as a float"
            ) from None

    return parse


def _unsigned_value(name: str) -> Callable[[str], int]:
    def parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            number = None
        if number is None or number < 0:
            raise argparse.ArgumentTypeError(
                f"Value <{name}> could not be parsed as an unsigned integer"
            )
        return number

    return parse


def _build_parser() -> argparse.ArgumentParser:
    # -h is taken by --scale-height, so help is only available as --help.
    parser = argparse.ArgumentParser(
        prog="images2pdf",
        description="Merge multiple images into a single PDF, one image per page.",
        add_help=False,
    )
    parser.add_argument(
        "--help",
        action="help",
        help="Show this message and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d",
        "--dir",
        type=Path,
        default=None,
        help="Directory of images (mutually exclusive with --imgs)",
    )
    parser.add_argument(
        "-i",
        "--imgs",
        type=Path,
        nargs="+",
        default=None,
        help="Paths to multiple images separated with whitespace",
    )
    parser.add_argument(
        "-o",
        "--out",
        type=Path,
        required=True,
        help="Output PDF path (the .pdf extension is added if missing)",
    )
    parser.add_argument(
        "--dpi",
        type=_float_value("dpi"),
        default=DEFAULT_DPI,
        help=f"Resolution used for page size and image placement (default: {DEFAULT_DPI})",
    )
    parser.add_argument(
        "-w",
        "--scale-width",
        type=_unsigned_value("scale-width"),
        default=DEFAULT_SCALE_WIDTH,
        help=f"Maximum image width in pixels (default: {DEFAULT_SCALE_WIDTH})",
    )
    parser.add_argument(
        "-h",
        "--scale-height",
        type=_unsigned_value("scale-height"),
        default=DEFAULT_SCALE_HEIGHT,
        help=f"Maximum image height in pixels (default: {DEFAULT_SCALE_HEIGHT})",
    )
    parser.add_argument(
        "-s",
        "--auto-sort",
        action="store_true",
        default=False,
        help="Sort input paths lexicographically before converting",
    )
    parser.add_argument(
        "-t",
        "--pdf-title",
        default="",
        help="Title stored in the PDF metadata",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Abort on the first unreadable image instead of skipping it",
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        output=args.out,
        images=tuple(args.imgs) if args.imgs is not None else None,
        directory=args.dir,
        dpi=args.dpi,
        scale_width=args.scale_width,
        scale_height=args.scale_height,
        auto_sort=args.auto_sort,
        title=args.pdf_title,
        strict=args.strict,
    )


def _convert_with_progress(
    *,
    console: Console,
    err_console: Console,
    config: RunConfig,
) -> ConversionResult:
    """Run the conversion with a rich progress bar."""
    progress = Progress(
        SpinnerColumn(),
        "[progress.description]{task.description}",
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )
    task_ids = []

    def on_start(total: int) -> None:
        task_ids.append(progress.add_task(description="Adding pages", total=total))

    def on_image_done(index: int, total: int) -> None:
        progress.update(task_id=task_ids[0], completed=index)

    def on_image_failed(path: Path, error: ImageDecodeError) -> None:
        err_console.print(
            f"  [yellow]Warning:[/yellow] skipped {escape(str(path))}:"
            f" {escape(str(error.cause))}"
        )

    with progress:
        return convert(
            config,
            on_start=on_start,
            on_image_done=on_image_done,
            on_image_failed=on_image_failed,
        )


def _run(args: argparse.Namespace, *, console: Console, err_console: Console) -> None:
    config = _config_from_args(args)
    start_time = time.monotonic()

    result = _convert_with_progress(
        console=console,
        err_console=err_console,
        config=config,
    )

    elapsed = time.monotonic() - start_time

    summary_lines = [
        f"[bold]Pages written:[/bold] {result.successes}/{result.image_count}",
    ]
    if result.failures:
        summary_lines.append(f"[bold yellow]Skipped:[/bold yellow] {result.failures}")
        for path, _ in result.failed_images:
            summary_lines.append(f"  [yellow]- {escape(str(path))}[/yellow]")
    summary_lines.append(f"[bold]PDF size:[/bold] {_format_size(result.total_bytes)}")
    summary_lines.append(f"[bold]Output:[/bold] {escape(str(result.output_path))}")

    console.print(Panel(
        "\n".join(summary_lines),
        title=f"[bold green]Done in {elapsed:.1f}s[/bold green]",
        border_style="green" if not result.failures else "yellow",
    ))


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``images2pdf`` CLI command."""
    console = Console()
    err_console = Console(stderr=True)
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        _run(args, console=console, err_console=err_console)
    except Images2PdfError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[dim]Interrupted.[/dim]")
        sys.exit(130)
