"""images2pdf: Merge a batch of images into a single PDF, one image per page."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .assembler import AssemblyResult, assemble_document
from .config import (
    DEFAULT_DPI,
    DEFAULT_SCALE_HEIGHT,
    DEFAULT_SCALE_WIDTH,
    RunConfig,
    resolve_output_path,
)
from .document import DocumentState, Page, PdfDocument, page_size_mm
from .errors import (
    ConfigError,
    DocumentFinalizedError,
    DocumentWriteError,
    EmptyDocumentError,
    ImageDecodeError,
    Images2PdfError,
    InputError,
)
from .inputs import resolve_inputs

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AssemblyResult",
    "ConfigError",
    "ConversionResult",
    "DocumentFinalizedError",
    "DocumentState",
    "DocumentWriteError",
    "EmptyDocumentError",
    "ImageDecodeError",
    "Images2PdfError",
    "InputError",
    "Page",
    "PdfDocument",
    "RunConfig",
    "assemble_document",
    "convert",
    "convert_images",
    "page_size_mm",
    "resolve_inputs",
    "resolve_output_path",
]


@dataclass
class ConversionResult:
    """Combined result of resolving, assembling and writing a PDF."""

    image_count: int
    successes: int
    failures: int
    failed_images: list[tuple[Path, ImageDecodeError]]
    total_bytes: int
    output_path: Path


def convert(
    config: RunConfig,
    *,
    on_start: Callable[[int], None] | None = None,
    on_image_done: Callable[[int, int], None] | None = None,
    on_image_failed: Callable[[Path, ImageDecodeError], None] | None = None,
) -> ConversionResult:
    """Run one conversion described by *config*.

    Args:
        config: Validated run options.
        on_start: Called with the number of resolved input paths.
        on_image_done: Called with ``(index, total)`` after each image.
        on_image_failed: Called for each image skipped in tolerant mode.

    Raises:
        InputError: If the input directory cannot be read.
        ImageDecodeError: In strict mode, for the first unreadable image.
        EmptyDocumentError: If no image could be placed.
        DocumentWriteError: If the PDF cannot be written.
    """
    paths = resolve_inputs(
        images=config.images,
        directory=config.directory,
        auto_sort=config.auto_sort,
    )
    if on_start is not None:
        on_start(len(paths))

    assembly = assemble_document(
        paths,
        config,
        on_image_done=on_image_done,
        on_image_failed=on_image_failed,
    )
    if not assembly.successes:
        raise EmptyDocumentError(
            f"No images could be converted ({len(paths)} input paths)"
        )

    total_bytes = assembly.document.write(config.output)

    return ConversionResult(
        image_count=len(paths),
        successes=assembly.successes,
        failures=assembly.failures,
        failed_images=assembly.failed_images,
        total_bytes=total_bytes,
        output_path=config.output,
    )


def convert_images(
    output: Path | str,
    images: Iterable[Path | str] | None = None,
    *,
    directory: Path | str | None = None,
    dpi: float = DEFAULT_DPI,
    scale_width: int = DEFAULT_SCALE_WIDTH,
    scale_height: int = DEFAULT_SCALE_HEIGHT,
    auto_sort: bool = False,
    title: str = "",
    strict: bool = False,
) -> ConversionResult:
    """Merge images into a single PDF, one image per page.

    This is the high-level convenience function that builds a
    :class:`RunConfig` and runs :func:`convert`.

    Args:
        output: Output PDF path. A missing or different suffix is replaced
            with ``.pdf``.
        images: Explicit image paths. Mutually exclusive with *directory*.
        directory: Directory whose files are converted.
        dpi: Resolution used to turn pixel sizes into page sizes.
        scale_width: Maximum image width in pixels.
        scale_height: Maximum image height in pixels.
        auto_sort: Sort input paths lexicographically.
        title: PDF title metadata.
        strict: Abort on the first unreadable image instead of skipping it.

    Returns:
        A :class:`ConversionResult` summarizing the outcome.

    Raises:
        ConfigError: If the options are invalid.

    Example::

        from images2pdf import convert_images

        result = convert_images("scans.pdf", directory="scans", auto_sort=True)
        print(f"Saved {result.successes} pages to {result.output_path}")
    """
    config = RunConfig(
        output=Path(output),
        images=tuple(Path(p) for p in images) if images is not None else None,
        directory=Path(directory) if directory is not None else None,
        dpi=dpi,
        scale_width=scale_width,
        scale_height=scale_height,
        auto_sort=auto_sort,
        title=title,
        strict=strict,
    )
    return convert(config)
