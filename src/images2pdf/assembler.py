"""Decode, resize and place images onto PDF pages in input order."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageOps

from .config import RunConfig
from .document import PdfDocument
from .errors import ImageDecodeError

_KEPT_MODES = ("1", "L", "RGB")

# Pillow reports corrupt or unsupported files through all of these.
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


@dataclass
class AssemblyResult:
    """Result of assembling images into a document."""

    document: PdfDocument
    successes: int = 0
    failures: int = 0
    failed_images: list[tuple[Path, ImageDecodeError]] = field(default_factory=list)


def load_image(path: Path) -> tuple[Image.Image, str | None]:
    """Fully decode the image at *path* and close the file.

    Returns:
        ``(image, format)`` where *format* is Pillow's name for the source
        format (e.g. ``"JPEG"``).

    Raises:
        ImageDecodeError: If the file is missing, unreadable or not an image.
    """
    try:
        with Image.open(path) as image:
            image.load()
            return image.copy(), image.format
    except _DECODE_ERRORS as exc:
        raise ImageDecodeError(path, exc) from exc


def _flatten(image: Image.Image) -> Image.Image:
    """Convert *image* to a mode that can be embedded without an alpha channel."""
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode in _KEPT_MODES:
        return image
    converted = image.convert("RGB")
    # the source profile describes the old colour space
    converted.info.pop("icc_profile", None)
    return converted


def fit_image(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """Shrink *image* to fit within ``max_width`` x ``max_height``.

    The aspect ratio is preserved and the LANCZOS filter is used. Images
    already inside the box keep their size. EXIF orientation is applied first
    and the result is converted to ``1``, ``L`` or ``RGB``.

    Always returns a new image; *image* is left untouched.
    """
    fitted = _flatten(ImageOps.exif_transpose(image))
    if fitted is image:
        fitted = image.copy()
    if fitted.width > max_width or fitted.height > max_height:
        fitted.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
    return fitted


def prepare_image(
    path: Path, max_width: int, max_height: int
) -> tuple[Image.Image, str | None]:
    """Load the image at *path* and fit it into the bounding box.

    Raises:
        ImageDecodeError: If the image cannot be decoded or resized.
    """
    image, image_format = load_image(path)
    try:
        return fit_image(image, max_width, max_height), image_format
    except _DECODE_ERRORS as exc:
        raise ImageDecodeError(path, exc) from exc
    finally:
        image.close()


def append_image_page(
    document: PdfDocument,
    path: Path,
    *,
    max_width: int,
    max_height: int,
) -> None:
    """Add one page to *document* holding the image at *path*.

    Nothing is appended when the image cannot be prepared.
    """
    image, image_format = prepare_image(path, max_width, max_height)
    try:
        document.add_page(image, image_format=image_format or "PNG")
    except _DECODE_ERRORS as exc:
        raise ImageDecodeError(path, exc) from exc
    finally:
        image.close()


def assemble_document(
    paths: Sequence[Path],
    config: RunConfig,
    *,
    on_image_done: Callable[[int, int], None] | None = None,
    on_image_failed: Callable[[Path, ImageDecodeError], None] | None = None,
) -> AssemblyResult:
    """Build a document with one page per image, in the order of *paths*.

    In strict mode the first :class:`ImageDecodeError` propagates. Otherwise
    failing images are reported through *on_image_failed*, recorded in the
    result and skipped. *on_image_done* is called with ``(index, total)``
    after every attempt.

    Args:
        paths: Ordered image paths.
        config: Run options (DPI, bounding box, title, strictness).
        on_image_done: Progress callback.
        on_image_failed: Callback for skipped images in tolerant mode.

    Returns:
        An :class:`AssemblyResult` holding the unwritten document.
    """
    document = PdfDocument(title=config.title, dpi=config.dpi)
    result = AssemblyResult(document=document)
    total = len(paths)

    for index, path in enumerate(paths, start=1):
        try:
            append_image_page(
                document,
                path,
                max_width=config.scale_width,
                max_height=config.scale_height,
            )
        except ImageDecodeError as exc:
            if config.strict:
                raise
            result.failures += 1
            result.failed_images.append((path, exc))
            if on_image_failed is not None:
                on_image_failed(path, exc)
        else:
            result.successes += 1
        finally:
            if on_image_done is not None:
                on_image_done(index, total)

    return result
