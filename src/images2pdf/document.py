"""In-memory PDF document built one image page at a time."""

from __future__ import annotations

import enum
import io
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import img2pdf
from PIL import Image

from .config import validate_dpi
from .errors import DocumentFinalizedError, DocumentWriteError, EmptyDocumentError

MM_PER_INCH = 25.4

_JPEG_QUALITY = 95


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def page_size_mm(width_px: int, height_px: int, dpi: float) -> tuple[float, float]:
    """Physical page size in millimetres for an image of the given pixel size.

    Both axes use the same conversion: ``pixels * 25.4 / dpi``.

    Raises:
        ConfigError: If *dpi* is not a positive finite number.
    """
    dpi = validate_dpi(dpi)
    return width_px * MM_PER_INCH / dpi, height_px * MM_PER_INCH / dpi


class DocumentState(enum.Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class Page:
    """A single page holding exactly one encoded image."""

    width_px: int
    height_px: int
    width_mm: float
    height_mm: float
    dpi: float
    image_format: str
    data: bytes


def _encode_image(image: Image.Image, image_format: str) -> tuple[str, bytes]:
    """Encode *image* for embedding, as JPEG when possible for JPEG sources."""
    buffer = io.BytesIO()
    if image_format == "JPEG" and image.mode in ("RGB", "L"):
        image.save(
            buffer,
            format="JPEG",
            quality=_JPEG_QUALITY,
            icc_profile=image.info.get("icc_profile"),
        )
        return "JPEG", buffer.getvalue()
    image.save(buffer, format="PNG")
    return "PNG", buffer.getvalue()


class PdfDocument:
    """An ordered, append-only collection of image pages.

    The document moves from ``EMPTY`` to ``ACCUMULATING`` on the first
    :meth:`add_page` and to ``FINALIZED`` after a successful :meth:`write`.
    A finalized document cannot be changed or written again.
    """

    def __init__(self, *, title: str = "", dpi: float) -> None:
        self.title = title
        self.dpi = validate_dpi(dpi)
        self._pages: list[Page] = []
        self._state = DocumentState.EMPTY

    @property
    def state(self) -> DocumentState:
        return self._state

    @property
    def pages(self) -> tuple[Page, ...]:
        return tuple(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def _ensure_not_finalized(self) -> None:
        if self._state is DocumentState.FINALIZED:
            raise DocumentFinalizedError("Document has already been written")

    def add_page(self, image: Image.Image, *, image_format: str = "PNG") -> Page:
        """Append a page sized to *image* at the document DPI.

        The image fills the page with no cropping or offset. It is encoded
        before the page is appended, so a failure leaves the document as it
        was.
        """
        self._ensure_not_finalized()

        width_px, height_px = image.size
        width_mm, height_mm = page_size_mm(width_px, height_px, self.dpi)
        stored_format, data = _encode_image(image, image_format)

        page = Page(
            width_px=width_px,
            height_px=height_px,
            width_mm=width_mm,
            height_mm=height_mm,
            dpi=self.dpi,
            image_format=stored_format,
            data=data,
        )
        self._pages.append(page)
        self._state = DocumentState.ACCUMULATING
        return page

    def _layout(
        self, imgwidthpx: int, imgheightpx: int, ndpi: tuple[float, float]
    ) -> tuple[float, float, float, float]:
        """img2pdf layout function that sizes pages through :func:`page_size_mm`."""
        width_mm, height_mm = page_size_mm(imgwidthpx, imgheightpx, self.dpi)
        width = img2pdf.mm_to_pt(width_mm)
        height = img2pdf.mm_to_pt(height_mm)
        return width, height, width, height

    def to_bytes(self) -> bytes:
        """Serialise all pages into a PDF."""
        if not self._pages:
            raise EmptyDocumentError("No pages to write")

        metadata = {"title": self.title} if self.title else {}
        return img2pdf.convert(
            [page.data for page in self._pages],
            layout_fun=self._layout,
            **metadata,
        )

    def write(self, output_path: Path) -> int:
        """Write the document to *output_path* and finalize it.

        The PDF is written to a temporary file next to *output_path* and
        moved into place, so the destination never holds a partial file.

        Returns:
            Size of the written PDF in bytes.

        Raises:
            EmptyDocumentError: If the document has no pages.
            DocumentWriteError: If the PDF cannot be produced or stored.
            DocumentFinalizedError: If the document was already written.
        """
        self._ensure_not_finalized()

        try:
            pdf_bytes = self.to_bytes()
        except (img2pdf.ImageOpenError, img2pdf.PdfTooLargeError) as exc:
            raise DocumentWriteError(output_path, exc) from exc

        tmp_name = None
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".images2pdf_", suffix=".pdf", dir=output_path.parent
            )
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(pdf_bytes)
            os.chmod(tmp_name, _default_file_mode())
            os.replace(tmp_name, output_path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise DocumentWriteError(output_path, exc) from exc

        self._state = DocumentState.FINALIZED
        return len(pdf_bytes)
