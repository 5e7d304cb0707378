"""Exceptions raised by images2pdf."""

from __future__ import annotations

from pathlib import Path


class Images2PdfError(Exception):
    """Base exception for images2pdf errors."""


class ConfigError(Images2PdfError):
    """Raised when run options are missing, conflicting, or out of range."""


class InputError(Images2PdfError):
    """Raised when the input directory cannot be listed."""


class ImageDecodeError(Images2PdfError):
    """Raised when an image file cannot be read, decoded, or resized."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not decode image {path}: {cause}")


class EmptyDocumentError(Images2PdfError):
    """Raised when there are no pages to write."""


class DocumentWriteError(Images2PdfError):
    """Raised when the assembled PDF cannot be written to disk."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write PDF {path}: {cause}")


class DocumentFinalizedError(Images2PdfError):
    """Raised when a document is modified or written after it was saved."""
