"""Run configuration for a single conversion."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError

DEFAULT_DPI = 100.0
DEFAULT_SCALE_WIDTH = 720
DEFAULT_SCALE_HEIGHT = 1280


def validate_dpi(dpi: float) -> float:
    """Return *dpi* as a float, or raise :class:`ConfigError` if unusable."""
    try:
        value = float(dpi)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"DPI must be a number, got {dpi!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"DPI must be a positive finite number, got {dpi!r}")
    return value


def resolve_output_path(output: Path | str) -> Path:
    """Resolve the output PDF file path.

    Rules:
        - Ends in ``.pdf`` (any case) → used as is
        - Any other suffix → replaced with ``.pdf``
        - No suffix → ``.pdf`` appended
    """
    output = Path(output)
    if output.name in ("", ".", ".."):
        raise ConfigError(f"Output path has no file name: {output}")
    if output.suffix.lower() != ".pdf":
        output = output.with_suffix(".pdf")
    return output.resolve()


@dataclass(frozen=True)
class RunConfig:
    """Options for one conversion, validated on construction.

    Exactly one of *images* and *directory* must be given.
    """

    output: Path
    images: tuple[Path, ...] | None = None
    directory: Path | None = None
    dpi: float = DEFAULT_DPI
    scale_width: int = DEFAULT_SCALE_WIDTH
    scale_height: int = DEFAULT_SCALE_HEIGHT
    auto_sort: bool = False
    title: str = ""
    strict: bool = False

    def __post_init__(self) -> None:
        if self.images is not None and self.directory is not None:
            raise ConfigError(
                "Pass either a list of images or a directory, not both"
            )
        if self.images is None and self.directory is None:
            raise ConfigError("Pass either a list of images or a directory")

        if self.images is not None:
            object.__setattr__(
                self, "images", tuple(Path(p) for p in self.images)
            )
        if self.directory is not None:
            object.__setattr__(self, "directory", Path(self.directory))

        object.__setattr__(self, "dpi", validate_dpi(self.dpi))
        for name in ("scale_width", "scale_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(
                    f"{name} must be a positive integer, got {value!r}"
                )
        object.__setattr__(self, "output", resolve_output_path(self.output))
        object.__setattr__(self, "title", self.title or "")
