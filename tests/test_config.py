"""Unit tests for run configuration and output path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from images2pdf.config import RunConfig, resolve_output_path, validate_dpi
from images2pdf.errors import ConfigError


class TestResolveOutputPath:
    def test_pdf_suffix_kept(self, tmp_path: Path):
        result = resolve_output_path(tmp_path / "custom.pdf")
        assert result == (tmp_path / "custom.pdf").resolve()

    def test_pdf_suffix_case_insensitive(self, tmp_path: Path):
        result = resolve_output_path(str(tmp_path / "custom.PDF"))
        assert result == (tmp_path / "custom.PDF").resolve()

    def test_missing_suffix_appended(self, tmp_path: Path):
        result = resolve_output_path(tmp_path / "album")
        assert result == (tmp_path / "album.pdf").resolve()

    def test_other_suffix_replaced(self, tmp_path: Path):
        result = resolve_output_path(tmp_path / "album.txt")
        assert result == (tmp_path / "album.pdf").resolve()

    def test_string_output_converted_to_absolute_path(self):
        result = resolve_output_path("some/dir/out")
        assert result.name == "out.pdf"
        assert result.is_absolute()


    @pytest.mark.parametrize("output", ["..", ".", "some/dir/.."])
    def test_dot_names_rejected(self, output):
        with pytest.raises(ConfigError, match="no file name"):
            resolve_output_path(output)


class TestValidateDpi:
    @pytest.mark.parametrize("dpi", [1, 72, 96.0, 100.0, 0.5, "150"])
    def test_accepts_positive_numbers(self, dpi):
        assert validate_dpi(dpi) == float(dpi)

    @pytest.mark.parametrize("dpi", [0, 0.0, -1, -72.5, float("inf"), float("nan")])
    def test_rejects_non_positive_or_non_finite(self, dpi):
        with pytest.raises(ConfigError, match="positive finite"):
            validate_dpi(dpi)

    def test_rejects_non_numbers(self):
        with pytest.raises(ConfigError, match="must be a number"):
            validate_dpi("fast")


class TestRunConfig:
    def test_defaults(self, tmp_path: Path):
        config = RunConfig(output=tmp_path / "out", images=("a.png",))

        assert config.dpi == 100.0
        assert (config.scale_width, config.scale_height) == (720, 1280)
        assert config.auto_sort is False
        assert config.strict is False
        assert config.title == ""
        assert config.output == (tmp_path / "out.pdf").resolve()
        assert config.images == (Path("a.png"),)

    def test_images_and_directory_are_exclusive(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not both"):
            RunConfig(output=tmp_path / "o.pdf", images=("a.png",), directory=tmp_path)

    def test_one_source_required(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            RunConfig(output=tmp_path / "o.pdf")

    @pytest.mark.parametrize("dpi", [0, -10.0])
    def test_bad_dpi(self, tmp_path: Path, dpi):
        with pytest.raises(ConfigError):
            RunConfig(output=tmp_path / "o.pdf", directory=tmp_path, dpi=dpi)

    @pytest.mark.parametrize("field", ["scale_width", "scale_height"])
    @pytest.mark.parametrize("value", [0, -1, 1.5, True])
    def test_bad_scale_box(self, tmp_path: Path, field, value):
        with pytest.raises(ConfigError, match=field):
            RunConfig(output=tmp_path / "o.pdf", directory=tmp_path, **{field: value})

    def test_is_immutable(self, tmp_path: Path):
        config = RunConfig(output=tmp_path / "o.pdf", directory=tmp_path)

        with pytest.raises(AttributeError):
            config.dpi = 50.0

    def test_none_title_becomes_empty(self, tmp_path: Path):
        config = RunConfig(output=tmp_path / "o.pdf", directory=tmp_path, title=None)
        assert config.title == ""
