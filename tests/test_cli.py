"""Tests for the respimage CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from respimage.cli import EXIT_DATAERR, main


@pytest.fixture
def config_file(tmp_path: Path, webroot: Path) -> Path:
    path = tmp_path / "respimage.yaml"
    path.write_text(
        f"""
aliases:
  "@webroot": "{webroot}"
  "@web": ""
presets:
  card:
    srcPath: "@webroot/img"
    width: 80
    height: 40
    breakpointMin: 992
  mobile:
    srcPath: "@webroot/img"
    targetExtension: jpg
    width: 50
    breakpointMax: 991
"""
    )
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def invoke(runner: CliRunner, config_file: Path, *args: str):
    return runner.invoke(main, ["--config", str(config_file), *args])


class TestGenerateCommand:
    """Tests for `respimage generate`."""

    def test_generate_all(
        self, runner: CliRunner, config_file: Path, webroot: Path, make_image: Callable[..., Path]
    ) -> None:
        make_image(webroot / "img" / "a.jpg")

        result = invoke(runner, config_file, "generate")

        assert result.exit_code == 0, result.output
        assert (webroot / "thumbnails" / "card" / "a.jpg").exists()
        assert (webroot / "thumbnails" / "mobile" / "a.jpg").exists()

    def test_generate_one(
        self, runner: CliRunner, config_file: Path, webroot: Path, make_image: Callable[..., Path]
    ) -> None:
        make_image(webroot / "img" / "a.jpg")

        result = invoke(runner, config_file, "generate", "card")

        assert result.exit_code == 0, result.output
        assert not (webroot / "thumbnails" / "mobile" / "a.jpg").exists()

    def test_unknown_preset(self, runner: CliRunner, config_file: Path) -> None:
        result = invoke(runner, config_file, "generate", "nope")

        assert result.exit_code == EXIT_DATAERR
        assert "Aborting." in result.output

    def test_failures_exit_nonzero(
        self, runner: CliRunner, config_file: Path, webroot: Path, make_image: Callable[..., Path]
    ) -> None:
        make_image(webroot / "img" / "a.jpg")
        (webroot / "img" / "broken.png").write_text("garbage")

        result = invoke(runner, config_file, "generate", "card")

        assert result.exit_code == 1
        assert (webroot / "thumbnails" / "card" / "a.jpg").exists()


class TestFlushCommand:
    """Tests for `respimage flush`."""

    def test_flush_with_yes(
        self, runner: CliRunner, config_file: Path, webroot: Path, make_image: Callable[..., Path]
    ) -> None:
        make_image(webroot / "img" / "a.jpg")
        invoke(runner, config_file, "generate")

        result = invoke(runner, config_file, "flush", "--yes")

        assert result.exit_code == 0, result.output
        assert not (webroot / "thumbnails" / "card" / "a.jpg").exists()
        assert (webroot / "img" / "a.jpg").exists()

    def test_flush_cancelled(
        self, runner: CliRunner, config_file: Path, webroot: Path, make_image: Callable[..., Path]
    ) -> None:
        make_image(webroot / "img" / "a.jpg")
        invoke(runner, config_file, "generate")

        result = runner.invoke(main, ["--config", str(config_file), "flush"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert (webroot / "thumbnails" / "card" / "a.jpg").exists()

    def test_flush_unknown_preset(self, runner: CliRunner, config_file: Path) -> None:
        result = invoke(runner, config_file, "flush", "nope", "--yes")
        assert result.exit_code == EXIT_DATAERR


class TestOtherCommands:
    """Tests for `presets` and `thumbnail`."""

    def test_presets(self, runner: CliRunner, config_file: Path) -> None:
        result = invoke(runner, config_file, "presets")

        assert result.exit_code == 0, result.output
        assert "card" in result.output
        assert "mobile" in result.output

    def test_thumbnail(
        self, runner: CliRunner, config_file: Path, webroot: Path, make_image: Callable[..., Path]
    ) -> None:
        make_image(webroot / "img" / "photo.png")

        result = invoke(runner, config_file, "thumbnail", "@webroot/img/photo.png", "mobile")

        assert result.exit_code == 0, result.output
        assert "/thumbnails/mobile/photo.jpg?v=" in result.output

    def test_thumbnail_missing_source(self, runner: CliRunner, config_file: Path) -> None:
        result = invoke(runner, config_file, "thumbnail", "@webroot/img/none.png", "card")
        assert result.exit_code == 1

    def test_missing_config(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["--config", str(tmp_path / "nope.yaml"), "presets"])
        assert result.exit_code == 1

    @pytest.mark.parametrize(
        "content",
        ["presets:\n  card: null\n", "cacheDuration: [1\n"],
    )
    def test_invalid_config(self, runner: CliRunner, tmp_path: Path, content: str) -> None:
        path = tmp_path / "respimage.yaml"
        path.write_text(content)

        result = runner.invoke(main, ["--config", str(path), "presets"])

        assert result.exit_code == 1
        assert "Invalid config file" in result.output
