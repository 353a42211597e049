"""Tests for static asset emission."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillhub.build import build_assets
from skillhub.exceptions import InvalidUsageError
from skillhub.models import BuildConfig


class TestBuildAssets:
    def test_packaged_assets(self, tmp_path: Path) -> None:
        out = tmp_path / "web_dist"
        files = build_assets(BuildConfig(out_dir=str(out)))

        assert Path("index.html") in files
        assert Path("assets/app.js") in files
        assert Path("assets/style.css") in files
        assert files == sorted(files)
        assert "/api/v1" in (out / "assets" / "app.js").read_text()

    def test_custom_source(self, tmp_path: Path) -> None:
        source = tmp_path / "src"
        (source / "img").mkdir(parents=True)
        (source / "index.html").write_text("<html></html>")
        (source / "img" / "logo.svg").write_text("<svg/>")

        files = build_assets(BuildConfig(out_dir=str(tmp_path / "out")), source=source)

        assert files == [Path("img/logo.svg"), Path("index.html")]

    def test_empties_out_dir(self, tmp_path: Path) -> None:
        out = tmp_path / "out"
        (out / "old").mkdir(parents=True)
        (out / "old" / "stale.js").write_text("stale")
        (out / "stale.txt").write_text("stale")

        build_assets(BuildConfig(out_dir=str(out)))

        assert not (out / "stale.txt").exists()
        assert not (out / "old").exists()
        assert (out / "index.html").is_file()

    def test_keeps_existing_when_not_emptying(self, tmp_path: Path) -> None:
        out = tmp_path / "out"
        out.mkdir()
        (out / "keep.txt").write_text("keep")

        files = build_assets(BuildConfig(out_dir=str(out), empty_out_dir=False))

        assert Path("keep.txt") in files
        assert (out / "keep.txt").read_text() == "keep"

    def test_out_dir_is_a_file(self, tmp_path: Path) -> None:
        target = tmp_path / "web_dist"
        target.write_text("not a dir")

        with pytest.raises(InvalidUsageError, match="not a directory"):
            build_assets(BuildConfig(out_dir=str(target)))

    def test_refuses_to_empty_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "important.txt").write_text("precious")

        with pytest.raises(InvalidUsageError, match="Refusing"):
            build_assets(BuildConfig(out_dir="."))

        assert (tmp_path / "important.txt").exists()

    def test_relative_out_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        build_assets(BuildConfig())
        assert (tmp_path / "web_dist" / "index.html").is_file()
