"""Static asset emission for the registry backend to embed.

The backend binary embeds a directory of web assets and serves it for
every path that is not an API or Markdown endpoint. :func:`build_assets`
produces that directory from the assets packaged with skillhub
(``skillhub/web/``).
"""

from __future__ import annotations

import shutil
from importlib import resources
from pathlib import Path
from typing import Optional

from skillhub.exceptions import InvalidUsageError
from skillhub.models import BuildConfig


def _empty_dir(path: Path) -> None:
    resolved = path.resolve()
    if resolved in (Path.cwd().resolve(), Path.home().resolve(), Path(resolved.anchor)):
        raise InvalidUsageError(f"Refusing to empty {resolved}; pick a dedicated out_dir")
    for child in resolved.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def build_assets(config: BuildConfig, source: Optional[Path] = None) -> list[Path]:
    """Copy the web assets into ``config.out_dir``.

    Args:
        config: Output directory and whether to empty it first.
        source: Asset directory to copy. Defaults to the packaged assets.

    Returns:
        Paths of the emitted files, relative to ``out_dir``, sorted.

    Raises:
        InvalidUsageError: If ``out_dir`` exists as a file, or emptying it
            would wipe the working directory, home or filesystem root.
    """
    out_dir = Path(config.out_dir)
    if out_dir.exists() and not out_dir.is_dir():
        raise InvalidUsageError(f"Build output {out_dir} exists and is not a directory")

    if out_dir.is_dir() and config.empty_out_dir:
        _empty_dir(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if source is not None:
        shutil.copytree(source, out_dir, dirs_exist_ok=True)
    else:
        with resources.as_file(resources.files("skillhub") / "web") as packaged:
            shutil.copytree(packaged, out_dir, dirs_exist_ok=True)

    return sorted(p.relative_to(out_dir) for p in out_dir.rglob("*") if p.is_file())
