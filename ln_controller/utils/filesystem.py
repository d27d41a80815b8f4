"""File system helpers for preparing the work directory."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Mapping

from ln_common.logging import TRACE

logger = logging.getLogger(__name__)


def ensure_directory_exists(path: Path) -> None:
    if path.exists():
        logger.log(TRACE, "Directory already exists: %s", path)
        return
    path.mkdir(parents=True, exist_ok=True)
    logger.log(TRACE, "Directory created: %s", path)


def copy_file(src: Path, dest: Path) -> None:
    ensure_directory_exists(dest.parent)
    shutil.copyfile(src, dest)
    logger.log(TRACE, "Copied file: %s", dest)


def copy_directory_contents(src_dir: Path, dest_dir: Path) -> None:
    ensure_directory_exists(dest_dir)
    for entry in sorted(src_dir.iterdir()):
        target = dest_dir / entry.name
        if entry.is_dir():
            copy_directory_contents(entry, target)
        else:
            copy_file(entry, target)


def copy_path(src: Path, dest: Path) -> None:
    """Copy a file or a directory tree; missing sources are skipped."""
    if not src.exists():
        return
    if src.is_dir():
        copy_directory_contents(src, dest)
    else:
        copy_file(src, dest)


def copy_paths(paths: Mapping[Path, Path]) -> None:
    for src, dest in paths.items():
        copy_path(src, dest)


def platform_app_data_path(name: str) -> Path:
    """Return the per-user application data directory for *name*."""
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / name
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA") or str(home / "AppData" / "Local")
        return Path(base) / name
    base = os.environ.get("XDG_DATA_HOME") or str(home / ".local" / "share")
    return Path(base) / name
