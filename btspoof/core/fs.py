"""Atomic file replacement helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from btspoof.core.errors import InstallError


def atomic_write(path: Path, content: str, *, mode: int = 0o644) -> None:
    """Replace ``path`` with ``content`` so readers see the old or new file, never a mix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise InstallError(f"Could not write {path}: {exc}") from exc


def secure_directory(path: Path) -> None:
    try:
        path.mkdir(mode=0o700, parents=True, exist_ok=True)
        os.chmod(path, 0o700)
    except OSError as exc:
        raise InstallError(f"Could not prepare {path}: {exc}") from exc


def remove_file(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise InstallError(f"Could not remove {path}: {exc}") from exc
    return True
