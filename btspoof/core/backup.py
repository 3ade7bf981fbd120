"""Write-once store for the adapter's original hardware address."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from btspoof.core.address import is_valid_address, normalize_address
from btspoof.core.errors import InstallError
from btspoof.core.fs import remove_file, secure_directory
from btspoof.core.model import BackupWrite

LOGGER = logging.getLogger(__name__)


class BackupStore:
    """The saved original address, one line of text in a root-only directory.

    The record is never overwritten once it exists: a spoofed address read on a
    later boot must not replace the factory one.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str | None:
        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("could not read saved original %s: %s", self.path, exc)
            return None
        if not is_valid_address(content):
            LOGGER.warning("saved original in %s is not a valid address: %r", self.path, content)
            return None
        return content.upper()

    def write_if_absent(self, address: str) -> BackupWrite:
        value = normalize_address(address)
        secure_directory(self.path.parent)

        # os.link refuses to replace an existing name, so the record appears
        # complete or not at all and a second writer can never clobber it.
        fd, tmp_name = tempfile.mkstemp(prefix=".orig_mac.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value + "\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, 0o600)
            try:
                os.link(tmp_name, self.path)
            except FileExistsError:
                LOGGER.debug("original already saved at %s", self.path)
                return BackupWrite.ALREADY_PRESENT
        except OSError as exc:
            raise InstallError(f"Could not save original address to {self.path}: {exc}") from exc
        finally:
            Path(tmp_name).unlink(missing_ok=True)

        LOGGER.info("saved original %s", value)
        return BackupWrite.WRITTEN

    def remove(self) -> bool:
        return remove_file(self.path)
