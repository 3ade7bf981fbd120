"""Subprocess boundary for the external Bluetooth and systemd tools."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class CommandRunner:
    """Run external tools, reporting failure through the result instead of raising.

    ``run`` returns None when the executable does not exist so callers can
    treat a missing tool the same way as a failed one.
    """

    def which(self, executable: str) -> str | None:
        return shutil.which(executable)

    def run(self, argv: Sequence[str]) -> CmdResult | None:
        argv_list = list(argv)
        LOGGER.info("CMD %s", _fmt_argv(argv_list))
        try:
            proc = subprocess.run(
                argv_list,
                check=False,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except FileNotFoundError:
            LOGGER.debug("executable not found: %s", argv_list[0])
            return None
        except OSError as exc:
            LOGGER.warning("could not run %s: %s", argv_list[0], exc)
            return None

        if proc.stdout:
            LOGGER.debug("STDOUT %s", proc.stdout.strip())
        if proc.stderr:
            LOGGER.debug("STDERR %s", proc.stderr.strip())
        return CmdResult(
            argv=argv_list,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
