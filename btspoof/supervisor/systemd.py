"""systemd unit rendering and systemctl/journalctl calls."""

from __future__ import annotations

import logging
from pathlib import Path

from btspoof.core.command import CommandRunner
from btspoof.core.model import UNIT_NAME

LOGGER = logging.getLogger(__name__)

JOURNAL_LINES = 30

_UNIT_TEMPLATE = """\
[Unit]
Description=Apply Bluetooth MAC spoof at boot
After=bluetooth.service
Wants=bluetooth.service

[Service]
Type=oneshot
ExecStart={exec_start}
RemainAfterExit=yes

[Install]
WantedBy=multi-user.target
"""


def render_unit(exec_start: Path) -> str:
    return _UNIT_TEMPLATE.format(exec_start=exec_start)


class SystemdSupervisor:
    def __init__(self, runner: CommandRunner, unit_name: str = UNIT_NAME) -> None:
        self.runner = runner
        self.unit_name = unit_name

    def daemon_reload(self) -> bool:
        return self._systemctl("daemon-reload")

    def enable_now(self) -> bool:
        return self._systemctl("enable", "--now", self.unit_name)

    def restart(self) -> bool:
        return self._systemctl("restart", self.unit_name)

    def stop(self) -> bool:
        return self._systemctl("stop", self.unit_name)

    def disable(self) -> bool:
        return self._systemctl("disable", self.unit_name)

    def is_enabled(self) -> str:
        return self._query("is-enabled", fallback="disabled")

    def is_active(self) -> str:
        return self._query("is-active", fallback="inactive")

    def journal(self, lines: int = JOURNAL_LINES) -> tuple[str, ...]:
        result = self.runner.run(["journalctl", "-u", self.unit_name, "-n", str(lines), "--no-pager"])
        if result is None or not result.ok:
            return ()
        return tuple(result.stdout.splitlines())

    def _systemctl(self, *args: str) -> bool:
        result = self.runner.run(["systemctl", *args])
        if result is None:
            LOGGER.warning("systemctl not found; skipped 'systemctl %s'", " ".join(args))
            return False
        if not result.ok:
            LOGGER.warning("systemctl %s failed (%d): %s", " ".join(args), result.returncode, result.stderr.strip())
            return False
        return True

    def _query(self, verb: str, *, fallback: str) -> str:
        # is-enabled/is-active exit non-zero for "disabled"/"inactive" but still print the state.
        result = self.runner.run(["systemctl", verb, self.unit_name])
        if result is None:
            return fallback
        text = result.stdout.strip()
        return text or fallback
