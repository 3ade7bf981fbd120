from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from btspoof.core.command import CmdResult
from btspoof.core.model import Paths

ORIGINAL = "00:1A:7D:DA:71:13"
TARGET = "50:E0:85:65:80:00"
VENDOR = "43:45:C0:00:1F:AC"


class FakeRunner:
    """Simulated host: an hci0 adapter plus whichever tools are 'installed'."""

    def __init__(
        self,
        installed: Sequence[str] = ("hciconfig", "bdaddr", "btmgmt", "bluemoon", "systemctl", "journalctl"),
        *,
        address: str = ORIGINAL,
        failing: Sequence[str] = (),
    ) -> None:
        self.installed = set(installed)
        self.address = address
        self.failing = set(failing)
        self.calls: list[list[str]] = []

    def which(self, executable: str) -> str | None:
        return f"/usr/bin/{executable}" if executable in self.installed else None

    def run(self, argv: Sequence[str]) -> CmdResult | None:
        argv = list(argv)
        self.calls.append(argv)
        tool = argv[0]
        if tool not in self.installed:
            return None
        if tool in self.failing or " ".join(argv[:4]) in self.failing:
            return CmdResult(argv=argv, returncode=1, stdout="", stderr=f"{tool}: failed")

        stdout = ""
        if tool == "hciconfig" and len(argv) == 2:
            stdout = (
                f"{argv[1]}:\tType: Primary  Bus: USB\n"
                f"\tBD Address: {self.address}  ACL MTU: 310:10  SCO MTU: 64:8\n"
                "\tUP RUNNING\n"
            )
        elif tool == "bdaddr":
            self.address = argv[-1]
        elif tool == "btmgmt":
            self.address = argv[-1]
        elif tool == "bluemoon":
            self.address = VENDOR
        elif tool == "systemctl" and argv[1] == "is-enabled":
            stdout = "enabled\n"
        elif tool == "systemctl" and argv[1] == "is-active":
            stdout = "active\n"
        elif tool == "journalctl":
            stdout = "Oct 19 10:00:00 host set-bt-mac[1]: [bt-mac-spoof] INFO applied\n"
        return CmdResult(argv=argv, returncode=0, stdout=stdout, stderr="")

    def tool_calls(self, tool: str) -> list[list[str]]:
        return [c for c in self.calls if c[0] == tool]


@pytest.fixture
def paths(tmp_path: Path) -> Paths:
    return Paths(
        config=tmp_path / "etc" / "bt-mac-spoof.conf",
        agent=tmp_path / "bin" / "set-bt-mac",
        unit=tmp_path / "systemd" / "bt-mac-spoof.service",
        backup_dir=tmp_path / "lib" / "bt-mac-spoof",
        lock=tmp_path / "lock" / "install-bt-mac.lock",
    )
