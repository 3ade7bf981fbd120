"""Adapter power control and address query through hciconfig."""

from __future__ import annotations

import logging
import re

from btspoof.core.command import CommandRunner

LOGGER = logging.getLogger(__name__)

HCICONFIG = "hciconfig"
_BD_ADDRESS_RE = re.compile(r"BD Address:\s*([0-9A-F]{2}(?::[0-9A-F]{2}){5})", re.IGNORECASE)


def parse_bd_address(output: str) -> str | None:
    for line in output.splitlines():
        match = _BD_ADDRESS_RE.search(line)
        if match:
            return match.group(1).upper()
    return None


class HciAdapter:
    """Thin wrapper over ``hciconfig <iface> [up|down]``.

    Failures are logged and reported as False/None; nothing here raises for a
    tool error.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def available(self) -> bool:
        return self.runner.which(HCICONFIG) is not None

    def down(self, interface: str) -> bool:
        return self._power(interface, "down")

    def up(self, interface: str) -> bool:
        return self._power(interface, "up")

    def current_address(self, interface: str) -> str | None:
        result = self.runner.run([HCICONFIG, interface])
        if result is None:
            LOGGER.warning("%s not found; cannot read address of %s", HCICONFIG, interface)
            return None
        if not result.ok:
            LOGGER.warning("%s %s failed (%d): %s", HCICONFIG, interface, result.returncode, result.stderr.strip())
            return None
        address = parse_bd_address(result.stdout)
        if address is None:
            LOGGER.warning("no BD Address in %s output for %s", HCICONFIG, interface)
        return address

    def _power(self, interface: str, state: str) -> bool:
        result = self.runner.run([HCICONFIG, interface, state])
        if result is None:
            LOGGER.warning("%s not found; could not bring %s %s", HCICONFIG, interface, state)
            return False
        if not result.ok:
            LOGGER.warning("bringing %s %s failed (%d)", interface, state, result.returncode)
            return False
        return True
