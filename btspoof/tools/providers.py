"""The three address-setting tools and the priority policy over them."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from btspoof.core.command import CommandRunner
from btspoof.core.model import SetOutcome, SetResult
from btspoof.tools.base import AddressProvider

LOGGER = logging.getLogger(__name__)


class BdaddrProvider:
    """``bdaddr -i <iface> <addr>``: sets exactly the requested address."""

    name = "bdaddr"
    executable = "bdaddr"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def try_set(self, interface: str, address: str) -> bool:
        result = self.runner.run([self.executable, "-i", interface, address])
        return result is not None and result.ok


class BtmgmtProvider:
    """``btmgmt`` management tool; static-addr first, public-addr if that is rejected."""

    name = "btmgmt"
    executable = "btmgmt"
    sub_operations = ("static-addr", "public-addr")

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def try_set(self, interface: str, address: str) -> bool:
        for operation in self.sub_operations:
            result = self.runner.run([self.executable, "-i", interface, operation, address])
            if result is not None and result.ok:
                return True
            LOGGER.debug("btmgmt %s rejected for %s", operation, interface)
        return False


class BluemoonProvider:
    """Broadcom ``bluemoon -A``; applies the vendor-configured address, ignoring ours."""

    name = "bluemoon"
    executable = "bluemoon"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def try_set(self, interface: str, address: str) -> bool:
        result = self.runner.run([self.executable, "-A"])
        return result is not None and result.ok


def default_providers(runner: CommandRunner) -> list[AddressProvider]:
    # Most explicit control over the resulting address first.
    return [BdaddrProvider(runner), BtmgmtProvider(runner), BluemoonProvider(runner)]


class AddressSetter:
    """Pick the first *installed* provider and ask it to set the address.

    Selection stops at the first tool present on the system, not the first
    that succeeds; the caller verifies the resulting address.
    """

    def __init__(
        self,
        runner: CommandRunner,
        providers: Sequence[AddressProvider] | None = None,
    ) -> None:
        self.runner = runner
        self.providers = list(providers) if providers is not None else default_providers(runner)

    def available_providers(self) -> list[str]:
        return [p.name for p in self.providers if self.runner.which(p.executable) is not None]

    def select(self) -> AddressProvider | None:
        for provider in self.providers:
            if self.runner.which(provider.executable) is not None:
                return provider
        return None

    def set_address(self, interface: str, address: str) -> SetResult:
        provider = self.select()
        if provider is None:
            LOGGER.warning("no tool to set the address (tried %s)", ", ".join(p.name for p in self.providers))
            return SetResult(outcome=SetOutcome.UNAVAILABLE)

        LOGGER.info("setting %s to %s with %s", interface, address, provider.name)
        succeeded = provider.try_set(interface, address)
        if not succeeded:
            LOGGER.warning("%s failed to set %s on %s", provider.name, address, interface)
        return SetResult(outcome=SetOutcome.APPLIED, provider=provider.name, tool_succeeded=succeeded)
