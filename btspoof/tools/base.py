"""Address provider interfaces."""

from __future__ import annotations

from typing import Protocol


class AddressProvider(Protocol):
    name: str
    executable: str

    def try_set(self, interface: str, address: str) -> bool:
        """Ask the tool to change the adapter address; True if it exited cleanly."""
