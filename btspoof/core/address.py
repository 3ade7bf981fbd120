"""Hardware address grammar and normalisation."""

from __future__ import annotations

import re

from btspoof.core.errors import InvalidAddressError

_ADDRESS_RE = re.compile(r"^[0-9A-F]{2}(?::[0-9A-F]{2}){5}$", re.IGNORECASE)


def is_valid_address(value: str) -> bool:
    return bool(_ADDRESS_RE.fullmatch(value))


def normalize_address(value: str) -> str:
    """Return the canonical uppercase form of ``value``.

    Raises InvalidAddressError if ``value`` (after trimming surrounding
    whitespace) is not six colon-separated hex octets.
    """
    candidate = value.strip()
    if not is_valid_address(candidate):
        raise InvalidAddressError(
            f"Invalid address '{value}': expected six colon-separated hex octets like AA:BB:CC:DD:EE:FF"
        )
    return candidate.upper()


def same_address(left: str | None, right: str | None) -> bool:
    if not left or not right:
        return False
    if not is_valid_address(left.strip()) or not is_valid_address(right.strip()):
        return False
    return left.strip().upper() == right.strip().upper()
