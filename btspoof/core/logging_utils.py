"""Root logger setup shared by the CLI and the boot agent."""

from __future__ import annotations

import logging

LOG_PREFIX = "[bt-mac-spoof]"


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr with the tool prefix.

    Under systemd stderr goes to the journal, so the agent needs nothing else.
    Calling this again only adjusts the level.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_btspoof_configured", False):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f"{LOG_PREFIX} %(levelname)s %(message)s"))
    root.addHandler(handler)
    setattr(root, "_btspoof_configured", True)
