"""Entry point executed by systemd through the generated launcher."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from btspoof.core.agent import RuntimeAgent
from btspoof.core.backup import BackupStore
from btspoof.core.command import CommandRunner
from btspoof.core.errors import BtSpoofError
from btspoof.core.logging_utils import configure_logging
from btspoof.core.model import ExecutionMode, Paths
from btspoof.tools.hciconfig import HciAdapter
from btspoof.tools.providers import AddressSetter

LOGGER = logging.getLogger(__name__)

_DEFAULTS = Paths()

app = typer.Typer(add_completion=False, help="Apply the configured Bluetooth address once and exit")


def build_agent(config_path: Path, backup_path: Path, runner: CommandRunner | None = None) -> RuntimeAgent:
    runner = runner or CommandRunner()
    return RuntimeAgent(
        config_path,
        BackupStore(backup_path),
        HciAdapter(runner),
        AddressSetter(runner),
    )


@app.command()
def run(
    config: Path = typer.Option(_DEFAULTS.config, "--config", help="Spoof configuration file"),
    backup_file: Path = typer.Option(_DEFAULTS.backup_file, "--backup-file", help="Saved original address"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log tool output"),
) -> None:
    """Run the boot sequence; always exits 0 so boot is never marked failed."""
    configure_logging(logging.DEBUG if verbose else logging.INFO)
    try:
        report = build_agent(config, backup_file).run(ExecutionMode.BEST_EFFORT)
    except BtSpoofError as exc:
        LOGGER.error("%s", exc)
        return
    LOGGER.debug("finished in state %s via %s", report.state.value, " -> ".join(s.value for s in report.visited))


def main(argv: list[str] | None = None) -> None:
    app(args=argv, prog_name="bt-mac-spoof-agent")


if __name__ == "__main__":
    main()
