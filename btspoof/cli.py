"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from btspoof.core.errors import BtSpoofError
from btspoof.core.logging_utils import configure_logging
from btspoof.core.model import DEFAULT_ADDRESS, DEFAULT_INTERFACE
from btspoof.core.service import SpoofService

app = typer.Typer(help="Persistent boot-time spoof of a Bluetooth adapter address")


def _info(message: str) -> None:
    typer.echo(f"{typer.style('[+]', fg=typer.colors.BLUE)} {message}")


def _ok(message: str) -> None:
    typer.echo(f"{typer.style('[✓]', fg=typer.colors.GREEN)} {message}")


def _warn(message: str) -> None:
    typer.echo(f"{typer.style('[!]', fg=typer.colors.YELLOW)} {message}", err=True)


def _fail(exc: BtSpoofError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


def _build_service() -> SpoofService:
    return SpoofService()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every tool invocation")) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command("install")
def install(
    mac: str | None = typer.Option(None, "--mac", help="Target address, AA:BB:CC:DD:EE:FF"),
    interface: str = typer.Option(DEFAULT_INTERFACE, "--interface", help="Adapter to act on"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Ask for the address and confirmation"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without changing anything"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation in interactive mode"),
) -> None:
    """Write the config, agent and systemd unit, then apply the address now."""
    try:
        service = _build_service()
        if interactive:
            default = service.current_target() or DEFAULT_ADDRESS
            mac = typer.prompt("Target MAC", default=default)
            if not yes:
                typer.confirm(f"Spoof {interface} as {mac} at every boot?", abort=True)
        if not mac:
            typer.echo("Error: no target MAC given; use --mac or --interactive", err=True)
            raise typer.Exit(code=1)

        if dry_run:
            plan = service.dry_run(mac, interface)
            _info("DRY RUN: would create/ensure the following (no changes):")
            typer.echo(f" - config: {plan.paths.config}  (target_address={plan.target_address}, interface={plan.interface})")
            typer.echo(f" - runtime agent: {plan.paths.agent}")
            typer.echo(f" - systemd unit: {plan.paths.unit}")
            typer.echo(f" - saved original: {plan.paths.backup_file} (created on first apply)")
            return

        summary = service.install(mac, interface)
    except BtSpoofError as exc:
        raise _fail(exc) from None

    for warning in summary.warnings:
        _warn(warning)
    typer.echo("===== bt-mac-spoof summary =====")
    typer.echo(f"Saved original : {summary.backup_address or '(unknown)'}")
    typer.echo(f"Target MAC     : {summary.target_address}")
    if summary.applied:
        typer.echo(f"Current MAC    : {summary.current_address} (applied)")
    else:
        typer.echo(f"Current MAC    : {summary.current_address or '(unknown)'} (expected {summary.target_address})")
    typer.echo(f"Service enabled: {summary.enabled}")
    typer.echo(f"Service active : {summary.active}")
    if summary.journal:
        typer.echo(f"Recent journal ({len(summary.journal)} lines):")
        for line in summary.journal:
            typer.echo(line)
    typer.echo("================================")
    _ok("Install complete. To uninstall: sudo bt-mac-spoof uninstall")


@app.command("status")
def status() -> None:
    """Show what is installed and the adapter's current address."""
    try:
        state = _build_service().status()
    except BtSpoofError as exc:
        raise _fail(exc) from None

    def present(flag: bool) -> str:
        return "exists" if flag else "missing"

    typer.echo("bt-mac-spoof status")
    typer.echo(f" Service   : {state.enabled} / {state.active}")
    typer.echo(f" Config    : {present(state.config_present)} (target {state.target_address or '-'})")
    typer.echo(f" Agent     : {present(state.agent_present)}")
    typer.echo(f" Unit      : {present(state.unit_present)}")
    typer.echo(f" Saved orig: {state.backup_address or '(not saved)'}")
    typer.echo(f" Current   : {state.current_address or '(unknown)'}")


@app.command("apply")
def apply() -> None:
    """Apply the configured address now, failing on mismatch."""
    try:
        report = _build_service().apply()
    except BtSpoofError as exc:
        raise _fail(exc) from None
    _ok(f"Applied {report.target_address} via {report.provider}")


@app.command("restore")
def restore() -> None:
    """Best-effort restore of the saved original address."""
    try:
        result = _build_service().restore()
    except BtSpoofError as exc:
        raise _fail(exc) from None

    if result.provider is None:
        _warn("No tool available to restore automatically; manual steps may be needed")
    elif not result.tool_succeeded:
        _warn(f"{result.provider} restore failed")
    _ok(f"Restore to {result.backup_address} attempted; current MAC: {result.current_address or '(unknown)'}")


@app.command("uninstall")
def uninstall(
    purge_backup: bool = typer.Option(
        False, "--purge-backup", help="Also delete the saved original address"
    ),
) -> None:
    """Remove the unit, agent and config. The saved original is kept by default."""
    try:
        result = _build_service().uninstall(purge_backup=purge_backup)
    except BtSpoofError as exc:
        raise _fail(exc) from None

    for path in result.removed:
        _info(f"Removed {path}")
    if result.backup_kept is not None:
        _ok(f"Uninstalled (original MAC kept at {result.backup_kept} unless you delete it)")
    else:
        _ok("Uninstalled")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
