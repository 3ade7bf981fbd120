"""Controller operations used by the CLI and the public API."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from btspoof.core.agent import AdapterSequence, RuntimeAgent
from btspoof.core.backup import BackupStore
from btspoof.core.command import CommandRunner
from btspoof.core.config_loader import check_config, load_config, save_config
from btspoof.core.errors import (
    AdapterToolMissingError,
    ConfigError,
    InstallError,
    NoBackupError,
    PermissionDeniedError,
)
from btspoof.core.fs import atomic_write, remove_file, secure_directory
from btspoof.core.lock import InstallLock
from btspoof.core.model import (
    DEFAULT_INTERFACE,
    AgentReport,
    DryRunPlan,
    ExecutionMode,
    InstallationState,
    InstallSummary,
    Paths,
    RestoreResult,
    SpoofConfig,
    UninstallResult,
)
from btspoof.supervisor.systemd import SystemdSupervisor, render_unit
from btspoof.tools.hciconfig import HciAdapter
from btspoof.tools.providers import AddressSetter

LOGGER = logging.getLogger(__name__)

_LAUNCHER_TEMPLATE = """\
#!{python}
# bt-mac-spoof runtime agent (auto-generated by bt-mac-spoof install)
from btspoof.agent import main

main(["--config", {config!r}, "--backup-file", {backup!r}])
"""


def render_launcher(paths: Paths, python: str) -> str:
    return _LAUNCHER_TEMPLATE.format(
        python=python,
        config=str(paths.config),
        backup=str(paths.backup_file),
    )


def _euid_is_root() -> bool:
    return os.geteuid() == 0


class SpoofService:
    """Install, inspect, restore and remove the boot-time address spoof.

    Every public operation holds the install lock for its whole duration and
    recomputes what it needs from disk; nothing is cached between calls.
    """

    def __init__(
        self,
        *,
        paths: Paths | None = None,
        runner: CommandRunner | None = None,
        setter: AddressSetter | None = None,
        supervisor: SystemdSupervisor | None = None,
        is_root: Callable[[], bool] = _euid_is_root,
        python: str | None = None,
    ) -> None:
        self.paths = paths or Paths()
        self.runner = runner or CommandRunner()
        self.adapter = HciAdapter(self.runner)
        self.setter = setter or AddressSetter(self.runner)
        self.supervisor = supervisor or SystemdSupervisor(self.runner)
        self.backup = BackupStore(self.paths.backup_file)
        self._is_root = is_root
        self._python = python or sys.executable

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with InstallLock(self.paths.lock):
            yield

    def _require_root(self) -> None:
        if not self._is_root():
            raise PermissionDeniedError("This operation must be run as root (sudo)")

    def _configured(self) -> SpoofConfig | None:
        try:
            return load_config(self.paths.config)
        except ConfigError as exc:
            LOGGER.debug("%s", exc)
            return None

    def current_target(self) -> str | None:
        config = self._configured()
        return config.target_address if config else None

    def dry_run(self, target: str, interface: str = DEFAULT_INTERFACE) -> DryRunPlan:
        with self._exclusive():
            config = check_config(SpoofConfig(target_address=target, interface=interface))
            return DryRunPlan(
                target_address=config.target_address,
                interface=config.interface,
                paths=self.paths,
            )

    def install(self, target: str, interface: str = DEFAULT_INTERFACE) -> InstallSummary:
        with self._exclusive():
            self._require_root()
            config = check_config(SpoofConfig(target_address=target, interface=interface))
            if not self.adapter.available():
                raise AdapterToolMissingError("hciconfig not found (install package 'bluez')")

            secure_directory(self.paths.backup_dir)

            LOGGER.info("writing config -> %s", self.paths.config)
            save_config(self.paths.config, config)

            LOGGER.info("generating runtime agent -> %s", self.paths.agent)
            launcher = render_launcher(self.paths, self._python)
            try:
                compile(launcher, str(self.paths.agent), "exec")
            except SyntaxError as exc:
                raise InstallError(f"Generated agent {self.paths.agent} does not compile: {exc}") from exc
            atomic_write(self.paths.agent, launcher, mode=0o755)

            LOGGER.info("writing systemd unit -> %s", self.paths.unit)
            atomic_write(self.paths.unit, render_unit(self.paths.agent), mode=0o644)

            warnings: list[str] = []
            if not self.setter.available_providers():
                warnings.append(
                    "No address-setting tool found (bdaddr, btmgmt, bluemoon); "
                    "the unit is installed and will apply once one is available"
                )

            self.supervisor.daemon_reload()
            if not self.supervisor.enable_now():
                warnings.append(f"Could not enable {self.supervisor.unit_name}")
            if not self.supervisor.restart():
                warnings.append("Service run returned non-zero (check the journal)")

            return InstallSummary(
                backup_address=self.backup.read(),
                target_address=config.target_address,
                current_address=self.adapter.current_address(interface),
                enabled=self.supervisor.is_enabled(),
                active=self.supervisor.is_active(),
                warnings=tuple(warnings),
                journal=self.supervisor.journal(),
            )

    def apply(self) -> AgentReport:
        with self._exclusive():
            self._require_root()
            agent = RuntimeAgent(self.paths.config, self.backup, self.adapter, self.setter)
            return agent.run(ExecutionMode.STRICT)

    def status(self) -> InstallationState:
        with self._exclusive():
            config = self._configured()
            interface = config.interface if config else DEFAULT_INTERFACE
            return InstallationState(
                config_present=self.paths.config.is_file(),
                agent_present=self.paths.agent.is_file(),
                unit_present=self.paths.unit.is_file(),
                enabled=self.supervisor.is_enabled(),
                active=self.supervisor.is_active(),
                backup_address=self.backup.read(),
                target_address=config.target_address if config else None,
                current_address=self.adapter.current_address(interface),
            )

    def restore(self) -> RestoreResult:
        with self._exclusive():
            self._require_root()
            original = self.backup.read()
            if original is None:
                raise NoBackupError(f"No saved original address at {self.backup.path}")

            config = self._configured()
            interface = config.interface if config else DEFAULT_INTERFACE
            LOGGER.info("attempting best-effort restore of %s to %s", interface, original)
            outcome = AdapterSequence(self.adapter, self.setter).cycle(interface, original)

            return RestoreResult(
                backup_address=original,
                provider=outcome.set_result.provider,
                tool_succeeded=outcome.set_result.tool_succeeded,
                current_address=self.adapter.current_address(interface),
            )

    def uninstall(self, purge_backup: bool = False) -> UninstallResult:
        with self._exclusive():
            self._require_root()
            self.supervisor.stop()
            self.supervisor.disable()

            removed = [
                path
                for path in (self.paths.unit, self.paths.agent, self.paths.config)
                if remove_file(path)
            ]
            self.supervisor.daemon_reload()

            if purge_backup:
                if self.backup.remove():
                    removed.append(self.backup.path)
                LOGGER.info("removed saved original at %s", self.backup.path)
                return UninstallResult(removed=tuple(removed), backup_kept=None)

            kept = self.backup.path if self.backup.exists() else None
            return UninstallResult(removed=tuple(removed), backup_kept=kept)
