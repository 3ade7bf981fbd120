"""Runtime agent: the down, set, up, verify sequence run at boot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from btspoof.core.address import same_address
from btspoof.core.backup import BackupStore
from btspoof.core.config_loader import load_config
from btspoof.core.errors import (
    ConfigError,
    InstallError,
    NoCapabilityProviderError,
    VerificationMismatchError,
)
from btspoof.core.model import (
    AgentReport,
    AgentState,
    BackupWrite,
    ExecutionMode,
    SequenceResult,
    SetOutcome,
)
from btspoof.tools.hciconfig import HciAdapter
from btspoof.tools.providers import AddressSetter

LOGGER = logging.getLogger(__name__)


class AdapterSequence:
    """Take the adapter down, set the address, bring it back up.

    Every step is attempted as far as possible: a failed ``down`` does not stop
    the set, and ``up`` runs whatever the set did, so the adapter is never left
    powered off by this sequence.
    """

    def __init__(self, adapter: HciAdapter, setter: AddressSetter) -> None:
        self.adapter = adapter
        self.setter = setter

    def cycle(
        self,
        interface: str,
        address: str,
        on_state: Callable[[AgentState], None] | None = None,
    ) -> SequenceResult:
        advance = on_state or (lambda state: None)

        LOGGER.info("bringing %s down", interface)
        went_down = self.adapter.down(interface)
        if not went_down:
            LOGGER.warning("could not bring %s down; trying to set the address anyway", interface)
        advance(AgentState.ADAPTER_DOWN)

        set_result = self.setter.set_address(interface, address)
        advance(AgentState.ADDRESS_SET_ATTEMPTED)

        LOGGER.info("bringing %s up", interface)
        came_up = self.adapter.up(interface)
        if not came_up:
            LOGGER.warning("could not bring %s up", interface)
        if set_result.outcome is SetOutcome.APPLIED:
            advance(AgentState.ADAPTER_UP)

        return SequenceResult(set_result=set_result, adapter_down=went_down, adapter_up=came_up)


class RuntimeAgent:
    def __init__(
        self,
        config_path: Path,
        backup: BackupStore,
        adapter: HciAdapter,
        setter: AddressSetter,
    ) -> None:
        self.config_path = config_path
        self.backup = backup
        self.adapter = adapter
        self.sequence = AdapterSequence(adapter, setter)

    def run(self, mode: ExecutionMode = ExecutionMode.BEST_EFFORT) -> AgentReport:
        """Apply the configured address and report the terminal state.

        In best-effort mode every outcome is returned in the report. In strict
        mode a bad config, a missing tool or a mismatch raises after the
        adapter has been brought back up.
        """
        report = AgentReport()

        try:
            config = load_config(self.config_path)
        except ConfigError as exc:
            LOGGER.error("%s; abort", exc)
            report.reason = str(exc)
            report.advance(AgentState.ABORTED)
            if mode is ExecutionMode.STRICT:
                raise
            return report
        report.target_address = config.target_address
        report.advance(AgentState.CONFIG_LOADED)

        report.backup_written = self._ensure_backup(config.interface)
        report.advance(AgentState.BACKUP_ENSURED)

        outcome = self.sequence.cycle(config.interface, config.target_address, report.advance)
        report.provider = outcome.set_result.provider

        if outcome.set_result.outcome is SetOutcome.UNAVAILABLE:
            report.reason = "no tool to set the address (install bdaddr, btmgmt or bluemoon)"
            LOGGER.error("%s; %s brought back up and exiting", report.reason, config.interface)
            report.advance(AgentState.ABORTED)
            if mode is ExecutionMode.STRICT:
                raise NoCapabilityProviderError(report.reason)
            return report

        report.observed_address = self.adapter.current_address(config.interface)
        report.advance(AgentState.VERIFIED)

        if same_address(report.observed_address, config.target_address):
            LOGGER.info("applied %s", config.target_address)
            report.advance(AgentState.APPLIED)
            return report

        report.reason = f"apply mismatch: current={report.observed_address} expected={config.target_address}"
        LOGGER.warning("%s", report.reason)
        report.advance(AgentState.MISMATCH)
        if mode is ExecutionMode.STRICT:
            raise VerificationMismatchError(report.reason)
        return report

    def _ensure_backup(self, interface: str) -> bool:
        if self.backup.exists():
            return False
        original = self.adapter.current_address(interface)
        if original is None:
            LOGGER.warning("could not read the current address of %s; continuing without a backup", interface)
            return False
        try:
            written = self.backup.write_if_absent(original)
        except InstallError as exc:
            LOGGER.warning("%s; continuing without a backup", exc)
            return False
        return written is BackupWrite.WRITTEN
