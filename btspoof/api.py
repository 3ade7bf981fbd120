"""Stable public API for scripting bt-mac-spoof.

Callers that want the controller operations without the CLI should import from
here rather than from ``btspoof.core``.
"""

from __future__ import annotations

from btspoof.core.address import is_valid_address, normalize_address
from btspoof.core.errors import (
    AdapterToolMissingError,
    BtSpoofError,
    ConcurrentOperationError,
    ConfigError,
    InstallError,
    InvalidAddressError,
    NoBackupError,
    NoCapabilityProviderError,
    PermissionDeniedError,
    VerificationMismatchError,
)
from btspoof.core.model import (
    DEFAULT_INTERFACE,
    AgentReport,
    AgentState,
    DryRunPlan,
    InstallationState,
    InstallSummary,
    Paths,
    RestoreResult,
    SpoofConfig,
    UninstallResult,
)
from btspoof.core.service import SpoofService

__all__ = [
    "BtSpoofError",
    "AdapterToolMissingError",
    "ConcurrentOperationError",
    "ConfigError",
    "InstallError",
    "InvalidAddressError",
    "NoBackupError",
    "NoCapabilityProviderError",
    "PermissionDeniedError",
    "VerificationMismatchError",
    "AgentReport",
    "AgentState",
    "DryRunPlan",
    "InstallationState",
    "InstallSummary",
    "Paths",
    "RestoreResult",
    "SpoofConfig",
    "UninstallResult",
    "is_valid_address",
    "normalize_address",
    "Client",
]


class Client:
    """Public client wrapping the controller operations."""

    def __init__(self, *, paths: Paths | None = None) -> None:
        self._service = SpoofService(paths=paths)

    @property
    def paths(self) -> Paths:
        return self._service.paths

    def install(self, address: str, *, interface: str = DEFAULT_INTERFACE) -> InstallSummary:
        return self._service.install(address, interface)

    def dry_run(self, address: str, *, interface: str = DEFAULT_INTERFACE) -> DryRunPlan:
        return self._service.dry_run(address, interface)

    def status(self) -> InstallationState:
        return self._service.status()

    def apply(self) -> AgentReport:
        return self._service.apply()

    def restore(self) -> RestoreResult:
        return self._service.restore()

    def uninstall(self, *, purge_backup: bool = False) -> UninstallResult:
        return self._service.uninstall(purge_backup=purge_backup)
