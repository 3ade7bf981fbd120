"""Core data models used across agent, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_INTERFACE = "hci0"
DEFAULT_ADDRESS = "50:E0:85:65:80:00"
UNIT_NAME = "bt-mac-spoof.service"


@dataclass(frozen=True)
class Paths:
    config: Path = Path("/etc/bt-mac-spoof.conf")
    agent: Path = Path("/usr/local/bin/set-bt-mac")
    unit: Path = Path("/etc/systemd/system") / UNIT_NAME
    backup_dir: Path = Path("/var/lib/bt-mac-spoof")
    lock: Path = Path("/var/lock/install-bt-mac.lock")

    @property
    def backup_file(self) -> Path:
        return self.backup_dir / "orig_mac"


@dataclass(frozen=True)
class SpoofConfig:
    target_address: str
    interface: str = DEFAULT_INTERFACE


class ExecutionMode(Enum):
    BEST_EFFORT = "best-effort"
    STRICT = "strict"


class AgentState(Enum):
    START = "start"
    CONFIG_LOADED = "config-loaded"
    BACKUP_ENSURED = "backup-ensured"
    ADAPTER_DOWN = "adapter-down"
    ADDRESS_SET_ATTEMPTED = "address-set-attempted"
    ADAPTER_UP = "adapter-up"
    VERIFIED = "verified"
    APPLIED = "applied"
    MISMATCH = "mismatch"
    ABORTED = "aborted"


class SetOutcome(Enum):
    APPLIED = "applied"
    UNAVAILABLE = "unavailable"


class BackupWrite(Enum):
    WRITTEN = "written"
    ALREADY_PRESENT = "already-present"


@dataclass(frozen=True)
class SetResult:
    outcome: SetOutcome
    provider: str | None = None
    tool_succeeded: bool = False


@dataclass(frozen=True)
class SequenceResult:
    set_result: SetResult
    adapter_down: bool
    adapter_up: bool


@dataclass
class AgentReport:
    state: AgentState = AgentState.START
    visited: list[AgentState] = field(default_factory=lambda: [AgentState.START])
    target_address: str | None = None
    observed_address: str | None = None
    provider: str | None = None
    backup_written: bool = False
    reason: str | None = None

    def advance(self, state: AgentState) -> None:
        self.state = state
        self.visited.append(state)


@dataclass(frozen=True)
class InstallationState:
    config_present: bool
    agent_present: bool
    unit_present: bool
    enabled: str
    active: str
    backup_address: str | None
    target_address: str | None
    current_address: str | None


@dataclass(frozen=True)
class InstallSummary:
    backup_address: str | None
    target_address: str
    current_address: str | None
    enabled: str
    active: str
    warnings: tuple[str, ...]
    journal: tuple[str, ...]

    @property
    def applied(self) -> bool:
        return self.current_address == self.target_address


@dataclass(frozen=True)
class DryRunPlan:
    target_address: str
    interface: str
    paths: Paths


@dataclass(frozen=True)
class RestoreResult:
    backup_address: str
    provider: str | None
    tool_succeeded: bool
    current_address: str | None


@dataclass(frozen=True)
class UninstallResult:
    removed: tuple[Path, ...]
    backup_kept: Path | None
