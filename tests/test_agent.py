from __future__ import annotations

from pathlib import Path

import pytest
from conftest import ORIGINAL, TARGET, VENDOR, FakeRunner

from btspoof.core.agent import RuntimeAgent
from btspoof.core.backup import BackupStore
from btspoof.core.config_loader import save_config
from btspoof.core.errors import ConfigError, NoCapabilityProviderError, VerificationMismatchError
from btspoof.core.model import AgentState, ExecutionMode, SpoofConfig
from btspoof.tools.hciconfig import HciAdapter
from btspoof.tools.providers import AddressSetter


def _agent(tmp_path: Path, runner: FakeRunner, *, target: str | None = TARGET) -> RuntimeAgent:
    config_path = tmp_path / "bt-mac-spoof.conf"
    if target is not None:
        save_config(config_path, SpoofConfig(target_address=target))
    return RuntimeAgent(
        config_path,
        BackupStore(tmp_path / "state" / "orig_mac"),
        HciAdapter(runner),
        AddressSetter(runner),
    )


def test_happy_path_visits_every_state(tmp_path: Path) -> None:
    runner = FakeRunner()
    report = _agent(tmp_path, runner).run()

    assert report.state is AgentState.APPLIED
    assert report.visited == [
        AgentState.START,
        AgentState.CONFIG_LOADED,
        AgentState.BACKUP_ENSURED,
        AgentState.ADAPTER_DOWN,
        AgentState.ADDRESS_SET_ATTEMPTED,
        AgentState.ADAPTER_UP,
        AgentState.VERIFIED,
        AgentState.APPLIED,
    ]
    assert report.provider == "bdaddr"
    assert report.observed_address == TARGET
    assert report.backup_written


def test_backup_is_saved_before_any_mutation(tmp_path: Path) -> None:
    runner = FakeRunner()
    agent = _agent(tmp_path, runner)
    agent.run()

    assert agent.backup.read() == ORIGINAL
    first_mutation = next(i for i, c in enumerate(runner.calls) if c[0] != "hciconfig" or len(c) > 2)
    assert runner.calls[:first_mutation] == [["hciconfig", "hci0"]]


def test_second_run_keeps_original_backup(tmp_path: Path) -> None:
    runner = FakeRunner()
    agent = _agent(tmp_path, runner)
    agent.run()
    report = agent.run()

    assert not report.backup_written
    assert report.state is AgentState.APPLIED
    assert agent.backup.read() == ORIGINAL


def test_missing_config_aborts_without_touching_adapter(tmp_path: Path) -> None:
    runner = FakeRunner()
    report = _agent(tmp_path, runner, target=None).run()

    assert report.state is AgentState.ABORTED
    assert report.visited == [AgentState.START, AgentState.ABORTED]
    assert runner.calls == []


def test_invalid_config_aborts(tmp_path: Path) -> None:
    runner = FakeRunner()
    agent = _agent(tmp_path, runner, target=None)
    agent.config_path.write_text("target_address: GG:E0:85:65:80:00\n", encoding="utf-8")

    assert agent.run().state is AgentState.ABORTED
    assert runner.calls == []


def test_no_provider_brings_adapter_back_up_and_aborts(tmp_path: Path) -> None:
    runner = FakeRunner(installed=("hciconfig",))
    report = _agent(tmp_path, runner).run()

    assert report.state is AgentState.ABORTED
    assert AgentState.ADAPTER_UP not in report.visited
    assert runner.calls[-1] == ["hciconfig", "hci0", "up"]


def test_bluemoon_only_reports_mismatch(tmp_path: Path) -> None:
    runner = FakeRunner(installed=("hciconfig", "bluemoon"))
    report = _agent(tmp_path, runner).run()

    assert report.provider == "bluemoon"
    assert report.state is AgentState.MISMATCH
    assert report.observed_address == VENDOR


def test_down_failure_is_tolerated(tmp_path: Path) -> None:
    runner = FakeRunner(failing=("hciconfig hci0 down",))
    report = _agent(tmp_path, runner).run()

    assert report.state is AgentState.APPLIED
    assert ["hciconfig", "hci0", "up"] in runner.calls


def test_failed_tool_still_brings_adapter_up(tmp_path: Path) -> None:
    runner = FakeRunner(failing=("bdaddr",))
    report = _agent(tmp_path, runner).run()

    assert report.state is AgentState.MISMATCH
    assert AgentState.ADAPTER_UP in report.visited
    assert ["hciconfig", "hci0", "up"] in runner.calls


def test_unreadable_address_skips_backup_but_applies(tmp_path: Path) -> None:
    runner = FakeRunner(failing=("hciconfig hci0",))
    agent = _agent(tmp_path, runner)
    report = agent.run()

    assert not agent.backup.exists()
    assert report.state is AgentState.MISMATCH
    assert runner.tool_calls("bdaddr")


def test_strict_mode_raises_after_completing_sequence(tmp_path: Path) -> None:
    runner = FakeRunner(installed=("hciconfig", "bluemoon"))
    with pytest.raises(VerificationMismatchError):
        _agent(tmp_path, runner).run(ExecutionMode.STRICT)
    assert runner.calls[-2] == ["hciconfig", "hci0", "up"]


def test_strict_mode_raises_for_missing_tools(tmp_path: Path) -> None:
    runner = FakeRunner(installed=("hciconfig",))
    with pytest.raises(NoCapabilityProviderError):
        _agent(tmp_path, runner).run(ExecutionMode.STRICT)


def test_strict_mode_raises_for_missing_config(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        _agent(tmp_path, FakeRunner(), target=None).run(ExecutionMode.STRICT)


def test_undecodable_config_aborts(tmp_path: Path) -> None:
    runner = FakeRunner()
    agent = _agent(tmp_path, runner, target=None)
    agent.config_path.write_bytes(b"target_address: \xff\xfe\n")

    report = agent.run()

    assert report.state is AgentState.ABORTED
    assert "UTF-8" in (report.reason or "")
    assert runner.calls == []
