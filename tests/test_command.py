from __future__ import annotations

import subprocess

import pytest

from btspoof.core.command import CommandRunner


def test_undecodable_tool_output_is_replaced(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        raw = b"\tBD Address: 00:1A:7D:DA:71:13 \xff\n"
        return subprocess.CompletedProcess(cmd, 0, stdout=raw.decode("utf-8", errors=kwargs["errors"]), stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    result = CommandRunner().run(["hciconfig", "hci0"])

    assert seen["errors"] == "replace"
    assert result is not None
    assert "�" in result.stdout


def test_missing_executable_returns_none(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert CommandRunner().run(["bdaddr", "-i", "hci0"]) is None
