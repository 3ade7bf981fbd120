from __future__ import annotations

from pathlib import Path

import pytest

from btspoof.core.config_loader import load_config, parse_config, save_config
from btspoof.core.errors import ConfigError, InvalidAddressError
from btspoof.core.model import SpoofConfig


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "etc" / "bt-mac-spoof.conf"
    save_config(path, SpoofConfig(target_address="50:e0:85:65:80:00", interface="hci1"))

    text = path.read_text(encoding="utf-8")
    assert text.startswith("# bt-mac-spoof config (auto-generated)")
    assert load_config(path) == SpoofConfig(target_address="50:E0:85:65:80:00", interface="hci1")


def test_save_replaces_previous_file(tmp_path: Path) -> None:
    path = tmp_path / "bt-mac-spoof.conf"
    save_config(path, SpoofConfig(target_address="50:E0:85:65:80:00"))
    save_config(path, SpoofConfig(target_address="50:E0:85:65:80:01"))

    assert load_config(path).target_address == "50:E0:85:65:80:01"
    assert [p.name for p in tmp_path.iterdir()] == ["bt-mac-spoof.conf"]


def test_save_rejects_invalid_address_without_writing(tmp_path: Path) -> None:
    path = tmp_path / "bt-mac-spoof.conf"
    with pytest.raises(InvalidAddressError):
        save_config(path, SpoofConfig(target_address="GG:E0:85:65:80:00"))
    assert not path.exists()


def test_unquoted_numeric_address_stays_a_string() -> None:
    config = parse_config("target_address: 12:34:56:12:34:56\n")
    assert config.target_address == "12:34:56:12:34:56"
    assert config.interface == "hci0"


def test_missing_file_is_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.conf")


@pytest.mark.parametrize(
    "content",
    [
        "",
        "interface: hci0\n",
        "target_address: 50:E0:85:65:80\n",
        "target_address: 50:E0:85:65:80:00\ntarget_address: 50:E0:85:65:80:01\n",
        "- just\n- a list\n",
        "target_address: 50:E0:85:65:80:00\nextra: 1\n",
        "target_address: [\n",
    ],
)
def test_bad_documents_are_config_errors(content: str) -> None:
    with pytest.raises(ConfigError):
        parse_config(content)
