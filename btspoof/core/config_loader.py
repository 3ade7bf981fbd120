"""Loading and atomic persistence of the spoof configuration file."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from btspoof.core.address import normalize_address
from btspoof.core.errors import ConfigError
from btspoof.core.fs import atomic_write
from btspoof.core.model import DEFAULT_INTERFACE, SpoofConfig

LOGGER = logging.getLogger(__name__)

_HEADER = "# bt-mac-spoof config (auto-generated)\n"


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys and keeps addresses as strings."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# An unquoted address such as 12:34:56:12:34:56 would otherwise resolve to a
# sexagesimal int under YAML 1.1.
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag not in {"tag:yaml.org,2002:bool", "tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigError(f"Duplicate key '{key}' in configuration")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("btspoof.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def parse_config(content: str, *, source: Path | str = "<config>") -> SpoofConfig:
    try:
        doc = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source}: {exc}") from exc

    if doc is None:
        raise ConfigError(f"{source} is empty; target_address missing")
    if not isinstance(doc, dict):
        raise ConfigError(f"{source} must contain a mapping at root")

    try:
        _load_schema_validator().validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    return SpoofConfig(
        target_address=normalize_address(doc["target_address"]),
        interface=doc.get("interface", DEFAULT_INTERFACE),
    )


def load_config(path: Path) -> SpoofConfig:
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"No configuration at {path}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Configuration {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read configuration {path}: {exc}") from exc
    return parse_config(content, source=path)


def render_config(config: SpoofConfig) -> str:
    body = yaml.safe_dump(
        {"target_address": config.target_address, "interface": config.interface},
        sort_keys=False,
        default_style=None,
    )
    return _HEADER + body


def check_config(config: SpoofConfig) -> SpoofConfig:
    """Return the normalised config, raising if it would not load back."""
    checked = SpoofConfig(
        target_address=normalize_address(config.target_address),
        interface=config.interface,
    )
    return parse_config(render_config(checked))


def save_config(path: Path, config: SpoofConfig) -> None:
    # Round-trip through the loader so nothing unreadable is ever persisted.
    checked = check_config(config)
    content = render_config(checked)
    atomic_write(path, content, mode=0o644)
    LOGGER.info("wrote %s (target_address=%s)", path, checked.target_address)
