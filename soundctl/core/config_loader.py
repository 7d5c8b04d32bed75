"""Loading of the optional device filter configuration.

A missing, unreadable, unparseable or schema-invalid file is treated as no
configuration at all: nothing is filtered and no error reaches the user.
"""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from soundctl.core.errors import SoundctlError
from soundctl.core.model import Config, DeviceFilter

CONFIG_ENV_VAR = "SOUNDCTL_CONFIG"
LOGGER = logging.getLogger(__name__)


class ConfigFormatError(SoundctlError):
    """Raised internally when a config document cannot be parsed or validated."""


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigFormatError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("soundctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "soundctl/config.json"


def config_file_path(path: str | os.PathLike[str] | None = None) -> Path:
    """Return the config path from an explicit argument, the environment, or the XDG default."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return default_config_path()
    return Path(path).expanduser()


def _parse_document(path: Path, content: str) -> Any:
    if path.suffix in {".yml", ".yaml"}:
        try:
            return yaml.load(content, Loader=UniqueKeyLoader)
        except yaml.YAMLError as exc:
            raise ConfigFormatError(f"Invalid YAML in {path}: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigFormatError(f"Invalid JSON in {path}: {exc}") from exc


def _build_filter(doc: dict[str, Any] | None) -> DeviceFilter:
    if not doc:
        return DeviceFilter()
    return DeviceFilter(
        names=tuple(doc.get("names") or []),
        uids=tuple(doc.get("uids") or []),
    )


def build_config(doc: Any, source: Path | str = "<config>") -> Config:
    if not isinstance(doc, dict):
        raise ConfigFormatError(f"Config file {source} must contain an object at root")

    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigFormatError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    return Config(
        ignore_devices=_build_filter(doc.get("ignoreDevices")),
        include_devices=_build_filter(doc.get("includeDevices")),
    )


def load_config(path: str | os.PathLike[str] | None = None) -> Config | None:
    config_path = config_file_path(path)
    if not config_path.is_file():
        LOGGER.debug("No config file at %s", config_path)
        return None

    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.debug("Ignoring unreadable config %s: %s", config_path, exc)
        return None

    try:
        config = build_config(_parse_document(config_path, content), config_path)
    except ConfigFormatError as exc:
        LOGGER.debug("Ignoring config: %s", exc)
        return None

    LOGGER.debug(
        "Loaded config %s (include: %d names, %d uids; ignore: %d names, %d uids)",
        config_path,
        len(config.include_devices.names),
        len(config.include_devices.uids),
        len(config.ignore_devices.names),
        len(config.ignore_devices.uids),
    )
    return config
