"""PipeWire backend built on the ``pw-dump`` and ``wpctl`` command line tools."""

from __future__ import annotations

import json
import logging
import re
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from soundctl.core.errors import BackendUnavailableError, InvalidDeviceTypeError, PropertyError
from soundctl.core.model import DeviceType

_NODE_TYPE = "PipeWire:Interface:Node"
_METADATA_TYPE = "PipeWire:Interface:Metadata"
_MEDIA_CLASS_DIRECTIONS = {
    "Audio/Sink": frozenset({DeviceType.OUTPUT}),
    "Audio/Source": frozenset({DeviceType.INPUT}),
    "Audio/Duplex": frozenset({DeviceType.INPUT, DeviceType.OUTPUT}),
}
_DEFAULT_KEYS = {
    DeviceType.INPUT: "default.audio.source",
    DeviceType.OUTPUT: "default.audio.sink",
    DeviceType.SYSTEM: "default.audio.sink",
}
_VOLUME_RE = re.compile(r"^Volume:\s+[0-9.]+(?P<muted>\s+\[MUTED\])?", re.MULTILINE)
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Node:
    id: int
    name: str
    uid: str
    directions: frozenset[DeviceType]


@dataclass(frozen=True)
class _Snapshot:
    nodes: dict[int, _Node]
    defaults: dict[str, str]


class PipeWireBackend:
    """Reads devices from a ``pw-dump`` snapshot and applies changes with ``wpctl``.

    A fresh snapshot is taken on each ``list_device_handles`` call. Per-handle
    lookups reuse it and refresh once when the handle is unknown.
    """

    def __init__(self, *, timeout_s: float = 5.0) -> None:
        self.timeout_s = timeout_s
        self._snapshot: _Snapshot | None = None

    def list_device_handles(self) -> list[int]:
        self._snapshot = self._dump()
        return list(self._snapshot.nodes)

    def get_device_name(self, handle: int) -> str:
        return self._node(handle).name

    def get_device_uid(self, handle: int) -> str:
        return self._node(handle).uid

    def device_supports_direction(self, handle: int, direction: DeviceType) -> bool:
        return direction in self._node(handle).directions

    def get_default_device(self, direction: DeviceType) -> int:
        key = _default_key(direction)
        snapshot = self._dump()
        self._snapshot = snapshot
        default_name = snapshot.defaults.get(key)
        if default_name is None:
            raise PropertyError(f"Failed to get current device: no '{key}' metadata")
        for node in snapshot.nodes.values():
            if node.uid == default_name:
                return node.id
        raise PropertyError(f"Failed to get current device: '{default_name}' is not present")

    def set_default_device(self, handle: int, direction: DeviceType) -> None:
        _default_key(direction)
        self._run(["wpctl", "set-default", str(handle)], action="set device")

    def get_mute(self, handle: int) -> bool:
        output = self._run(["wpctl", "get-volume", str(handle)], action="get mute state")
        match = _VOLUME_RE.search(output)
        if match is None:
            raise PropertyError(f"Failed to get mute state: unexpected output {output.strip()!r}")
        return match.group("muted") is not None

    def set_mute(self, handle: int, muted: bool) -> None:
        self._run(["wpctl", "set-mute", str(handle), "1" if muted else "0"], action="set mute state")

    def _node(self, handle: int) -> _Node:
        if self._snapshot is None or handle not in self._snapshot.nodes:
            self._snapshot = self._dump()
        node = self._snapshot.nodes.get(handle)
        if node is None:
            raise PropertyError(f"Failed to get device properties: no audio device with ID {handle}")
        return node

    def _dump(self) -> _Snapshot:
        output = self._run(["pw-dump"], action="get device list")
        try:
            objects = json.loads(output)
        except json.JSONDecodeError as exc:
            raise PropertyError(f"Failed to get device list: invalid pw-dump output: {exc}") from exc
        if not isinstance(objects, list):
            raise PropertyError("Failed to get device list: pw-dump did not return a list")
        return _parse_dump(objects)

    def _run(self, cmd: Sequence[str], *, action: str) -> str:
        LOGGER.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except FileNotFoundError as exc:
            raise BackendUnavailableError(
                f"'{cmd[0]}' not found. soundctl needs PipeWire with pw-dump and wpctl installed."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise PropertyError(f"Failed to {action}: '{cmd[0]}' timed out after {self.timeout_s}s") from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise PropertyError(f"Failed to {action}: {' '.join(cmd)} -> {stderr or result.returncode}")
        return result.stdout


def _default_key(direction: DeviceType) -> str:
    key = _DEFAULT_KEYS.get(direction)
    if key is None:
        raise InvalidDeviceTypeError()
    return key


def _parse_dump(objects: list[Any]) -> _Snapshot:
    nodes: dict[int, _Node] = {}
    defaults: dict[str, str] = {}

    for obj in objects:
        if not isinstance(obj, dict):
            continue
        if obj.get("type") == _NODE_TYPE:
            node = _parse_node(obj)
            if node is not None:
                nodes[node.id] = node
        elif obj.get("type") == _METADATA_TYPE and (obj.get("props") or {}).get("metadata.name") == "default":
            defaults.update(_parse_defaults(obj.get("metadata") or []))

    return _Snapshot(nodes=nodes, defaults=defaults)


def _parse_node(obj: dict[str, Any]) -> _Node | None:
    props = (obj.get("info") or {}).get("props") or {}
    directions = _MEDIA_CLASS_DIRECTIONS.get(props.get("media.class", ""))
    if directions is None or not isinstance(obj.get("id"), int):
        return None
    uid = props.get("node.name")
    if not uid:
        return None
    name = props.get("node.description") or props.get("node.nick") or uid
    return _Node(id=obj["id"], name=name, uid=uid, directions=directions)


def _parse_defaults(entries: list[Any]) -> dict[str, str]:
    defaults: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, dict) or entry.get("key") not in _DEFAULT_KEYS.values():
            continue
        value = entry.get("value")
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                value = {"name": value}
        if isinstance(value, dict) and isinstance(value.get("name"), str):
            defaults[entry["key"]] = value["name"]
    return defaults
