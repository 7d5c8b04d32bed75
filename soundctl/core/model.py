"""Core data models used across resolver, service, and CLI."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

# Six hex pairs with one consistent separator, not embedded in a longer hex run.
_MAC_TAG_RE = re.compile(
    r"(?<![0-9A-Fa-f])[0-9A-Fa-f]{2}([:_-])[0-9A-Fa-f]{2}(?:\1[0-9A-Fa-f]{2}){4}(?![0-9A-Fa-f])"
)


class DeviceType(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    SYSTEM = "system"
    ALL = "all"


class OutputFormat(str, Enum):
    HUMAN = "human"
    CLI = "cli"
    JSON = "json"


class MuteAction(str, Enum):
    MUTE = "mute"
    UNMUTE = "unmute"
    TOGGLE = "toggle"


def extract_mac_address(uid: str) -> str | None:
    """Return the MAC-like tag embedded in a device UID, if any."""
    match = _MAC_TAG_RE.search(uid)
    return match.group(0) if match else None


@dataclass(frozen=True)
class Device:
    id: int
    name: str
    uid: str
    type: DeviceType
    mac_address: str | None = field(init=False, default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mac_address", extract_mac_address(self.uid))


@dataclass(frozen=True)
class DeviceFilter:
    names: tuple[str, ...] = ()
    uids: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.names and not self.uids


@dataclass(frozen=True)
class Config:
    ignore_devices: DeviceFilter = DeviceFilter()
    include_devices: DeviceFilter = DeviceFilter()


@dataclass(frozen=True)
class MatchCandidate:
    device: Device
    score: float


@dataclass(frozen=True)
class ResolutionRequest:
    raw_identifier: str
    type: DeviceType


@dataclass(frozen=True)
class SwitchResult:
    type: DeviceType
    device: Device


@dataclass(frozen=True)
class MuteResult:
    type: DeviceType
    device: Device
    muted: bool
