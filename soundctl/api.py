"""Stable public API for building tooling on top of soundctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import os

from soundctl.backends.base import AudioBackend
from soundctl.backends.pipewire import PipeWireBackend
from soundctl.core.errors import (
    AmbiguousMatchError,
    BackendUnavailableError,
    DeviceNotFoundError,
    DeviceSelectionError,
    InvalidDeviceTypeError,
    OperationNotSupportedError,
    PropertyError,
    SoundctlError,
)
from soundctl.core.model import (
    Config,
    Device,
    DeviceFilter,
    DeviceType,
    MuteAction,
    MuteResult,
    OutputFormat,
    SwitchResult,
)
from soundctl.core.output import format_device
from soundctl.core.service import SoundService

__all__ = [
    "SoundctlError",
    "DeviceSelectionError",
    "DeviceNotFoundError",
    "AmbiguousMatchError",
    "PropertyError",
    "BackendUnavailableError",
    "InvalidDeviceTypeError",
    "OperationNotSupportedError",
    "Config",
    "Device",
    "DeviceFilter",
    "DeviceType",
    "MuteAction",
    "MuteResult",
    "OutputFormat",
    "SwitchResult",
    "AudioBackend",
    "PipeWireBackend",
    "format_device",
    "Client",
]


class Client:
    """Public client for interacting with soundctl core capabilities.

    A `Client` instance wraps config loading, device listing, identifier
    resolution, and default-device/mute changes behind a stable API intended
    for third-party tools (GUI/TUI/services/scripts).
    """

    def __init__(
        self,
        *,
        backend: AudioBackend | None = None,
        config: Config | None = None,
        config_path: str | os.PathLike[str] | None = None,
    ) -> None:
        self._service = SoundService(backend=backend, config=config, config_path=config_path)

    @property
    def config(self) -> Config | None:
        return self._service.config

    def list_devices(self, *, device_type: DeviceType = DeviceType.OUTPUT) -> list[Device]:
        return self._service.list_devices(device_type)

    def resolve(self, identifier: str, *, device_type: DeviceType = DeviceType.OUTPUT) -> Device:
        return self._service.resolve(identifier, device_type)

    def current_device(self, *, device_type: DeviceType = DeviceType.OUTPUT) -> Device:
        return self._service.current_device(device_type)

    def set_device(self, identifier: str, *, device_type: DeviceType = DeviceType.OUTPUT) -> list[SwitchResult]:
        return self._service.set_device(identifier, device_type)

    def cycle_next(self, *, device_type: DeviceType = DeviceType.OUTPUT) -> list[SwitchResult]:
        return self._service.cycle_next(device_type)

    def set_mute(self, action: MuteAction, *, device_type: DeviceType = DeviceType.OUTPUT) -> list[MuteResult]:
        return self._service.set_mute(action, device_type)
