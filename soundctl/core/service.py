"""Service layer used by CLI and the public API."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import TypeVar

from soundctl.backends.base import AudioBackend
from soundctl.backends.pipewire import PipeWireBackend
from soundctl.core.config_loader import load_config
from soundctl.core.errors import (
    AmbiguousMatchError,
    DeviceNotFoundError,
    OperationNotSupportedError,
    PropertyError,
    SoundctlError,
)
from soundctl.core.filters import should_exclude
from soundctl.core.model import (
    Config,
    Device,
    DeviceType,
    MuteAction,
    MuteResult,
    ResolutionRequest,
    SwitchResult,
)
from soundctl.core.resolver import resolve_identifier

_T = TypeVar("_T")
_SET_ALL_TYPES = (DeviceType.INPUT, DeviceType.OUTPUT, DeviceType.SYSTEM)
_CHANNEL_TYPES = (DeviceType.INPUT, DeviceType.OUTPUT)
LOGGER = logging.getLogger(__name__)


class SoundService:
    def __init__(
        self,
        *,
        backend: AudioBackend | None = None,
        config: Config | None = None,
        config_path: str | os.PathLike[str] | None = None,
    ) -> None:
        self.backend = backend or PipeWireBackend()
        self.config = config if config is not None else load_config(config_path)

    def list_devices(self, device_type: DeviceType = DeviceType.OUTPUT) -> list[Device]:
        """List devices of a type, filtered by the config and sorted by (name, uid).

        Devices whose properties cannot be read are skipped; this never raises.
        """
        try:
            handles = self.backend.list_device_handles()
        except PropertyError as exc:
            LOGGER.warning("Could not enumerate audio devices: %s", exc)
            return []

        devices: list[Device] = []
        for handle in handles:
            try:
                if not self._matches_type(handle, device_type):
                    continue
                name = self.backend.get_device_name(handle)
                uid = self.backend.get_device_uid(handle)
            except PropertyError as exc:
                LOGGER.debug("Skipping device %s: %s", handle, exc)
                continue

            device = Device(id=handle, name=name, uid=uid, type=device_type)
            if should_exclude(device, self.config):
                LOGGER.debug("Excluding %s (%s) by config", device.name, device.uid)
                continue
            devices.append(device)

        return sorted(devices, key=lambda d: (d.name, d.uid))

    def list_device_groups(self, device_type: DeviceType = DeviceType.OUTPUT) -> list[Device]:
        """List devices the way the ``list`` command shows them.

        ``all`` lists input devices followed by output devices and ``system``
        lists output devices.
        """
        if device_type is DeviceType.ALL:
            return self.list_devices(DeviceType.INPUT) + self.list_devices(DeviceType.OUTPUT)
        if device_type is DeviceType.SYSTEM:
            return self.list_devices(DeviceType.OUTPUT)
        return self.list_devices(device_type)

    def resolve(self, identifier: str, device_type: DeviceType = DeviceType.OUTPUT) -> Device:
        request = ResolutionRequest(raw_identifier=identifier, type=device_type)
        return resolve_identifier(request, self.list_devices(device_type))

    def current_device(self, device_type: DeviceType = DeviceType.OUTPUT) -> Device:
        if device_type is DeviceType.ALL:
            device_type = DeviceType.OUTPUT
        handle = self.backend.get_default_device(device_type)
        name = self.backend.get_device_name(handle)
        uid = self.backend.get_device_uid(handle)
        return Device(id=handle, name=name, uid=uid, type=device_type)

    def set_device(self, identifier: str, device_type: DeviceType = DeviceType.OUTPUT) -> list[SwitchResult]:
        if device_type is DeviceType.ALL:
            return self._set_all(identifier)
        device = self.resolve(identifier, device_type)
        self.backend.set_default_device(device.id, device_type)
        LOGGER.debug("Set %s device to %s (%s)", device_type.value, device.name, device.id)
        return [SwitchResult(type=device_type, device=device)]

    def cycle_next(self, device_type: DeviceType = DeviceType.OUTPUT) -> list[SwitchResult]:
        if device_type is DeviceType.ALL:
            return _each_type(_CHANNEL_TYPES, self._cycle_one)
        return [self._cycle_one(device_type)]

    def set_mute(self, action: MuteAction, device_type: DeviceType = DeviceType.OUTPUT) -> list[MuteResult]:
        if device_type is DeviceType.SYSTEM:
            raise OperationNotSupportedError()
        if device_type is DeviceType.ALL:
            return _each_type(_CHANNEL_TYPES, lambda t: self._mute_one(action, t))
        return [self._mute_one(action, device_type)]

    def _matches_type(self, handle: int, device_type: DeviceType) -> bool:
        if device_type is DeviceType.INPUT:
            return self.backend.device_supports_direction(handle, DeviceType.INPUT)
        if device_type in (DeviceType.OUTPUT, DeviceType.SYSTEM):
            return self.backend.device_supports_direction(handle, DeviceType.OUTPUT)
        return self.backend.device_supports_direction(
            handle, DeviceType.INPUT
        ) or self.backend.device_supports_direction(handle, DeviceType.OUTPUT)

    def _set_all(self, identifier: str) -> list[SwitchResult]:
        results: list[SwitchResult] = []
        ambiguous: AmbiguousMatchError | None = None
        for device_type in _SET_ALL_TYPES:
            try:
                results.extend(self.set_device(identifier, device_type))
            except AmbiguousMatchError as exc:
                ambiguous = ambiguous or exc
                LOGGER.debug("Skipping %s: %s", device_type.value, exc)
            except SoundctlError as exc:
                LOGGER.debug("Skipping %s: %s", device_type.value, exc)

        if results:
            return results
        if ambiguous is not None:
            raise ambiguous
        raise DeviceNotFoundError(identifier)

    def _cycle_one(self, device_type: DeviceType) -> SwitchResult:
        current = self.backend.get_default_device(device_type)
        devices = self.list_devices(device_type)
        if not devices:
            raise DeviceNotFoundError("No devices available")

        index = next((i for i, device in enumerate(devices) if device.id == current), None)
        target = devices[0] if index is None else devices[(index + 1) % len(devices)]
        self.backend.set_default_device(target.id, device_type)
        return SwitchResult(type=device_type, device=target)

    def _mute_one(self, action: MuteAction, device_type: DeviceType) -> MuteResult:
        device = self.current_device(device_type)
        if action is MuteAction.TOGGLE:
            muted = not self.backend.get_mute(device.id)
        else:
            muted = action is MuteAction.MUTE
        self.backend.set_mute(device.id, muted)
        return MuteResult(type=device_type, device=device, muted=muted)


def _each_type(device_types: tuple[DeviceType, ...], operation: Callable[[DeviceType], _T]) -> list[_T]:
    """Apply an operation per device type, failing only when every type failed."""
    results: list[_T] = []
    last_error: SoundctlError | None = None
    for device_type in device_types:
        try:
            results.append(operation(device_type))
        except SoundctlError as exc:
            LOGGER.debug("Skipping %s: %s", device_type.value, exc)
            last_error = exc
    if not results and last_error is not None:
        raise last_error
    return results
