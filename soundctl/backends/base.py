"""Audio backend interface."""

from __future__ import annotations

from typing import Protocol

from soundctl.core.model import DeviceType


class AudioBackend(Protocol):
    """Property access to the platform audio subsystem.

    Handles are only valid for the lifetime of the current process. Every
    method raises ``PropertyError`` when the subsystem rejects the request.
    """

    def list_device_handles(self) -> list[int]:
        """Return the handles of every audio device currently present."""

    def get_device_name(self, handle: int) -> str:
        """Return the human readable device name."""

    def get_device_uid(self, handle: int) -> str:
        """Return the persistent device UID."""

    def device_supports_direction(self, handle: int, direction: DeviceType) -> bool:
        """Return whether the device has streams for INPUT or OUTPUT."""

    def get_default_device(self, direction: DeviceType) -> int:
        """Return the handle of the default device for a role."""

    def set_default_device(self, handle: int, direction: DeviceType) -> None:
        """Make a device the default for a role."""

    def get_mute(self, handle: int) -> bool:
        """Return the device mute state."""

    def set_mute(self, handle: int, muted: bool) -> None:
        """Set the device mute state."""
