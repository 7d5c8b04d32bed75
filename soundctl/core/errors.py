"""Domain-specific errors for soundctl."""

from __future__ import annotations

from collections.abc import Sequence


class SoundctlError(Exception):
    """Base error for soundctl."""


class DeviceSelectionError(SoundctlError):
    """Raised when an identifier cannot be resolved to a single device."""


class DeviceNotFoundError(DeviceSelectionError):
    """Raised when no device matches an identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Device not found: {identifier}")


class AmbiguousMatchError(DeviceSelectionError):
    """Raised when several devices match an identifier equally well."""

    def __init__(self, identifier: str, candidates: Sequence[str]) -> None:
        self.identifier = identifier
        self.candidates = tuple(candidates)
        listed = ", ".join(self.candidates)
        super().__init__(f"Device '{identifier}' is ambiguous: matches {listed}")


class PropertyError(SoundctlError):
    """Raised when the audio backend fails to read or write a device property."""


class BackendUnavailableError(PropertyError):
    """Raised when the audio backend tooling cannot be found or started."""


class InvalidDeviceTypeError(SoundctlError):
    """Raised when an operation receives a device type it cannot handle."""

    def __init__(self, message: str = "Invalid device type") -> None:
        super().__init__(message)


class OperationNotSupportedError(SoundctlError):
    """Raised when an operation has no meaning for the requested device type."""

    def __init__(self, message: str = "Mute is not supported for this device type") -> None:
        super().__init__(message)
