"""Allow/deny filtering of enumerated devices."""

from __future__ import annotations

from soundctl.core.model import Config, Device, DeviceFilter
from soundctl.core.text import normalize


def _name_match(device_name: str, device_filter: DeviceFilter) -> bool:
    normalized_name = normalize(device_name)
    for name in device_filter.names:
        if not name:
            continue
        normalized_filter = normalize(name)
        if normalized_filter in normalized_name or normalized_name in normalized_filter:
            return True
    return False


def _uid_match(device_uid: str, device_filter: DeviceFilter) -> bool:
    return any(uid and uid in device_uid for uid in device_filter.uids)


def matches_filter(device: Device, device_filter: DeviceFilter) -> bool:
    return _name_match(device.name, device_filter) or _uid_match(device.uid, device_filter)


def should_exclude(device: Device, config: Config | None) -> bool:
    """Decide whether a device is hidden by the user configuration.

    A non-empty include filter switches to allow-list mode and the ignore
    filter is not consulted at all.
    """
    if config is None:
        return False
    if not config.include_devices.is_empty:
        return not matches_filter(device, config.include_devices)
    return matches_filter(device, config.ignore_devices)
