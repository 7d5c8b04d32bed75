"""Rendering of devices for human, CLI and JSON consumers."""

from __future__ import annotations

import json
from typing import Any

from soundctl.core.model import Device, OutputFormat


def device_to_dict(device: Device) -> dict[str, Any]:
    return {
        "id": device.id,
        "name": device.name,
        "uid": device.uid,
        "type": device.type.value,
        "mac_address": device.mac_address,
    }


def format_device(device: Device, output_format: OutputFormat) -> str:
    if output_format is OutputFormat.CLI:
        mac = device.mac_address or ""
        return f"{device.name},{device.type.value},{device.id},{device.uid},{mac}"
    if output_format is OutputFormat.JSON:
        return json.dumps(device_to_dict(device), ensure_ascii=False)
    if device.mac_address:
        return f"{device.name} ({device.mac_address})"
    return device.name
