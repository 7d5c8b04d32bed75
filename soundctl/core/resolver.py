"""Identifier dispatch: MAC-like UID fragment, numeric handle, then name."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from soundctl.core.device_match import find_by_name, resolve_fuzzy
from soundctl.core.model import Device, ResolutionRequest

_MAC_RE = re.compile(r"[0-9A-Fa-f]{2}(?:[:-][0-9A-Fa-f]{2}){5}")
_UID_SEPARATORS = "[:_-]"
LOGGER = logging.getLogger(__name__)

Strategy = Callable[[str, Sequence[Device]], Device | None]


def is_mac_address_format(value: str) -> bool:
    return _MAC_RE.fullmatch(value) is not None


def _uid_pattern(mac: str) -> re.Pattern[str]:
    groups = re.split(r"[:-]", mac)
    return re.compile(_UID_SEPARATORS.join(groups), re.IGNORECASE)


def find_by_uid(raw: str, devices: Sequence[Device]) -> Device | None:
    """Find the first device whose UID embeds the given MAC-like fragment.

    Backends store the MAC with ``:``, ``-`` or ``_`` between groups and in
    either case, so the fragment is matched against all of those forms.
    """
    if not is_mac_address_format(raw):
        return None
    pattern = _uid_pattern(raw)
    return next((device for device in devices if pattern.search(device.uid)), None)


def find_by_handle(raw: str, devices: Sequence[Device]) -> Device | None:
    if not (raw.isascii() and raw.isdigit()):
        return None
    handle = int(raw)
    return next((device for device in devices if device.id == handle), None)


_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("uid", find_by_uid),
    ("handle", find_by_handle),
    ("name", find_by_name),
)


def resolve_identifier(request: ResolutionRequest, devices: Sequence[Device]) -> Device:
    """Resolve a raw identifier against an already listed set of devices.

    UID and handle lookups only short-circuit when they find a real device;
    otherwise resolution falls through to name matching, which has the final
    word and raises ``DeviceNotFoundError`` or ``AmbiguousMatchError``.
    """
    raw = request.raw_identifier
    for label, strategy in _STRATEGIES:
        device = strategy(raw, devices)
        if device is not None:
            LOGGER.debug("Resolved %r by %s to %s (%s)", raw, label, device.name, device.uid)
            return device
    LOGGER.debug("No direct match for %r among %d %s devices", raw, len(devices), request.type.value)
    return resolve_fuzzy(raw, devices)
