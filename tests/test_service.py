from __future__ import annotations

import pytest

from soundctl.core.errors import (
    AmbiguousMatchError,
    DeviceNotFoundError,
    OperationNotSupportedError,
    PropertyError,
)
from soundctl.core.model import Config, DeviceFilter, DeviceType, MuteAction
from soundctl.core.service import SoundService

IN = frozenset({DeviceType.INPUT})
OUT = frozenset({DeviceType.OUTPUT})
BOTH = IN | OUT


class FakeBackend:
    def __init__(self, devices: list[tuple[int, str, str, frozenset[DeviceType]]]) -> None:
        self.devices = {handle: (name, uid, directions) for handle, name, uid, directions in devices}
        self.order = [handle for handle, *_ in devices]
        self.defaults: dict[DeviceType, int] = {}
        self.muted: dict[int, bool] = {}
        self.broken: set[int] = set()
        self.fail_listing = False
        self.set_calls: list[tuple[int, DeviceType]] = []
        self.mute_calls: list[tuple[int, bool]] = []

    def list_device_handles(self) -> list[int]:
        if self.fail_listing:
            raise PropertyError("Failed to get device list: -1")
        return list(self.order)

    def get_device_name(self, handle: int) -> str:
        if handle in self.broken:
            raise PropertyError(f"Failed to get device name: {handle}")
        return self.devices[handle][0]

    def get_device_uid(self, handle: int) -> str:
        return self.devices[handle][1]

    def device_supports_direction(self, handle: int, direction: DeviceType) -> bool:
        return direction in self.devices[handle][2]

    def get_default_device(self, direction: DeviceType) -> int:
        key = DeviceType.OUTPUT if direction is DeviceType.SYSTEM else direction
        if key not in self.defaults:
            raise PropertyError("Failed to get current device: -1")
        return self.defaults[key]

    def set_default_device(self, handle: int, direction: DeviceType) -> None:
        self.set_calls.append((handle, direction))

    def get_mute(self, handle: int) -> bool:
        return self.muted.get(handle, False)

    def set_mute(self, handle: int, muted: bool) -> None:
        self.mute_calls.append((handle, muted))
        self.muted[handle] = muted


def _backend() -> FakeBackend:
    return FakeBackend(
        [
            (30, "Studio Display", "display-uid", OUT),
            (12, "MacBook Pro Speakers", "BuiltInSpeakerDevice", OUT),
            (17, "MacBook Pro Microphone", "BuiltInMicrophoneDevice", IN),
            (21, "Someone's AirPods Max", "AC-80-0A-12-34-56:output", BOTH),
            (22, "Null Sink", "00-00-00-00-00-00:null", OUT),
        ]
    )


def _service(backend: FakeBackend, config: Config | None = None) -> SoundService:
    return SoundService(backend=backend, config=config or Config())


def test_list_devices_filters_by_type_and_sorts() -> None:
    service = _service(_backend())
    assert [d.name for d in service.list_devices(DeviceType.OUTPUT)] == [
        "MacBook Pro Speakers",
        "Null Sink",
        "Someone's AirPods Max",
        "Studio Display",
    ]
    assert [d.name for d in service.list_devices(DeviceType.INPUT)] == [
        "MacBook Pro Microphone",
        "Someone's AirPods Max",
    ]
    assert len(service.list_devices(DeviceType.ALL)) == 5
    assert [d.id for d in service.list_devices(DeviceType.SYSTEM)] == [
        d.id for d in service.list_devices(DeviceType.OUTPUT)
    ]


def test_list_devices_tags_requested_type() -> None:
    devices = _service(_backend()).list_devices(DeviceType.SYSTEM)
    assert {d.type for d in devices} == {DeviceType.SYSTEM}


def test_list_devices_order_is_independent_of_enumeration_order() -> None:
    first = _backend()
    second = _backend()
    second.order = list(reversed(second.order))
    assert _service(first).list_devices(DeviceType.ALL) == _service(second).list_devices(DeviceType.ALL)


def test_duplicate_names_sort_by_uid() -> None:
    backend = FakeBackend([(2, "AirPods", "uid-b", OUT), (1, "AirPods", "uid-a", OUT)])
    assert [d.uid for d in _service(backend).list_devices()] == ["uid-a", "uid-b"]


def test_list_devices_skips_unreadable_devices() -> None:
    backend = _backend()
    backend.broken.add(30)
    names = [d.name for d in _service(backend).list_devices()]
    assert "Studio Display" not in names
    assert len(names) == 3


def test_list_devices_never_raises() -> None:
    backend = _backend()
    backend.fail_listing = True
    assert _service(backend).list_devices() == []


def test_allow_list_returns_only_included_device() -> None:
    backend = FakeBackend(
        [
            (1, "MacBook Pro Speakers", "BuiltInSpeakerDevice", OUT),
            (2, "Studio Display", "display", OUT),
            (3, "AirPods", "airpods", OUT),
        ]
    )
    config = Config(
        ignore_devices=DeviceFilter(names=("MacBook",)),
        include_devices=DeviceFilter(names=("MacBook",)),
    )
    devices = _service(backend, config).list_devices()
    assert [d.name for d in devices] == ["MacBook Pro Speakers"]


def test_ignored_uid_is_absent_and_rest_sorted() -> None:
    config = Config(ignore_devices=DeviceFilter(uids=("00-00-00-00-00-00",)))
    devices = _service(_backend(), config).list_devices()
    assert [(d.name, d.uid) for d in devices] == [
        ("MacBook Pro Speakers", "BuiltInSpeakerDevice"),
        ("Someone's AirPods Max", "AC-80-0A-12-34-56:output"),
        ("Studio Display", "display-uid"),
    ]


def test_service_without_config_loads_nothing(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("SOUNDCTL_CONFIG", raising=False)
    service = SoundService(backend=_backend())
    assert service.config is None
    assert len(service.list_devices()) == 4


def test_resolve_uses_filtered_list() -> None:
    config = Config(ignore_devices=DeviceFilter(names=("Studio Display",)))
    service = _service(_backend(), config)
    with pytest.raises(DeviceNotFoundError):
        service.resolve("30")
    with pytest.raises(DeviceNotFoundError):
        service.resolve("Studio Display")


def test_resolve_respects_type() -> None:
    service = _service(_backend())
    assert service.resolve("17", DeviceType.INPUT).name == "MacBook Pro Microphone"
    with pytest.raises(DeviceNotFoundError):
        service.resolve("17", DeviceType.OUTPUT)


def test_set_device_by_mac_fragment() -> None:
    backend = _backend()
    results = _service(backend).set_device("ac:80:0a:12:34:56", DeviceType.OUTPUT)
    assert [r.device.name for r in results] == ["Someone's AirPods Max"]
    assert backend.set_calls == [(21, DeviceType.OUTPUT)]


def test_set_device_fuzzy() -> None:
    backend = _backend()
    results = _service(backend).set_device("airpods", DeviceType.INPUT)
    assert results[0].type is DeviceType.INPUT
    assert backend.set_calls == [(21, DeviceType.INPUT)]


def test_set_device_ambiguous_does_not_switch() -> None:
    backend = FakeBackend([(1, "Alice's AirPods", "a", OUT), (2, "Bob's AirPods", "b", OUT)])
    with pytest.raises(AmbiguousMatchError):
        _service(backend).set_device("airpods")
    assert backend.set_calls == []


def test_resolve_across_all_types_can_be_ambiguous() -> None:
    with pytest.raises(AmbiguousMatchError) as exc:
        _service(_backend()).resolve("macbook pro", DeviceType.ALL)
    assert set(exc.value.candidates) == {"MacBook Pro Microphone", "MacBook Pro Speakers"}


def test_set_all_counts_successes() -> None:
    backend = _backend()
    results = _service(backend).set_device("Someone's AirPods Max", DeviceType.ALL)
    assert [r.type for r in results] == [DeviceType.INPUT, DeviceType.OUTPUT, DeviceType.SYSTEM]
    assert backend.set_calls == [(21, DeviceType.INPUT), (21, DeviceType.OUTPUT), (21, DeviceType.SYSTEM)]


def test_set_all_partial_success() -> None:
    backend = _backend()
    results = _service(backend).set_device("Studio Display", DeviceType.ALL)
    assert [r.type for r in results] == [DeviceType.OUTPUT, DeviceType.SYSTEM]


def test_set_all_fails_when_every_type_fails() -> None:
    with pytest.raises(DeviceNotFoundError):
        _service(_backend()).set_device("Television", DeviceType.ALL)


def test_current_device() -> None:
    backend = _backend()
    backend.defaults[DeviceType.OUTPUT] = 21
    device = _service(backend).current_device(DeviceType.ALL)
    assert device.name == "Someone's AirPods Max"
    assert device.type is DeviceType.OUTPUT
    assert device.mac_address == "AC-80-0A-12-34-56"


def test_current_device_error_propagates() -> None:
    with pytest.raises(PropertyError):
        _service(_backend()).current_device(DeviceType.INPUT)


def test_cycle_next_advances_and_wraps() -> None:
    backend = _backend()
    service = _service(backend)

    backend.defaults[DeviceType.OUTPUT] = 12
    assert service.cycle_next()[0].device.name == "Null Sink"

    backend.defaults[DeviceType.OUTPUT] = 30
    assert service.cycle_next()[0].device.name == "MacBook Pro Speakers"


def test_cycle_next_unlisted_current_picks_first() -> None:
    backend = _backend()
    backend.defaults[DeviceType.OUTPUT] = 22
    config = Config(ignore_devices=DeviceFilter(names=("Null Sink",)))
    result = _service(backend, config).cycle_next()
    assert result[0].device.name == "MacBook Pro Speakers"


def test_cycle_next_without_devices() -> None:
    backend = FakeBackend([])
    backend.defaults[DeviceType.OUTPUT] = 1
    with pytest.raises(DeviceNotFoundError):
        _service(backend).cycle_next()


def test_cycle_all_continues_past_failed_type() -> None:
    backend = _backend()
    backend.defaults[DeviceType.OUTPUT] = 12
    results = _service(backend).cycle_next(DeviceType.ALL)
    assert [r.type for r in results] == [DeviceType.OUTPUT]


def test_mute_toggle_reads_current_state() -> None:
    backend = _backend()
    backend.defaults[DeviceType.INPUT] = 17
    backend.muted[17] = True
    results = _service(backend).set_mute(MuteAction.TOGGLE, DeviceType.INPUT)
    assert results[0].muted is False
    assert backend.mute_calls == [(17, False)]


def test_mute_explicit_actions() -> None:
    backend = _backend()
    backend.defaults[DeviceType.OUTPUT] = 12
    service = _service(backend)
    service.set_mute(MuteAction.MUTE)
    service.set_mute(MuteAction.UNMUTE)
    assert backend.mute_calls == [(12, True), (12, False)]


def test_mute_system_not_supported() -> None:
    with pytest.raises(OperationNotSupportedError):
        _service(_backend()).set_mute(MuteAction.TOGGLE, DeviceType.SYSTEM)


def test_mute_all_applies_to_input_and_output() -> None:
    backend = _backend()
    backend.defaults[DeviceType.INPUT] = 17
    backend.defaults[DeviceType.OUTPUT] = 12
    results = _service(backend).set_mute(MuteAction.MUTE, DeviceType.ALL)
    assert [(r.type, r.device.id) for r in results] == [(DeviceType.INPUT, 17), (DeviceType.OUTPUT, 12)]


def test_mute_all_fails_only_when_both_fail() -> None:
    with pytest.raises(PropertyError):
        _service(_backend()).set_mute(MuteAction.MUTE, DeviceType.ALL)


def test_set_all_reraises_ambiguity() -> None:
    backend = FakeBackend([(1, "Alice's AirPods", "a", BOTH), (2, "Bob's AirPods", "b", BOTH)])
    with pytest.raises(AmbiguousMatchError):
        _service(backend).set_device("airpods", DeviceType.ALL)
    assert backend.set_calls == []
