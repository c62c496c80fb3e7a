from __future__ import annotations

import pytest

from nodectl.core.errors import CommunicationError
from nodectl.core.model import AccessSettings, Version
from nodectl.core.negotiation import ProtocolNegotiator
from nodectl.core.protocol import V1_0, V1_1, protocol_for_firmware


@pytest.mark.parametrize("firmware", [Version(8, 21), Version(8, 99), Version(9, 0), Version(10, 2)])
@pytest.mark.parametrize("answers", [("v1.1",), ("v1.0",)])
def test_firmware_at_threshold_or_above_uses_v1_1(make_base_station, firmware, answers) -> None:
    base_station = make_base_station(firmware=firmware, answers=answers)

    result = ProtocolNegotiator().negotiate(base_station, 100, AccessSettings())

    assert result.protocol is V1_1
    assert result.firmware_version == firmware


@pytest.mark.parametrize("firmware", [Version(8, 20), Version(8, 0), Version(7, 99), Version(1, 5)])
@pytest.mark.parametrize("answers", [("v1.1",), ("v1.0",)])
def test_firmware_below_threshold_uses_v1_0(make_base_station, firmware, answers) -> None:
    base_station = make_base_station(firmware=firmware, answers=answers)

    result = ProtocolNegotiator().negotiate(base_station, 100, AccessSettings())

    assert result.protocol is V1_0
    assert result.answered_by.name == answers[0]


def test_protocol_for_firmware_threshold() -> None:
    assert protocol_for_firmware(Version(8, 20)) is V1_0
    assert protocol_for_firmware(Version(8, 21)) is V1_1


def test_newest_dialect_is_probed_first(base_station) -> None:
    ProtocolNegotiator().negotiate(base_station, 100, AccessSettings())

    assert len(base_station.read_calls) == 1
    assert base_station.read_calls[0][1] == ("FIRMWARE_VER",)
    assert base_station.read_calls[0][2] == "v1.1"


def test_fallback_in_same_round_when_v1_1_fails(make_base_station) -> None:
    base_station = make_base_station(answers=("v1.0",))

    result = ProtocolNegotiator().negotiate(base_station, 100, AccessSettings(num_retries=0))

    assert [call[2] for call in base_station.read_calls] == ["v1.1", "v1.0"]
    assert result.answered_by is V1_0


@pytest.mark.parametrize("num_retries", [0, 1, 3])
def test_rounds_are_bounded_by_retry_count(make_base_station, num_retries) -> None:
    base_station = make_base_station(answers=())

    with pytest.raises(CommunicationError):
        ProtocolNegotiator().negotiate(base_station, 100, AccessSettings(num_retries=num_retries))

    # one round probes both dialects
    assert len(base_station.read_calls) == 2 * (num_retries + 1)
    assert [call[2] for call in base_station.read_calls] == ["v1.1", "v1.0"] * (num_retries + 1)


def test_probe_reads_are_not_retried_individually(base_station) -> None:
    base_station.fail_reads = 1

    result = ProtocolNegotiator().negotiate(base_station, 100, AccessSettings(num_retries=5))

    # the v1.1 probe failed once and v1.0 answered in the same round
    assert [call[2] for call in base_station.read_calls] == ["v1.1", "v1.0"]
    assert result.protocol is V1_1


def test_group_read_disabled_only_from_fallback_on(make_base_station) -> None:
    base_station = make_base_station(answers=())

    with pytest.raises(CommunicationError):
        ProtocolNegotiator().negotiate(base_station, 100, AccessSettings(num_retries=1, use_group_read=True))

    assert [(call[2], call[3]) for call in base_station.read_calls] == [
        ("v1.1", True),
        ("v1.0", False),
        ("v1.1", False),
        ("v1.0", False),
    ]


def test_caller_settings_are_not_modified(make_base_station) -> None:
    base_station = make_base_station(answers=("v1.0",))
    settings = AccessSettings(num_retries=2, use_group_read=True)

    ProtocolNegotiator().negotiate(base_station, 100, settings)

    assert settings == AccessSettings(num_retries=2, use_group_read=True)


def test_non_communication_errors_are_not_retried(base_station) -> None:
    class BrokenBaseStation(type(base_station)):
        def read_eeprom(self, node_address, locations, *, protocol, group_read=False):
            self.read_calls.append((node_address, (), protocol.name, group_read))
            raise ValueError("malformed response")

    broken = BrokenBaseStation()

    with pytest.raises(ValueError):
        ProtocolNegotiator().negotiate(broken, 100, AccessSettings(num_retries=3))

    assert len(broken.read_calls) == 1


def test_last_communication_error_propagates(make_base_station) -> None:
    base_station = make_base_station(answers=())

    with pytest.raises(CommunicationError) as exc:
        ProtocolNegotiator().negotiate(base_station, 100, AccessSettings(num_retries=0))

    assert "v1.0" in str(exc.value)


def test_negative_retry_count_rejected(base_station) -> None:
    with pytest.raises(ValueError):
        AccessSettings(num_retries=-1)

    settings = AccessSettings()
    settings.num_retries = -1
    with pytest.raises(ValueError):
        ProtocolNegotiator().negotiate(base_station, 100, settings)

    assert base_station.read_calls == []
