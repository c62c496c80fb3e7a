from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

import pytest

from nodectl.core import eeprom_map as ee
from nodectl.core.eeprom_helper import encode_firmware_version
from nodectl.core.errors import CommunicationError
from nodectl.core.model import AutoCalResult, EepromLocation, PingResponse, Value, ValueType, Version
from nodectl.core.profile_loader import load_profiles
from nodectl.core.types import MODEL_SHM_LINK_2, SamplingMode


class FakeBaseStation:
    """In-memory base station serving one node's registers."""

    def __init__(
        self,
        *,
        firmware: Version = Version(10, 2),
        model: int = MODEL_SHM_LINK_2,
        answers: Sequence[str] = ("v1.1", "v1.0"),
    ) -> None:
        self.registers: dict[int, Value] = {}
        self.answers = set(answers)
        self.fail_reads = 0
        self.fail_writes = 0
        self.erase_result = True
        self.auto_cal_success = True
        self.read_calls: list[tuple[int, tuple[str, ...], str, bool]] = []
        self.write_calls: list[tuple[int, str, int | float]] = []
        self.commands: list[tuple] = []

        self.registers[ee.FIRMWARE_VER.address] = encode_firmware_version(firmware)
        self.set(ee.MODEL_NUMBER, model // 10000)
        self.set(ee.MODEL_OPTION, model % 10000)
        self.set(ee.REGION_CODE, 0)
        self.set(ee.SERIAL_ID, 4321)
        self.set(ee.FREQUENCY, 15)
        self.set(ee.SAMPLING_MODE, SamplingMode.SYNC)

    def set(self, location: EepromLocation, value: int | float) -> None:
        if location.value_type is ValueType.FLOAT:
            self.registers[location.address] = Value.float32(value)
        else:
            self.registers[location.address] = Value.uint16(value)

    def get(self, location: EepromLocation) -> int | float:
        return self.registers[location.address].value

    @property
    def io_count(self) -> int:
        return len(self.read_calls) + len(self.write_calls) + len(self.commands)

    def read_eeprom(self, node_address, locations, *, protocol, group_read=False):
        self.read_calls.append((node_address, tuple(loc.name for loc in locations), protocol.name, group_read))
        if protocol.name not in self.answers:
            raise CommunicationError(f"no answer from node {node_address} using {protocol.name}")
        if self.fail_reads:
            self.fail_reads -= 1
            raise CommunicationError(f"read from node {node_address} timed out")
        return [
            self.registers.get(
                loc.address,
                Value.float32(0.0) if loc.value_type is ValueType.FLOAT else Value.uint16(0),
            )
            for loc in locations
        ]

    def write_eeprom(self, node_address, location, value, *, protocol):
        self.write_calls.append((node_address, location.name, value.value))
        if self.fail_writes:
            self.fail_writes -= 1
            raise CommunicationError(f"write to node {node_address} timed out")
        self.registers[location.address] = value

    def ping(self, node_address):
        self.commands.append(("ping", node_address))
        return PingResponse(success=True, node_rssi=-40, base_rssi=-35)

    def sleep(self, node_address):
        self.commands.append(("sleep", node_address))
        return True

    def set_to_idle(self, node_address):
        self.commands.append(("set_to_idle", node_address))
        return "idle"

    def erase(self, node_address):
        self.commands.append(("erase", node_address))
        return self.erase_result

    def start_non_sync_sampling(self, node_address):
        self.commands.append(("start_non_sync_sampling", node_address))

    def auto_balance(self, node_address, channel, target):
        self.commands.append(("auto_balance", channel, target))
        # the node adjusts its own hardware offset register
        self.set(ee.LOCATIONS[f"HW_OFFSET_{channel}"], target // 2)

    def auto_cal(self, node_address, model, firmware_version):
        self.commands.append(("auto_cal", model, firmware_version))
        return self.auto_cal_success, AutoCalResult(completion_flag=0, slope=1.5, offset=-0.25, temperature=21.0)

    def last_communication_time(self, node_address):
        return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def isolated_profile_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


@pytest.fixture
def profiles(isolated_profile_dirs):
    return load_profiles().profiles


@pytest.fixture
def base_station() -> FakeBaseStation:
    return FakeBaseStation()


@pytest.fixture
def make_base_station():
    return FakeBaseStation
