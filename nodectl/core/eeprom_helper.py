"""Typed reads and writes of node settings over the register cache."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from enum import IntEnum
from typing import Protocol, TypeVar

from nodectl.core import eeprom_map as ee
from nodectl.core.errors import UnexpectedValueError
from nodectl.core.model import (
    ChannelMask,
    EepromLocation,
    FatigueOptions,
    HistogramOptions,
    LinearEquation,
    NodeInfo,
    RadioFeatures,
    Value,
    Version,
)
from nodectl.core.types import (
    CalCoefEquationType,
    CalCoefUnit,
    DataCollectionMethod,
    DataFormat,
    DefaultMode,
    Frequency,
    MicroControllerType,
    RegionCode,
    SampleRate,
    SamplingMode,
    SettlingTime,
    ThermocoupleType,
    TransmitPower,
)

_E = TypeVar("_E", bound=IntEnum)

RESET_HISTOGRAM_BINS = 1


class RegisterAccess(Protocol):
    def read_eeprom(self, location: EepromLocation) -> Value: ...

    def read_eeprom_many(self, locations: Sequence[EepromLocation]) -> list[Value]: ...

    def write_eeprom(self, location: EepromLocation, value: Value) -> None: ...


def decode_firmware_version(value: Value) -> Version:
    raw = value.as_uint16()
    return Version(raw >> 8, raw & 0xFF)


def encode_firmware_version(version: Version) -> Value:
    return Value.uint16((version.major << 8) | version.minor)


def decode_enum(enum_cls: type[_E], raw: int, location: EepromLocation) -> _E:
    try:
        return enum_cls(raw)
    except ValueError:
        raise UnexpectedValueError(
            f"{location.name} holds {raw}, which is not a valid {enum_cls.__name__}"
        ) from None


def decode_time_span(raw: int) -> timedelta:
    """Decode a time value whose top bit selects minutes over seconds."""
    if raw & 0x8000:
        return timedelta(minutes=raw & 0x7FFF)
    return timedelta(seconds=raw)


class NodeEepromHelper:
    """Register accessor handed to configuration objects and used by the node."""

    def __init__(self, access: RegisterAccess) -> None:
        self._access = access

    def read(self, location: EepromLocation) -> Value:
        return self._access.read_eeprom(location)

    def write(self, location: EepromLocation, value: Value) -> None:
        self._access.write_eeprom(location, value)

    def read_uint16(self, location: EepromLocation) -> int:
        return self.read(location).as_uint16()

    def write_uint16(self, location: EepromLocation, value: int) -> None:
        self.write(location, Value.uint16(value))

    def _read_enum(self, enum_cls: type[_E], location: EepromLocation) -> _E:
        return decode_enum(enum_cls, self.read_uint16(location), location)

    def read_node_info(self) -> NodeInfo:
        fw, number, option, region = self._access.read_eeprom_many(
            [ee.FIRMWARE_VER, ee.MODEL_NUMBER, ee.MODEL_OPTION, ee.REGION_CODE]
        )
        return NodeInfo(
            model=number.as_uint16() * 10000 + option.as_uint16(),
            firmware_version=decode_firmware_version(fw),
            region_code=region.as_uint16(),
        )

    def read_fw_version(self) -> Version:
        return decode_firmware_version(self.read(ee.FIRMWARE_VER))

    def read_model(self) -> int:
        number, option = self._access.read_eeprom_many([ee.MODEL_NUMBER, ee.MODEL_OPTION])
        return number.as_uint16() * 10000 + option.as_uint16()

    def read_serial(self) -> str:
        number, option, serial = self._access.read_eeprom_many(
            [ee.MODEL_NUMBER, ee.MODEL_OPTION, ee.SERIAL_ID]
        )
        return f"{number.as_uint16()}-{option.as_uint16():04d}-{serial.as_uint16():05d}"

    def read_microcontroller(self) -> MicroControllerType:
        return self._read_enum(MicroControllerType, ee.MICROCONTROLLER)

    def read_radio_features(self) -> RadioFeatures:
        return RadioFeatures(extended_range=bool(self.read_uint16(ee.RADIO_OPTIONS) & 0x01))

    def read_data_storage_size(self) -> int:
        return self.read_uint16(ee.MAX_MEMORY) * 1024

    def read_region_code(self) -> RegionCode:
        return self._read_enum(RegionCode, ee.REGION_CODE)

    def read_frequency(self) -> Frequency:
        return self._read_enum(Frequency, ee.FREQUENCY)

    def read_num_datalog_sessions(self) -> int:
        return self.read_uint16(ee.NUM_DATALOG_SESSIONS)

    def read_default_mode(self) -> DefaultMode:
        return self._read_enum(DefaultMode, ee.DEFAULT_MODE)

    def read_inactivity_timeout(self) -> int:
        return self.read_uint16(ee.INACTIVITY_TIMEOUT)

    def read_check_radio_interval(self) -> int:
        return self.read_uint16(ee.CHECK_RADIO_INTERVAL)

    def read_transmit_power(self) -> TransmitPower:
        return self._read_enum(TransmitPower, ee.TRANSMIT_POWER)

    def read_sampling_mode(self) -> SamplingMode:
        return self._read_enum(SamplingMode, ee.SAMPLING_MODE)

    def read_channel_mask(self) -> ChannelMask:
        return ChannelMask(self.read_uint16(ee.ACTIVE_CHANNEL_MASK))

    def read_sample_rate(self, mode: SamplingMode) -> SampleRate:
        location = ee.DATALOG_SAMPLE_RATE if mode is SamplingMode.ARMED_DATALOG else ee.SAMPLE_RATE
        return self._read_enum(SampleRate, location)

    def read_num_sweeps(self) -> int:
        return self.read_uint16(ee.NUM_SWEEPS) * 100

    def read_unlimited_duration(self, mode: SamplingMode) -> bool:
        location = ee.UNLIMITED_DATALOG if mode is SamplingMode.ARMED_DATALOG else ee.UNLIMITED_SAMPLING
        return self.read_uint16(location) == 1

    def read_data_format(self) -> DataFormat:
        return self._read_enum(DataFormat, ee.DATA_FORMAT)

    def read_collection_mode(self) -> DataCollectionMethod:
        return self._read_enum(DataCollectionMethod, ee.COLLECTION_MODE)

    def read_time_between_bursts(self) -> timedelta:
        return decode_time_span(self.read_uint16(ee.TIME_BETWEEN_BURSTS))

    def read_lost_beacon_timeout(self) -> int:
        return self.read_uint16(ee.LOST_BEACON_TIMEOUT)

    def read_hardware_gain(self, location: EepromLocation) -> float:
        # gain codes select a power-of-two amplifier stage
        return float(2 ** self.read_uint16(location))

    def read_hardware_offset(self, location: EepromLocation) -> int:
        return self.read_uint16(location)

    def read_linear_equation(self, slope_location: EepromLocation) -> LinearEquation:
        offset_location = ee.LINEAR_EQUATION_OFFSETS.get(slope_location.address)
        if offset_location is None:
            raise UnexpectedValueError(f"{slope_location.name} is not a calibration slope register")
        slope, offset = self._access.read_eeprom_many([slope_location, offset_location])
        return LinearEquation(slope=slope.as_float(), offset=offset.as_float())

    def read_unit(self, location: EepromLocation) -> CalCoefUnit:
        return decode_enum(CalCoefUnit, self.read_uint16(location) & 0xFF, location)

    def read_equation_type(self, location: EepromLocation) -> CalCoefEquationType:
        return decode_enum(CalCoefEquationType, self.read_uint16(location) >> 8, location)

    def read_settling_time(self, location: EepromLocation) -> SettlingTime:
        return self._read_enum(SettlingTime, location)

    def read_thermocouple_type(self, location: EepromLocation) -> ThermocoupleType:
        return self._read_enum(ThermocoupleType, location)

    def read_fatigue_options(self) -> FatigueOptions:
        modulus, ratio, threshold, mode = self._access.read_eeprom_many(
            [
                ee.FATIGUE_YOUNGS_MODULUS,
                ee.FATIGUE_POISSONS_RATIO,
                ee.FATIGUE_PEAK_VALLEY_THRESHOLD,
                ee.FATIGUE_MODE,
            ]
        )
        return FatigueOptions(
            young_modulus=modulus.as_float(),
            poisson_ratio=ratio.as_float(),
            peak_valley_threshold=threshold.as_uint16(),
            raw_mode=mode.as_uint16() == 1,
        )

    def read_histogram_options(self) -> HistogramOptions:
        rate, start, size = self._access.read_eeprom_many([ee.HISTOGRAM_RATE, ee.BIN_START, ee.BIN_SIZE])
        return HistogramOptions(
            transmit_rate=rate.as_uint16(),
            bin_start=start.as_uint16(),
            bin_size=size.as_uint16(),
        )

    def clear_histogram(self) -> None:
        self.write_uint16(ee.RESET_BINS, RESET_HISTOGRAM_BINS)
