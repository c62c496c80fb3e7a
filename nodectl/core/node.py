"""Wireless node facade used by applications, the API module, and the CLI."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from nodectl.core import eeprom_map as ee
from nodectl.core.config import NodeConfigurator
from nodectl.core.eeprom import NodeEeprom
from nodectl.core.eeprom_helper import NodeEepromHelper
from nodectl.core.errors import InvalidConfigError, NodeCommunicationError, NotSupportedError
from nodectl.core.features import Capability, NodeFeatures
from nodectl.core.model import (
    AccessSettings,
    AutoCalResult,
    ChannelMask,
    ConfigIssue,
    ConfigIssueCategory,
    ConfigIssues,
    EepromLocation,
    FatigueOptions,
    FeatureProfile,
    HistogramOptions,
    LinearEquation,
    PingResponse,
    RadioFeatures,
    Value,
    ValueType,
    Version,
)
from nodectl.core.negotiation import ProtocolNegotiator
from nodectl.core.profile_loader import load_profiles
from nodectl.core.protocol import WirelessProtocol
from nodectl.core.types import (
    MODEL_SHM_LINK_2,
    AutoBalanceOption,
    CalCoefEquationType,
    CalCoefUnit,
    ChannelSetting,
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
from nodectl.transports.base import BaseStationLink

LOGGER = logging.getLogger(__name__)

# Values written to CYCLE_POWER.
RESET_NODE = 0x01
RESET_RADIO = 0x02

AUTO_BALANCE_TARGETS: dict[AutoBalanceOption, int] = {
    AutoBalanceOption.LOW: 1024,
    AutoBalanceOption.MIDSCALE: 2048,
    AutoBalanceOption.HIGH: 3072,
}


class WirelessNode:
    """A remote node reached through a base station.

    The protocol dialect, register cache and feature model are built on first
    use and kept for the lifetime of the object. A failed protocol negotiation
    leaves neither a protocol nor a cache behind, so the next call starts over.
    """

    def __init__(
        self,
        node_address: int,
        base_station: BaseStationLink,
        frequency: Frequency | None = None,
        *,
        settings: AccessSettings | None = None,
        profiles: dict[str, FeatureProfile] | None = None,
        negotiator: ProtocolNegotiator | None = None,
    ) -> None:
        if not 0 <= node_address <= 0xFFFF:
            raise ValueError(f"Node address {node_address} is out of range (0-65535)")
        self._address = node_address
        self._base_station = base_station
        self._frequency = frequency
        self._settings = replace(settings) if settings is not None else AccessSettings()
        self._profiles = profiles
        self._negotiator = negotiator or ProtocolNegotiator()
        self._protocol: WirelessProtocol | None = None
        self._eeprom: NodeEeprom | None = None
        self._features: NodeFeatures | None = None
        self._helper = NodeEepromHelper(self)
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"WirelessNode(node_address={self._address})"

    # lazily built collaborators

    def protocol(self) -> WirelessProtocol:
        return self._node_eeprom().protocol

    def _node_eeprom(self) -> NodeEeprom:
        eeprom = self._eeprom
        if eeprom is None:
            with self._lock:
                eeprom = self._eeprom
                if eeprom is None:
                    eeprom = self._negotiate()
        return eeprom

    def _negotiate(self) -> NodeEeprom:
        result = self._negotiator.negotiate(self._base_station, self._address, self._settings)
        eeprom = NodeEeprom(self._address, self._base_station, result.protocol, self._settings)
        eeprom.seed(ee.FIRMWARE_VER, result.firmware_value)
        self._eeprom = eeprom
        self._protocol = result.protocol
        return eeprom

    def features(self) -> NodeFeatures:
        features = self._features
        if features is None:
            with self._lock:
                features = self._features
                if features is None:
                    info = self._helper.read_node_info()
                    profiles = self._profiles if self._profiles is not None else load_profiles().profiles
                    features = NodeFeatures.create(info, profiles)
                    LOGGER.debug(
                        "node %s: model %s firmware %s uses profile '%s'",
                        self._address,
                        info.model,
                        info.firmware_version,
                        features.profile.id,
                    )
                    self._features = features
        return features

    def _require(self, capability: Capability, feature: str, channel: int | None = None) -> NodeFeatures:
        features = self.features()
        if not features.supports(capability, channel):
            raise NotSupportedError(feature)
        return features

    def _locate(self, setting: ChannelSetting, mask: ChannelMask) -> EepromLocation:
        return self.features().locate(setting, mask)

    # base station and access settings

    @property
    def node_address(self) -> int:
        return self._address

    @property
    def base_station(self) -> BaseStationLink:
        return self._base_station

    def has_base_station(self, base_station: BaseStationLink) -> bool:
        return base_station == self._base_station

    def set_base_station(self, base_station: BaseStationLink) -> None:
        if self.has_base_station(base_station):
            return
        self._base_station = base_station
        if self._eeprom is not None:
            self._eeprom.set_base_station(base_station)

    @property
    def settings(self) -> AccessSettings:
        return replace(self._settings)

    def _push_settings(self) -> None:
        if self._eeprom is not None:
            self._eeprom.update_settings(self._settings)

    def use_group_read(self, use_group: bool) -> None:
        self._settings.use_group_read = use_group
        self._push_settings()

    def read_write_retries(self, num_retries: int) -> None:
        if num_retries < 0:
            raise ValueError("The number of retries cannot be negative")
        self._settings.num_retries = num_retries
        self._push_settings()

    def use_eeprom_cache(self, use_cache: bool) -> None:
        self._settings.use_cache = use_cache
        self._push_settings()

    def clear_eeprom_cache(self) -> None:
        if self._eeprom is not None:
            self._eeprom.clear_cache()

    # raw register access

    def read_eeprom(self, location: EepromLocation | int) -> Value:
        if isinstance(location, int):
            location = ee.by_address(location)
        return self._node_eeprom().read(location)

    def read_eeprom_many(self, locations: Sequence[EepromLocation]) -> list[Value]:
        return self._node_eeprom().read_many(locations)

    def write_eeprom(self, location: EepromLocation | int, value: Value | int | float) -> None:
        if isinstance(location, int):
            location = ee.by_address(location)
        if not isinstance(value, Value):
            value = Value.float32(value) if location.value_type is ValueType.FLOAT else Value.uint16(value)
        self._node_eeprom().write(location, value)

    # identity

    def frequency(self) -> Frequency:
        if self._frequency is None:
            self._frequency = self._helper.read_frequency()
        return self._frequency

    def firmware_version(self) -> Version:
        return self._helper.read_fw_version()

    def model(self) -> int:
        return self._helper.read_model()

    def serial(self) -> str:
        return self._helper.read_serial()

    def microcontroller(self) -> MicroControllerType:
        return self._helper.read_microcontroller()

    def radio_features(self) -> RadioFeatures:
        return self._helper.read_radio_features()

    def data_storage_size(self) -> int:
        return self._helper.read_data_storage_size()

    def region_code(self) -> RegionCode:
        return self._helper.read_region_code()

    def last_communication_time(self) -> datetime:
        return self._base_station.last_communication_time(self._address)

    # configuration

    def verify_config(self, config: NodeConfigurator) -> ConfigIssues:
        return config.verify(self.features(), self._helper)

    def apply_config(self, config: NodeConfigurator) -> None:
        try:
            config.apply(self.features(), self._helper)
        except InvalidConfigError as exc:
            raise InvalidConfigError(exc.issues, self._address) from exc

        # several settings only take effect after the radio restarts
        self.reset_radio()

    def get_num_datalog_sessions(self) -> int:
        return self._helper.read_num_datalog_sessions()

    def get_default_mode(self) -> DefaultMode:
        return self._helper.read_default_mode()

    def get_inactivity_timeout(self) -> int:
        return self._helper.read_inactivity_timeout()

    def get_check_radio_interval(self) -> int:
        return self._helper.read_check_radio_interval()

    def get_transmit_power(self) -> TransmitPower:
        return self._helper.read_transmit_power()

    def get_sampling_mode(self) -> SamplingMode:
        return self._helper.read_sampling_mode()

    def get_active_channels(self) -> ChannelMask:
        return self._helper.read_channel_mask()

    def get_sample_rate(self) -> SampleRate:
        return self._helper.read_sample_rate(self.get_sampling_mode())

    def get_num_sweeps(self) -> int:
        return self._helper.read_num_sweeps()

    def get_unlimited_duration(self) -> bool:
        return self._helper.read_unlimited_duration(self.get_sampling_mode())

    def get_data_format(self) -> DataFormat:
        return self._helper.read_data_format()

    def get_data_collection_method(self) -> DataCollectionMethod:
        return self._helper.read_collection_mode()

    def get_time_between_bursts(self) -> timedelta:
        self._require(Capability.SYNC_BURST_SAMPLING, "Burst Sampling")
        return self._helper.read_time_between_bursts()

    def get_lost_beacon_timeout(self) -> int:
        return self._helper.read_lost_beacon_timeout()

    def get_hardware_gain(self, mask: ChannelMask) -> float:
        return self._helper.read_hardware_gain(self._locate(ChannelSetting.HARDWARE_GAIN, mask))

    def get_hardware_offset(self, mask: ChannelMask) -> int:
        return self._helper.read_hardware_offset(self._locate(ChannelSetting.HARDWARE_OFFSET, mask))

    def get_linear_equation(self, mask: ChannelMask) -> LinearEquation:
        return self._helper.read_linear_equation(self._locate(ChannelSetting.LINEAR_EQUATION, mask))

    def get_unit(self, mask: ChannelMask) -> CalCoefUnit:
        return self._helper.read_unit(self._locate(ChannelSetting.UNIT, mask))

    def get_equation_type(self, mask: ChannelMask) -> CalCoefEquationType:
        return self._helper.read_equation_type(self._locate(ChannelSetting.EQUATION_TYPE, mask))

    def get_filter_settling_time(self, mask: ChannelMask) -> SettlingTime:
        return self._helper.read_settling_time(self._locate(ChannelSetting.FILTER_SETTLING_TIME, mask))

    def get_thermocouple_type(self, mask: ChannelMask) -> ThermocoupleType:
        return self._helper.read_thermocouple_type(self._locate(ChannelSetting.THERMOCOUPLE_TYPE, mask))

    def get_fatigue_options(self) -> FatigueOptions:
        self._require(Capability.FATIGUE_CONFIG, "FatigueOptions configuration")
        return self._helper.read_fatigue_options()

    def get_histogram_options(self) -> HistogramOptions:
        self._require(Capability.HISTOGRAM_CONFIG, "HistogramOptions configuration")
        return self._helper.read_histogram_options()

    # commands

    def ping(self) -> PingResponse:
        return self._base_station.ping(self._address)

    def sleep(self) -> bool:
        return self._base_station.sleep(self._address)

    def set_to_idle(self) -> Any:
        return self._base_station.set_to_idle(self._address)

    def cycle_power(self) -> None:
        self.write_eeprom(ee.CYCLE_POWER, Value.uint16(RESET_NODE))

    def reset_radio(self) -> None:
        self.write_eeprom(ee.CYCLE_POWER, Value.uint16(RESET_RADIO))

    def change_frequency(self, frequency: Frequency | int) -> None:
        if not Frequency.FREQ_11 <= frequency <= Frequency.FREQ_26:
            raise ValueError(
                f"Frequency {int(frequency)} is out of range ({int(Frequency.FREQ_11)}-{int(Frequency.FREQ_26)})"
            )
        frequency = Frequency(frequency)

        self.write_eeprom(ee.FREQUENCY, Value.uint16(frequency))
        # the node only switches frequency once its radio restarts
        self.reset_radio()
        self._frequency = frequency

    def erase(self) -> None:
        if not self._base_station.erase(self._address):
            raise NodeCommunicationError(self._address, "Failed to erase the Node.")

    def start_non_sync_sampling(self) -> None:
        self._require(Capability.NON_SYNC_SAMPLING, "Non-Synchronized Sampling")
        if self._helper.read_uint16(ee.SAMPLING_MODE) != SamplingMode.NON_SYNC:
            issue = ConfigIssue(
                ConfigIssueCategory.SAMPLING_MODE,
                "Configuration is not set for Non-Synchronized Sampling Mode.",
            )
            raise InvalidConfigError([issue], self._address)

        self._base_station.start_non_sync_sampling(self._address)

    def clear_histogram(self) -> None:
        self._require(Capability.HISTOGRAM_CONFIG, "Histogram configuration")
        self._helper.clear_histogram()
        # clearing only takes effect after a power cycle
        self.cycle_power()

    def auto_balance(self, channel: int, option: AutoBalanceOption) -> None:
        self._require(Capability.AUTO_BALANCE, f"AutoBalance on channel {channel}", channel)
        try:
            target = AUTO_BALANCE_TARGETS[AutoBalanceOption(option)]
        except (KeyError, ValueError):
            raise NotSupportedError(
                "AutoBalanceOption", f"The AutoBalanceOption {option!r} is not supported."
            ) from None
        offset_location = self._locate(ChannelSetting.HARDWARE_OFFSET, ChannelMask.of(channel))

        self._base_station.auto_balance(self._address, channel, target)

        # the node rewrites the hardware offset itself
        self._node_eeprom().clear_cache_location(offset_location)

    def auto_cal_shm_link(self) -> AutoCalResult:
        features = self._require(Capability.AUTO_CAL, "AutoCal")
        info = features.node_info
        if info.model != MODEL_SHM_LINK_2:
            raise NotSupportedError(
                "autoCal_shmLink", "autoCal_shmLink is not supported by this Node's model."
            )

        success, result = self._base_station.auto_cal(self._address, info.model, info.firmware_version)
        if not success:
            raise NodeCommunicationError(self._address, "AutoCal has failed.")
        return result
