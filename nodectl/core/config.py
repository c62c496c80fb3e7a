"""Node configuration objects verified and applied through a register accessor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from nodectl.core import eeprom_map as ee
from nodectl.core.eeprom_helper import NodeEepromHelper
from nodectl.core.errors import InvalidConfigError
from nodectl.core.features import NodeFeatures
from nodectl.core.model import ChannelMask, ConfigIssue, ConfigIssueCategory, ConfigIssues
from nodectl.core.types import DefaultMode, SamplingMode, TransmitPower

MIN_INACTIVITY_TIMEOUT = 5
MIN_CHECK_RADIO_INTERVAL = 1
MAX_CHECK_RADIO_INTERVAL = 60
MAX_NUM_SWEEPS = 65535 * 100
MAX_LOST_BEACON_TIMEOUT = 600


class NodeConfigurator(Protocol):
    def verify(self, features: NodeFeatures, helper: NodeEepromHelper) -> ConfigIssues: ...

    def apply(self, features: NodeFeatures, helper: NodeEepromHelper) -> None: ...


@dataclass
class NodeConfig:
    """A set of node settings to change; fields left as None are untouched."""

    default_mode: DefaultMode | None = None
    inactivity_timeout: int | None = None
    check_radio_interval: int | None = None
    transmit_power: TransmitPower | None = None
    sampling_mode: SamplingMode | None = None
    active_channels: ChannelMask | None = None
    num_sweeps: int | None = None
    unlimited_duration: bool | None = None
    lost_beacon_timeout: int | None = None

    def verify(self, features: NodeFeatures, helper: NodeEepromHelper) -> ConfigIssues:
        issues: list[ConfigIssue] = []

        if self.sampling_mode is not None and not features.supports_sampling_mode(self.sampling_mode):
            issues.append(
                ConfigIssue(
                    ConfigIssueCategory.SAMPLING_MODE,
                    f"Sampling mode {self.sampling_mode.name} is not supported by this Node.",
                )
            )

        if self.active_channels is not None:
            if self.active_channels.count() == 0:
                issues.append(
                    ConfigIssue(ConfigIssueCategory.ACTIVE_CHANNELS, "At least one channel must be active.")
                )
            invalid = [ch for ch in self.active_channels.channels() if ch not in features.channels()]
            if invalid:
                issues.append(
                    ConfigIssue(
                        ConfigIssueCategory.ACTIVE_CHANNELS,
                        f"Channel(s) {invalid} do not exist on this Node.",
                    )
                )

        if self.inactivity_timeout is not None and not (
            MIN_INACTIVITY_TIMEOUT <= self.inactivity_timeout <= 0xFFFF
        ):
            issues.append(
                ConfigIssue(
                    ConfigIssueCategory.INACTIVITY_TIMEOUT,
                    f"Inactivity timeout must be between {MIN_INACTIVITY_TIMEOUT} and 65535 seconds.",
                )
            )

        if self.check_radio_interval is not None and not (
            MIN_CHECK_RADIO_INTERVAL <= self.check_radio_interval <= MAX_CHECK_RADIO_INTERVAL
        ):
            issues.append(
                ConfigIssue(
                    ConfigIssueCategory.CHECK_RADIO_INTERVAL,
                    f"Check radio interval must be between {MIN_CHECK_RADIO_INTERVAL} and "
                    f"{MAX_CHECK_RADIO_INTERVAL} seconds.",
                )
            )

        if self.num_sweeps is not None and not (100 <= self.num_sweeps <= MAX_NUM_SWEEPS):
            issues.append(
                ConfigIssue(
                    ConfigIssueCategory.NUM_SWEEPS,
                    f"Number of sweeps must be between 100 and {MAX_NUM_SWEEPS}.",
                )
            )

        if self.lost_beacon_timeout is not None and not (
            0 <= self.lost_beacon_timeout <= MAX_LOST_BEACON_TIMEOUT
        ):
            issues.append(
                ConfigIssue(
                    ConfigIssueCategory.LOST_BEACON_TIMEOUT,
                    f"Lost beacon timeout must be between 0 and {MAX_LOST_BEACON_TIMEOUT} minutes.",
                )
            )

        return tuple(issues)

    def apply(self, features: NodeFeatures, helper: NodeEepromHelper) -> None:
        issues = self.verify(features, helper)
        if issues:
            raise InvalidConfigError(issues)

        if self.default_mode is not None:
            helper.write_uint16(ee.DEFAULT_MODE, self.default_mode)
        if self.inactivity_timeout is not None:
            helper.write_uint16(ee.INACTIVITY_TIMEOUT, self.inactivity_timeout)
        if self.check_radio_interval is not None:
            helper.write_uint16(ee.CHECK_RADIO_INTERVAL, self.check_radio_interval)
        if self.transmit_power is not None:
            helper.write_uint16(ee.TRANSMIT_POWER, self.transmit_power)
        if self.sampling_mode is not None:
            helper.write_uint16(ee.SAMPLING_MODE, self.sampling_mode)
        if self.active_channels is not None:
            helper.write_uint16(ee.ACTIVE_CHANNEL_MASK, self.active_channels.mask)
        if self.num_sweeps is not None:
            helper.write_uint16(ee.NUM_SWEEPS, self.num_sweeps // 100)
        if self.unlimited_duration is not None:
            mode = self.sampling_mode if self.sampling_mode is not None else helper.read_sampling_mode()
            location = ee.UNLIMITED_DATALOG if mode is SamplingMode.ARMED_DATALOG else ee.UNLIMITED_SAMPLING
            helper.write_uint16(location, 1 if self.unlimited_duration else 0)
        if self.lost_beacon_timeout is not None:
            helper.write_uint16(ee.LOST_BEACON_TIMEOUT, self.lost_beacon_timeout)
