"""Per-node capability model built from a feature profile and node info."""

from __future__ import annotations

from enum import Enum

from nodectl.core.errors import NotSupportedError
from nodectl.core.model import ChannelMask, EepromLocation, FeatureProfile, NodeInfo
from nodectl.core.profile_match import best_profile_for_model
from nodectl.core.types import ChannelSetting, SamplingMode


class Capability(str, Enum):
    SYNC_SAMPLING = "sync_sampling"
    NON_SYNC_SAMPLING = "non_sync_sampling"
    SYNC_BURST_SAMPLING = "sync_burst_sampling"
    ARMED_DATALOG_SAMPLING = "armed_datalog_sampling"
    SYNC_EVENT_SAMPLING = "sync_event_sampling"
    FATIGUE_CONFIG = "fatigue_config"
    HISTOGRAM_CONFIG = "histogram_config"
    AUTO_CAL = "auto_cal"
    AUTO_BALANCE = "auto_balance"


SAMPLING_MODE_CAPABILITIES: dict[SamplingMode, Capability] = {
    SamplingMode.SYNC: Capability.SYNC_SAMPLING,
    SamplingMode.NON_SYNC: Capability.NON_SYNC_SAMPLING,
    SamplingMode.SYNC_BURST: Capability.SYNC_BURST_SAMPLING,
    SamplingMode.ARMED_DATALOG: Capability.ARMED_DATALOG_SAMPLING,
    SamplingMode.SYNC_EVENT: Capability.SYNC_EVENT_SAMPLING,
}

# Capabilities a profile may list under "capabilities", optionally with a minimum firmware.
PROFILE_CAPABILITIES = frozenset(
    {Capability.FATIGUE_CONFIG, Capability.HISTOGRAM_CONFIG, Capability.AUTO_CAL}
)


class NodeFeatures:
    """What a node of a given model and firmware can do.

    Immutable once built. ``supports`` answers capability queries and ``locate``
    maps a channel setting to the register holding it.
    """

    def __init__(self, info: NodeInfo, profile: FeatureProfile) -> None:
        self._info = info
        self._profile = profile

    @classmethod
    def create(cls, info: NodeInfo, profiles: dict[str, FeatureProfile]) -> NodeFeatures:
        profile = best_profile_for_model(info.model, profiles)
        if profile is None:
            raise NotSupportedError(
                f"Node model {info.model}",
                f"Node model {info.model} has no feature profile. Add one under the user profile directory.",
            )
        return cls(info, profile)

    @property
    def node_info(self) -> NodeInfo:
        return self._info

    @property
    def profile(self) -> FeatureProfile:
        return self._profile

    def channels(self) -> tuple[int, ...]:
        return self._profile.channels

    def sampling_modes(self) -> tuple[SamplingMode, ...]:
        return self._profile.sampling_modes

    def supports(self, capability: Capability, channel: int | None = None) -> bool:
        if capability is Capability.AUTO_BALANCE:
            if channel is None:
                return bool(self._profile.auto_balance_channels)
            return channel in self._profile.auto_balance_channels

        for mode, mode_capability in SAMPLING_MODE_CAPABILITIES.items():
            if capability is mode_capability:
                return mode in self._profile.sampling_modes

        if capability not in PROFILE_CAPABILITIES or capability.value not in self._profile.capabilities:
            return False
        min_firmware = self._profile.capabilities[capability.value]
        return min_firmware is None or self._info.firmware_version >= min_firmware

    def supports_sampling_mode(self, mode: SamplingMode) -> bool:
        return self.supports(SAMPLING_MODE_CAPABILITIES[mode])

    def supports_auto_balance(self, channel: int) -> bool:
        return self.supports(Capability.AUTO_BALANCE, channel)

    def supported_capabilities(self) -> tuple[Capability, ...]:
        return tuple(capability for capability in Capability if self.supports(capability))

    def locate(self, setting: ChannelSetting, mask: ChannelMask) -> EepromLocation:
        for group in self._profile.channel_groups:
            if group.channels == mask and setting.value in group.settings:
                return group.settings[setting.value]
        raise NotSupportedError(
            setting.value,
            f"The {setting.value} setting is not supported for channel(s) {mask} by this Node.",
        )

    def channel_settings(self) -> dict[ChannelSetting, tuple[ChannelMask, ...]]:
        result: dict[ChannelSetting, tuple[ChannelMask, ...]] = {}
        for setting in ChannelSetting:
            masks = tuple(g.channels for g in self._profile.channel_groups if setting.value in g.settings)
            if masks:
                result[setting] = masks
        return result
