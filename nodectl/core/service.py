"""Offline profile queries used by the CLI and the API module."""

from __future__ import annotations

from collections.abc import Sequence

from nodectl.core.errors import ProfileResolutionError
from nodectl.core.features import NodeFeatures
from nodectl.core.model import ChannelMask, EepromLocation, FeatureProfile, NodeInfo, Version
from nodectl.core.profile_loader import load_profiles
from nodectl.core.types import ChannelSetting


class ProfileService:
    """Answers feature questions for a model and firmware without any hardware."""

    def __init__(self) -> None:
        loaded = load_profiles()
        self.profiles = loaded.profiles
        self.load_warnings = loaded.warnings

    def list_profiles(self) -> list[FeatureProfile]:
        return sorted(self.profiles.values(), key=lambda p: p.id)

    def features_for(self, model: int, firmware: str | Version) -> NodeFeatures:
        if isinstance(firmware, str):
            try:
                firmware = Version.parse(firmware)
            except ValueError as exc:
                raise ProfileResolutionError(str(exc)) from exc
        info = NodeInfo(model=model, firmware_version=firmware, region_code=0)
        return NodeFeatures.create(info, self.profiles)

    def locate(
        self,
        model: int,
        firmware: str | Version,
        setting: str,
        channels: Sequence[int],
    ) -> EepromLocation:
        try:
            channel_setting = ChannelSetting(setting)
        except ValueError:
            available = ", ".join(s.value for s in ChannelSetting)
            raise ProfileResolutionError(
                f"Unknown channel setting '{setting}'. Available: {available}"
            ) from None
        try:
            mask = ChannelMask.of(*channels)
        except ValueError as exc:
            raise ProfileResolutionError(str(exc)) from exc
        return self.features_for(model, firmware).locate(channel_setting, mask)
