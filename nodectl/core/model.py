"""Core data models used across the register cache, features, and node facade."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from nodectl.core.types import SamplingMode

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)$")


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int

    @classmethod
    def parse(cls, text: str) -> Version:
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise ValueError(f"Invalid firmware version '{text}' (expected MAJOR.MINOR)")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


class ValueType(str, Enum):
    UINT16 = "uint16"
    FLOAT = "float"


@dataclass(frozen=True)
class EepromLocation:
    """An address in a node's register space plus the width of its value."""

    name: str
    address: int
    value_type: ValueType = ValueType.UINT16

    @property
    def size(self) -> int:
        return 4 if self.value_type is ValueType.FLOAT else 2


@dataclass(frozen=True)
class Value:
    """A typed value exchanged with the base station link."""

    value_type: ValueType
    value: int | float

    @classmethod
    def uint16(cls, value: int) -> Value:
        if not 0 <= int(value) <= 0xFFFF:
            raise ValueError(f"{value} does not fit in an unsigned 16-bit register")
        return cls(ValueType.UINT16, int(value))

    @classmethod
    def float32(cls, value: float) -> Value:
        return cls(ValueType.FLOAT, float(value))

    def as_uint16(self) -> int:
        return int(self.value) & 0xFFFF

    def as_float(self) -> float:
        return float(self.value)


@dataclass
class AccessSettings:
    """Retry and caching policy applied to register reads and writes."""

    num_retries: int = 3
    use_group_read: bool = True
    use_cache: bool = True

    def __post_init__(self) -> None:
        if self.num_retries < 0:
            raise ValueError("The number of retries cannot be negative")


@dataclass(frozen=True)
class ChannelMask:
    """Bitset of channels, channel 1 being the least significant bit."""

    mask: int = 0

    @classmethod
    def of(cls, *channels: int) -> ChannelMask:
        mask = 0
        for channel in channels:
            if not 1 <= channel <= 16:
                raise ValueError(f"Channel {channel} is out of range (1-16)")
            mask |= 1 << (channel - 1)
        return cls(mask)

    def enabled(self, channel: int) -> bool:
        return bool(self.mask & (1 << (channel - 1)))

    def channels(self) -> tuple[int, ...]:
        return tuple(ch for ch in range(1, 17) if self.enabled(ch))

    def count(self) -> int:
        return bin(self.mask).count("1")

    def __str__(self) -> str:
        return ",".join(str(ch) for ch in self.channels()) or "<none>"


class ConfigIssueCategory(str, Enum):
    SAMPLING_MODE = "sampling_mode"
    ACTIVE_CHANNELS = "active_channels"
    INACTIVITY_TIMEOUT = "inactivity_timeout"
    CHECK_RADIO_INTERVAL = "check_radio_interval"
    NUM_SWEEPS = "num_sweeps"
    LOST_BEACON_TIMEOUT = "lost_beacon_timeout"


@dataclass(frozen=True)
class ConfigIssue:
    category: ConfigIssueCategory
    description: str


ConfigIssues = tuple[ConfigIssue, ...]


@dataclass(frozen=True)
class LinearEquation:
    slope: float = 1.0
    offset: float = 0.0


@dataclass(frozen=True)
class FatigueOptions:
    young_modulus: float
    poisson_ratio: float
    peak_valley_threshold: int
    raw_mode: bool


@dataclass(frozen=True)
class HistogramOptions:
    transmit_rate: int
    bin_start: int
    bin_size: int


@dataclass(frozen=True)
class RadioFeatures:
    extended_range: bool


@dataclass(frozen=True)
class PingResponse:
    success: bool
    node_rssi: int = 0
    base_rssi: int = 0


@dataclass(frozen=True)
class AutoCalResult:
    completion_flag: int
    slope: float = 1.0
    offset: float = 0.0
    temperature: float = 0.0


@dataclass(frozen=True)
class NodeInfo:
    """The handful of register values a feature model is built from."""

    model: int
    firmware_version: Version
    region_code: int


@dataclass(frozen=True)
class ProfileMatch:
    models: tuple[int, ...]
    model_prefix: tuple[int, ...]


@dataclass(frozen=True)
class ChannelGroup:
    channels: ChannelMask
    settings: dict[str, EepromLocation]


@dataclass(frozen=True)
class FeatureProfile:
    id: str
    name: str
    match: ProfileMatch
    channels: tuple[int, ...]
    sampling_modes: tuple[SamplingMode, ...]
    capabilities: dict[str, Version | None]
    auto_balance_channels: tuple[int, ...] = ()
    channel_groups: tuple[ChannelGroup, ...] = ()
