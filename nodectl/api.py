"""Stable public API for building tooling on top of nodectl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from nodectl.core.config import NodeConfig, NodeConfigurator
from nodectl.core.errors import (
    CommunicationError,
    CommunicationTimeoutError,
    InvalidConfigError,
    NodeCommunicationError,
    NodectlError,
    NotSupportedError,
    ProfileLoadError,
    ProfileResolutionError,
    ProfileValidationError,
    UnexpectedValueError,
)
from nodectl.core.features import Capability, NodeFeatures
from nodectl.core.model import (
    AccessSettings,
    AutoCalResult,
    ChannelMask,
    ConfigIssue,
    ConfigIssueCategory,
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
from nodectl.core.node import WirelessNode
from nodectl.core.protocol import WirelessProtocol
from nodectl.core.service import ProfileService
from nodectl.core.types import AutoBalanceOption, ChannelSetting, Frequency, SamplingMode
from nodectl.transports.base import BaseStationLink

__all__ = [
    "NodectlError",
    "CommunicationError",
    "CommunicationTimeoutError",
    "InvalidConfigError",
    "NodeCommunicationError",
    "NotSupportedError",
    "ProfileLoadError",
    "ProfileResolutionError",
    "ProfileValidationError",
    "UnexpectedValueError",
    "AccessSettings",
    "AutoCalResult",
    "ChannelMask",
    "ConfigIssue",
    "ConfigIssueCategory",
    "EepromLocation",
    "FatigueOptions",
    "FeatureProfile",
    "HistogramOptions",
    "LinearEquation",
    "PingResponse",
    "RadioFeatures",
    "Value",
    "ValueType",
    "Version",
    "AutoBalanceOption",
    "ChannelSetting",
    "Frequency",
    "SamplingMode",
    "Capability",
    "NodeFeatures",
    "NodeConfig",
    "NodeConfigurator",
    "WirelessNode",
    "WirelessProtocol",
    "BaseStationLink",
    "ProfileService",
    "open_node",
]


def open_node(
    node_address: int,
    base_station: BaseStationLink,
    *,
    frequency: Frequency | None = None,
    settings: AccessSettings | None = None,
) -> WirelessNode:
    """Create a node facade bound to *base_station*.

    Nothing is sent to the node until the first operation that needs it; the
    protocol dialect and feature profile are resolved then and kept.
    """
    return WirelessNode(node_address, base_station, frequency, settings=settings)
