"""Register-access protocol dialects spoken by node firmware."""

from __future__ import annotations

from dataclasses import dataclass

from nodectl.core.model import Version


@dataclass(frozen=True)
class WirelessProtocol:
    name: str
    version: Version
    supports_group_read: bool

    def __str__(self) -> str:
        return self.name


V1_0 = WirelessProtocol(name="v1.0", version=Version(1, 0), supports_group_read=False)
V1_1 = WirelessProtocol(name="v1.1", version=Version(1, 1), supports_group_read=True)

# Probe order, newest dialect first.
DIALECTS: tuple[WirelessProtocol, ...] = (V1_1, V1_0)

# Lowest node firmware that speaks protocol v1.1.
FW_PROTOCOL_1_1 = Version(8, 21)


def protocol_for_firmware(firmware_version: Version) -> WirelessProtocol:
    return V1_1 if firmware_version >= FW_PROTOCOL_1_1 else V1_0
