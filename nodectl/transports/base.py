"""Base station link interface.

A link relays requests from the host to nodes over the radio. Concrete links
own framing, timeouts and encoding for each protocol dialect; failures to get
an answer are raised as ``CommunicationError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from nodectl.core.model import AutoCalResult, EepromLocation, PingResponse, Value, Version

if TYPE_CHECKING:
    from nodectl.core.protocol import WirelessProtocol


class BaseStationLink(Protocol):
    def read_eeprom(
        self,
        node_address: int,
        locations: Sequence[EepromLocation],
        *,
        protocol: WirelessProtocol,
        group_read: bool = False,
    ) -> list[Value]:
        """Read one value per location, in order.

        With ``group_read`` every location is fetched in a single round trip.
        """

    def write_eeprom(
        self,
        node_address: int,
        location: EepromLocation,
        value: Value,
        *,
        protocol: WirelessProtocol,
    ) -> None:
        """Write a single register."""

    def ping(self, node_address: int) -> PingResponse: ...

    def sleep(self, node_address: int) -> bool: ...

    def set_to_idle(self, node_address: int) -> Any: ...

    def erase(self, node_address: int) -> bool: ...

    def start_non_sync_sampling(self, node_address: int) -> None: ...

    def auto_balance(self, node_address: int, channel: int, target: int) -> None: ...

    def auto_cal(self, node_address: int, model: int, firmware_version: Version) -> tuple[bool, AutoCalResult]:
        """Run the on-node calibration routine and return (success, result)."""

    def last_communication_time(self, node_address: int) -> datetime: ...
