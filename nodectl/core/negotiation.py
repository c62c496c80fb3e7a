"""Determining which protocol dialect a node speaks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from nodectl.core import eeprom_map as ee
from nodectl.core.eeprom import NodeEeprom
from nodectl.core.eeprom_helper import decode_firmware_version
from nodectl.core.errors import CommunicationError
from nodectl.core.model import AccessSettings, Value, Version
from nodectl.core.protocol import DIALECTS, WirelessProtocol, protocol_for_firmware
from nodectl.transports.base import BaseStationLink

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NegotiatedProtocol:
    protocol: WirelessProtocol
    firmware_version: Version
    firmware_value: Value
    answered_by: WirelessProtocol


class ProtocolNegotiator:
    """Probes a node with each dialect, newest first, until one answers.

    Each round tries every dialect once with a retry-free temporary cache; up to
    ``settings.num_retries + 1`` rounds are made. Probing only shows the node is
    reachable: the dialect reported is chosen from the firmware version read.
    """

    def negotiate(
        self,
        base_station: BaseStationLink,
        node_address: int,
        settings: AccessSettings,
    ) -> NegotiatedProtocol:
        if settings.num_retries < 0:
            raise ValueError("The number of retries cannot be negative")
        probe_settings = replace(settings, num_retries=0)
        rounds = settings.num_retries + 1
        round_number = 0

        while True:
            round_number += 1
            for dialect in DIALECTS:
                if dialect is not DIALECTS[0]:
                    # fallback dialects share the page download already tried
                    probe_settings.use_group_read = False

                eeprom = NodeEeprom(node_address, base_station, dialect, probe_settings)
                try:
                    value = eeprom.read(ee.FIRMWARE_VER)
                except CommunicationError as exc:
                    LOGGER.debug("node %s: no answer using protocol %s: %s", node_address, dialect, exc)
                    if dialect is DIALECTS[-1] and round_number >= rounds:
                        LOGGER.warning(
                            "node %s: protocol negotiation failed after %d round(s)", node_address, rounds
                        )
                        raise
                    continue

                firmware_version = decode_firmware_version(value)
                protocol = protocol_for_firmware(firmware_version)
                LOGGER.info(
                    "node %s: firmware %s answered protocol %s, using protocol %s",
                    node_address,
                    firmware_version,
                    dialect,
                    protocol,
                )
                return NegotiatedProtocol(
                    protocol=protocol,
                    firmware_version=firmware_version,
                    firmware_value=value,
                    answered_by=dialect,
                )

            LOGGER.warning(
                "node %s: protocol negotiation round %d of %d failed",
                node_address,
                round_number,
                rounds,
            )
