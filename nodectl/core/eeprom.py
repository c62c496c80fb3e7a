"""Read-through / write-through register cache for a single node."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TypeVar

from nodectl.core.errors import CommunicationError
from nodectl.core.model import AccessSettings, EepromLocation, Value
from nodectl.core.protocol import WirelessProtocol
from nodectl.transports.base import BaseStationLink

LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


class NodeEeprom:
    """Mediates every register access of one node.

    Reads are served from the cache while ``use_cache`` is enabled; misses go to
    the base station link, optionally as one grouped read, and are retried up
    to ``num_retries`` times. Writes always reach the node and then refresh the
    cached entry so later reads see the written value.
    """

    def __init__(
        self,
        node_address: int,
        base_station: BaseStationLink,
        protocol: WirelessProtocol,
        settings: AccessSettings,
    ) -> None:
        self.node_address = node_address
        self.protocol = protocol
        self._base_station = base_station
        self._settings = replace(settings)
        self._cache: dict[int, Value] = {}

    @property
    def settings(self) -> AccessSettings:
        return replace(self._settings)

    @property
    def base_station(self) -> BaseStationLink:
        return self._base_station

    def set_base_station(self, base_station: BaseStationLink) -> None:
        self._base_station = base_station

    def update_settings(self, settings: AccessSettings) -> None:
        self._settings = replace(settings)

    def cached(self, location: EepromLocation) -> Value | None:
        value = self._cache.get(location.address)
        # an entry recorded with another width belongs to a different register view
        if value is None or value.value_type is not location.value_type:
            return None
        return value

    def seed(self, location: EepromLocation, value: Value) -> None:
        """Record a value already read from the node by other means."""
        if self._settings.use_cache:
            self._cache[location.address] = value

    def clear_cache(self) -> None:
        self._cache.clear()

    def clear_cache_location(self, location: EepromLocation) -> None:
        self._cache.pop(location.address, None)

    def read(self, location: EepromLocation) -> Value:
        return self.read_many([location])[0]

    def read_many(self, locations: Sequence[EepromLocation]) -> list[Value]:
        results: dict[int, Value] = {}
        missing: list[EepromLocation] = []
        for location in locations:
            hit = self.cached(location) if self._settings.use_cache else None
            if hit is not None:
                LOGGER.debug("node %s: cache hit for %s", self.node_address, location.name)
                results[location.address] = hit
            elif location.address not in {m.address for m in missing}:
                missing.append(location)

        if missing:
            group = self._settings.use_group_read and self.protocol.supports_group_read
            batches = [missing] if group else [[location] for location in missing]
            for batch in batches:
                values = self._with_retries(
                    f"read {', '.join(loc.name for loc in batch)}",
                    lambda batch=batch: self._base_station.read_eeprom(
                        self.node_address,
                        batch,
                        protocol=self.protocol,
                        group_read=group,
                    ),
                )
                if len(values) != len(batch):
                    raise CommunicationError(
                        f"Node {self.node_address} returned {len(values)} values for {len(batch)} registers"
                    )
                for location, value in zip(batch, values):
                    results[location.address] = value
                    if self._settings.use_cache:
                        self._cache[location.address] = value

        return [results[location.address] for location in locations]

    def write(self, location: EepromLocation, value: Value) -> None:
        self._with_retries(
            f"write {location.name}",
            lambda: self._base_station.write_eeprom(
                self.node_address,
                location,
                value,
                protocol=self.protocol,
            ),
        )
        self._cache[location.address] = value

    def _with_retries(self, what: str, attempt: Callable[[], _T]) -> _T:
        attempts = self._settings.num_retries + 1
        attempt_number = 1
        while True:
            try:
                return attempt()
            except CommunicationError as exc:
                LOGGER.warning(
                    "node %s: %s failed (attempt %d of %d): %s",
                    self.node_address,
                    what,
                    attempt_number,
                    attempts,
                    exc,
                )
                if attempt_number >= attempts:
                    raise
                attempt_number += 1
