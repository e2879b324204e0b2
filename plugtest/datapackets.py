"""Measurement packets for each socket under test."""

from __future__ import annotations

from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Iterator

ARRAY_SIZE = 3


@dataclass
class DataPacket:
    """Live state and counters of one socket."""

    en: bool = False
    action: int = 0
    all: int = 0
    ok: int = 0
    err: int = 0
    value: int = 0

    def clear(self) -> None:
        """Reset every field to zero."""
        for item in fields(self):
            setattr(self, item.name, item.default)


class DataPackets:
    """A fixed-size collection of :class:`DataPacket`."""

    def __init__(self, size: int = ARRAY_SIZE) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self._packets = [DataPacket() for _ in range(size)]

    def get(self, index: int) -> DataPacket:
        """Return the packet at ``index``; raises IndexError when out of range."""
        if not 0 <= index < len(self._packets):
            raise IndexError(f"packet index out of range: {index}")
        return self._packets[index]

    def clear(self, index: int) -> None:
        self.get(index).clear()

    def clear_all(self) -> None:
        for packet in self._packets:
            packet.clear()

    def __len__(self) -> int:
        return len(self._packets)

    def __iter__(self) -> Iterator[DataPacket]:
        return iter(self._packets)


@lru_cache(maxsize=None)
def shared_packets() -> DataPackets:
    """Return the process-wide packet collection."""
    return DataPackets()