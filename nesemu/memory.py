"""Address-ranged memory regions and mirrored byte buffers."""

from __future__ import annotations

import abc


class MemoryRegion(abc.ABC):
    """A component that answers for the inclusive address range it covers."""

    def __init__(self, start_address: int, end_address: int) -> None:
        self.start_address = start_address
        self.end_address = end_address

    def contains(self, address: int) -> bool:
        """Whether ``address`` lies within this region."""
        return self.start_address <= address <= self.end_address

    def read(self, address: int) -> int:
        """Read a byte; reads may have side effects, by default they do not."""
        return self.seek(address)

    @abc.abstractmethod
    def seek(self, address: int) -> int:
        """Peek at a byte without side effects."""

    @abc.abstractmethod
    def write(self, address: int, value: int) -> None:
        """Store a byte."""


class MemoryRepeater(MemoryRegion):
    """A byte buffer mirrored across a larger address range.

    The buffer is shared, not copied, so writes are visible to every holder.
    ``length`` limits how much of the buffer is used; it defaults to all of it.
    """

    def __init__(
        self,
        start_address: int,
        end_address: int,
        data: bytearray | None,
        length: int | None = None,
    ) -> None:
        super().__init__(start_address, end_address)
        self.data = data
        if length is None:
            length = len(data) if data is not None else 0
        self.data_len = length

    def lower_offset(self, address: int) -> int:
        """Map an address in the region onto an offset in the buffer."""
        if self.data_len == 0:
            raise ValueError("memory repeater has no data to map onto")
        offset = (address - self.start_address) & 0xFFFF
        return offset % self.data_len

    def _checked_offset(self, address: int, action: str) -> int:
        if not self.contains(address):
            raise ValueError(f"tried to {action} outside the boundary of a memory repeater")
        if self.data is None:
            raise ValueError(f"tried to {action} when the data has not been set")
        offset = self.lower_offset(address)
        if offset >= len(self.data):
            raise IndexError(f"tried to {action} outside the boundary of the data")
        return offset

    def read(self, address: int) -> int:
        return self.seek(address)

    def seek(self, address: int) -> int:
        return self.data[self._checked_offset(address, "read")]

    def write(self, address: int, value: int) -> None:
        self.data[self._checked_offset(address, "write")] = value & 0xFF