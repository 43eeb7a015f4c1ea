"""The CPU's internal RAM and register file."""

from __future__ import annotations

from nesemu.memory import MemoryRegion, MemoryRepeater
from nesemu.registers import CpuRegisters

RAM_SIZE = 2048


class CpuMemoryMap(MemoryRegion):
    """2 KiB of work RAM mirrored across 0x0000-0x1FFF, plus the CPU registers."""

    def __init__(self) -> None:
        super().__init__(0x0000, 0x1FFF)
        self.registers = CpuRegisters()
        self.ram = MemoryRepeater(0x0000, 0x1FFF, bytearray(RAM_SIZE))

    def _check(self, address: int, action: str) -> None:
        if not self.ram.contains(address):
            raise IndexError(f"CPU memory map: tried to {action} an invalid memory address")

    def read(self, address: int) -> int:
        self._check(address, "read from")
        return self.ram.read(address)

    def write(self, address: int, value: int) -> None:
        self._check(address, "write to")
        self.ram.write(address, value)

    def seek(self, address: int) -> int:
        self._check(address, "seek to")
        return self.ram.seek(address)