"""Cartridges: PRG ROM, CHR ROM and optional PRG RAM behind a mapper."""

from __future__ import annotations

import abc
import logging
from collections.abc import Iterator

from nesemu.ines import INesRom, MirrorType
from nesemu.memory import MemoryRegion, MemoryRepeater

_log = logging.getLogger(__name__)

PRG_RAM_SIZE = 8192


class Cartridge(MemoryRegion):
    """A cartridge whose memory layout is decided by its mapper."""

    def __init__(self, map_number: int) -> None:
        super().__init__(0x0000, 0xFFFF)
        self.map_number = map_number
        self.mirroring_type = MirrorType.NOT_SET
        self.prg_rom: MemoryRepeater | None = None
        self.chr_rom: MemoryRepeater | None = None
        self.prg_ram: MemoryRepeater | None = None

    @abc.abstractmethod
    def load_ines(self, rom: INesRom) -> None:
        """Lay out the ROM image in this cartridge's address space."""

    def _regions(self) -> Iterator[MemoryRepeater]:
        for region in (self.prg_rom, self.chr_rom, self.prg_ram):
            if region is not None:
                yield region

    def _region_for(self, address: int) -> MemoryRepeater | None:
        return next((r for r in self._regions() if r.contains(address)), None)

    def contains(self, address: int) -> bool:
        return self._region_for(address) is not None

    def read(self, address: int) -> int:
        region = self._region_for(address)
        if region is None:
            _log.error("cartridge: couldn't read at memory address %#06x", address)
            return 0
        return region.read(address)

    def write(self, address: int, value: int) -> None:
        region = self._region_for(address)
        if region is None:
            _log.error("cartridge: couldn't write at memory address %#06x", address)
            return
        region.write(address, value)

    def seek(self, address: int) -> int:
        region = self._region_for(address)
        if region is None:
            _log.error("cartridge: couldn't seek to memory address %#06x", address)
            return 0
        return region.seek(address)


class CartridgeMapping0(Cartridge):
    """Mapper 0 (NROM): PRG ROM mirrored over 0x8000-0xFFFF, CHR ROM at 0x0000-0x1FFF."""

    def __init__(self) -> None:
        super().__init__(0)

    def load_ines(self, rom: INesRom) -> None:
        if rom.prg_rom_data is None or rom.chr_rom_data is None:
            raise ValueError("ROM image has no PRG or CHR data")
        self.mirroring_type = rom.mirroring_type
        self.prg_rom = MemoryRepeater(0x8000, 0xFFFF, rom.prg_rom_data)
        self.chr_rom = MemoryRepeater(0x0000, 0x1FFF, rom.chr_rom_data)
        if rom.battery_present:
            self.prg_ram = MemoryRepeater(0x6000, 0x7FFF, bytearray(PRG_RAM_SIZE))