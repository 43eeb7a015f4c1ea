"""The contents of an iNES (``.nes``) ROM image."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class MirrorType(enum.Enum):
    """How the cartridge mirrors the PPU name tables."""

    NOT_SET = enum.auto()
    ONE_WAY = enum.auto()
    HORIZONTAL = enum.auto()
    VERTICAL = enum.auto()
    FOUR_SCREEN = enum.auto()


@dataclass
class INesRom:
    """A parsed iNES ROM image.

    Lengths are in bytes. A battery means the PRG RAM at 0x6000-0x7FFF keeps
    its contents.
    """

    prg_rom_len: int = 0
    chr_rom_len: int = 0
    mapper_number: int = 0
    mirroring_type: MirrorType = MirrorType.HORIZONTAL
    battery_present: bool = False
    trainer_present: bool = False
    prg_rom_data: bytearray | None = None
    chr_rom_data: bytearray | None = None