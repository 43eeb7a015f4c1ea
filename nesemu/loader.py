"""Parsing of iNES ROM files and construction of cartridges from them."""

from __future__ import annotations

import io
import logging
import os

from nesemu.bits import get_bits
from nesemu.cartridge import Cartridge, CartridgeMapping0
from nesemu.ines import INesRom, MirrorType

_log = logging.getLogger(__name__)

HEADER_SIZE = 16
TRAINER_SIZE = 512
PRG_BANK_SIZE = 16384
CHR_BANK_SIZE = 8192
MAGIC = b"NES\x1a"

_MAPPERS: dict[int, type[Cartridge]] = {0: CartridgeMapping0}


class RomFormatError(ValueError):
    """The data is not an iNES ROM this emulator can handle."""


def _read_padded(stream: io.BytesIO, size: int) -> bytearray:
    """Read ``size`` bytes, zero-filling whatever the stream lacks."""
    chunk = bytearray(stream.read(size))
    chunk.extend(bytes(size - len(chunk)))
    return chunk


def _mirror_type(flag_6: int) -> MirrorType:
    vertical = bool(get_bits(flag_6, 0))
    ignore_mirror = bool(get_bits(flag_6, 3))
    if ignore_mirror:
        return MirrorType.FOUR_SCREEN if vertical else MirrorType.ONE_WAY
    return MirrorType.VERTICAL if vertical else MirrorType.HORIZONTAL


def parse_ines_bytes(data: bytes | bytearray) -> INesRom:
    """Parse the bytes of an iNES image."""
    stream = io.BytesIO(bytes(data))
    header = _read_padded(stream, HEADER_SIZE)
    if bytes(header[:4]) != MAGIC:
        raise RomFormatError("not an iNES file")

    flag_6, flag_7 = header[6], header[7]
    if get_bits(flag_7, 2, 3) == 2:
        raise RomFormatError("NES 2.0 ROMs are not supported")

    rom = INesRom(
        prg_rom_len=header[4] * PRG_BANK_SIZE,
        chr_rom_len=header[5] * CHR_BANK_SIZE,
        mapper_number=(get_bits(flag_7, 4, 7) << 4) | get_bits(flag_6, 4, 7),
        mirroring_type=_mirror_type(flag_6),
        battery_present=bool(get_bits(flag_6, 1)),
        trainer_present=bool(get_bits(flag_6, 2)),
    )

    if rom.trainer_present:
        stream.read(TRAINER_SIZE)
        _log.warning("ROM contains a trainer, which is ignored")

    rom.prg_rom_data = _read_padded(stream, rom.prg_rom_len)
    rom.chr_rom_data = _read_padded(stream, rom.chr_rom_len)
    return rom


def parse_ines(path: str | os.PathLike[str]) -> INesRom:
    """Parse the iNES file at ``path``."""
    with open(path, "rb") as rom_file:
        return parse_ines_bytes(rom_file.read())


def load_cartridge(path: str | os.PathLike[str]) -> Cartridge:
    """Parse the file at ``path`` and load it into a cartridge of its mapper."""
    rom = parse_ines(path)
    cartridge_type = _MAPPERS.get(rom.mapper_number)
    if cartridge_type is None:
        raise RomFormatError(
            f"cartridge mapping number {rom.mapper_number} is not supported"
        )
    cartridge = cartridge_type()
    cartridge.load_ines(rom)
    return cartridge