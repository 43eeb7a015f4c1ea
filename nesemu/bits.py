"""Bit and byte helpers shared by the emulator components."""

from __future__ import annotations

import enum
from typing import Protocol


class Bit(enum.IntFlag):
    """Single-bit masks within a byte."""

    BIT0 = 0x01
    BIT1 = 0x02
    BIT2 = 0x04
    BIT3 = 0x08
    BIT4 = 0x10
    BIT5 = 0x20
    BIT6 = 0x40
    BIT7 = 0x80


_BIT_REVERSE = (
    0x0, 0x8, 0x4, 0xC, 0x2, 0xA, 0x6, 0xE,
    0x1, 0x9, 0x5, 0xD, 0x3, 0xB, 0x7, 0xF,
)


class ReadableMemory(Protocol):
    """Anything that can be read from and peeked at by address."""

    def read(self, address: int) -> int: ...

    def seek(self, address: int) -> int: ...


def get_bits(value: int, start_bit: int, end_bit: int = 0) -> int:
    """Return the bits from ``start_bit`` to ``end_bit`` (both inclusive).

    If ``end_bit`` is not above ``start_bit`` only the single bit at
    ``start_bit`` is returned.
    """
    width = max(end_bit - start_bit, 0) + 1
    return (value >> start_bit) & ((1 << width) - 1)


def get_dword(
    memory: ReadableMemory,
    start_address: int,
    page_wrap: bool = False,
    read_instead_of_seek: bool = False,
) -> int:
    """Read a little-endian 16-bit word starting at ``start_address``.

    With ``page_wrap`` the high byte is fetched from the start of the same
    256-byte page when the low byte sits at the end of a page.
    """
    fetch = memory.read if read_instead_of_seek else memory.seek
    lower = fetch(start_address)
    end_address = (start_address + 1) & 0xFFFF
    if page_wrap:
        end_address = (start_address & 0xFF00) + (end_address % 256)
    upper = fetch(end_address)
    return ((upper << 8) | lower) & 0xFFFF


def flip_byte(value: int) -> int:
    """Reverse the order of the bits in a byte."""
    value &= 0xFF
    return (_BIT_REVERSE[value & 0x0F] << 4) | _BIT_REVERSE[value >> 4]


def approx_sin(t: float) -> float:
    """A cheap cubic approximation of ``sin(t)``."""
    j = t * 0.15915
    j = j - int(j)
    return 20.785 * j * (j - 0.5) * (j - 1.0)


def vec_split(data: bytes | bytearray, start: int, end: int) -> bytes:
    """Return the bytes of ``data`` from ``start`` (inclusive) to ``end`` (exclusive)."""
    if start >= end:
        raise ValueError("start is greater than or equal to end")
    if end > len(data):
        raise ValueError("end is greater than data length")
    return bytes(data[start:end])


def to_signed(value: int) -> int:
    """Interpret a byte as a two's-complement signed value."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value