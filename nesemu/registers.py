"""The 6502 register file."""

from __future__ import annotations

from dataclasses import dataclass

from nesemu.bits import Bit

RAW_LEN = 7
"""Size in bytes of the packed register file."""

_MASKS = {"pc": 0xFFFF, "s": 0xFF, "p": 0xFF, "a": 0xFF, "x": 0xFF, "y": 0xFF}


class _Flag:
    """A boolean view onto one bit of the processor status register."""

    def __init__(self, mask: int) -> None:
        self.mask = mask

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: CpuRegisters | None, objtype: type | None = None):
        if obj is None:
            return self
        return bool(obj.p & self.mask)

    def __set__(self, obj: CpuRegisters, value: bool) -> None:
        obj.p = (obj.p | self.mask) if value else (obj.p & ~self.mask)


@dataclass
class CpuRegisters:
    """Program counter, stack pointer, status, accumulator and index registers.

    Values are wrapped to the width of their register on assignment, so
    ``regs.s -= 1`` at zero gives 0xFF just as the hardware does.
    """

    pc: int = 0
    s: int = 0
    p: int = 0
    a: int = 0
    x: int = 0
    y: int = 0

    c = _Flag(Bit.BIT0)
    z = _Flag(Bit.BIT1)
    i = _Flag(Bit.BIT2)
    d = _Flag(Bit.BIT3)
    b = _Flag(Bit.BIT4)
    expansion = _Flag(Bit.BIT5)
    v = _Flag(Bit.BIT6)
    n = _Flag(Bit.BIT7)

    def __setattr__(self, name: str, value) -> None:
        mask = _MASKS.get(name)
        if mask is not None:
            value = int(value) & mask
        object.__setattr__(self, name, value)

    @property
    def pcl(self) -> int:
        """Low byte of the program counter."""
        return self.pc & 0xFF

    @pcl.setter
    def pcl(self, value: int) -> None:
        self.pc = (self.pc & 0xFF00) | (int(value) & 0xFF)

    @property
    def pch(self) -> int:
        """High byte of the program counter."""
        return self.pc >> 8

    @pch.setter
    def pch(self, value: int) -> None:
        self.pc = ((int(value) & 0xFF) << 8) | (self.pc & 0x00FF)

    def to_bytes(self) -> bytes:
        """Pack as PCL, PCH, S, P, A, X, Y."""
        return bytes((self.pcl, self.pch, self.s, self.p, self.a, self.x, self.y))

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> CpuRegisters:
        """Unpack the layout produced by :meth:`to_bytes`."""
        if len(data) != RAW_LEN:
            raise ValueError(f"register data must be {RAW_LEN} bytes, got {len(data)}")
        pcl, pch, s, p, a, x, y = data
        return cls(pc=(pch << 8) | pcl, s=s, p=p, a=a, x=x, y=y)