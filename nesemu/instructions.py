"""The 6502 opcode table and decoded-instruction record."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Instr(enum.Enum):
    """Instruction mnemonics."""

    INVALID = enum.auto()
    ADC = enum.auto()
    AND = enum.auto()
    ASL = enum.auto()
    BCC = enum.auto()
    BCS = enum.auto()
    BEQ = enum.auto()
    BIT = enum.auto()
    BMI = enum.auto()
    BNE = enum.auto()
    BPL = enum.auto()
    BRK = enum.auto()
    BVC = enum.auto()
    BVS = enum.auto()
    CLC = enum.auto()
    CLD = enum.auto()
    CLI = enum.auto()
    CLV = enum.auto()
    CMP = enum.auto()
    CPX = enum.auto()
    CPY = enum.auto()
    DEC = enum.auto()
    DEX = enum.auto()
    DEY = enum.auto()
    EOR = enum.auto()
    INC = enum.auto()
    INX = enum.auto()
    INY = enum.auto()
    JMP = enum.auto()
    JSR = enum.auto()
    LDA = enum.auto()
    LDX = enum.auto()
    LDY = enum.auto()
    LSR = enum.auto()
    NOP = enum.auto()
    ORA = enum.auto()
    PHA = enum.auto()
    PHP = enum.auto()
    PLA = enum.auto()
    PLP = enum.auto()
    ROL = enum.auto()
    ROR = enum.auto()
    RTI = enum.auto()
    RTS = enum.auto()
    SBC = enum.auto()
    SEC = enum.auto()
    SED = enum.auto()
    SEI = enum.auto()
    STA = enum.auto()
    STX = enum.auto()
    STY = enum.auto()
    TAX = enum.auto()
    TAY = enum.auto()
    TSX = enum.auto()
    TXA = enum.auto()
    TXS = enum.auto()
    TYA = enum.auto()


class AddrMode(enum.Enum):
    """Addressing modes; the value is the mode's short name."""

    INVALID = "----"
    ABS = "abs_"
    ABS_X = "absX"
    ABS_Y = "absY"
    IND = "ind_"
    IND_Y = "indY"
    X_IND = "Xind"
    ZPG = "zpg_"
    ZPG_X = "zpgX"
    ZPG_Y = "zpgY"
    ACC = "acc"
    IMM = "imm"
    IMPL = "impl"
    REL = "rel"


@dataclass(frozen=True)
class Opcode:
    """One entry of the opcode table."""

    raw: int
    instr: Instr
    addrm: AddrMode
    cycles: int
    check_pg_cross: bool
    instr_name: str
    addrm_type: str

    @property
    def valid(self) -> bool:
        """Whether the opcode has a usable addressing mode."""
        return self.addrm is not AddrMode.INVALID


_INVALID_NAME = "*NOP"


def _invalid(code: int) -> Opcode:
    return Opcode(code, Instr.INVALID, AddrMode.INVALID, 3, False, _INVALID_NAME,
                  AddrMode.INVALID.value)


@dataclass
class Instruction:
    """A decoded instruction at a particular address."""

    opcode: Opcode = field(default_factory=lambda: _invalid(0))
    pc_address: int = 0
    arg_address: int = 0
    address_mode_text: str = ""
    inst_len: int = 0
    cycle_count: int = 0
    output_to_accum: bool = False


def _build_table() -> tuple[Opcode, ...]:
    i, m = Instr, AddrMode
    documented = {
        0x00: (i.BRK, m.IMPL, 0), 0x01: (i.ORA, m.X_IND, 6), 0x05: (i.ORA, m.ZPG, 3),
        0x06: (i.ASL, m.ZPG, 5), 0x08: (i.PHP, m.IMPL, 3), 0x09: (i.ORA, m.IMM, 2),
        0x0A: (i.ASL, m.ACC, 2), 0x0D: (i.ORA, m.ABS, 4), 0x0E: (i.ASL, m.ABS, 6),
        0x10: (i.BPL, m.REL, 2), 0x11: (i.ORA, m.IND_Y, 5), 0x15: (i.ORA, m.ZPG_X, 4),
        0x16: (i.ASL, m.ZPG_X, 6), 0x18: (i.CLC, m.IMPL, 2), 0x19: (i.ORA, m.ABS_Y, 4),
        0x1D: (i.ORA, m.ABS_X, 4), 0x1E: (i.ASL, m.ABS_X, 7), 0x20: (i.JSR, m.ABS, 6),
        0x21: (i.AND, m.X_IND, 6), 0x24: (i.BIT, m.ZPG, 3), 0x25: (i.AND, m.ZPG, 3),
        0x26: (i.ROL, m.ZPG, 5), 0x28: (i.PLP, m.IMPL, 4), 0x29: (i.AND, m.IMM, 2),
        0x2A: (i.ROL, m.ACC, 2), 0x2C: (i.BIT, m.ABS, 4), 0x2D: (i.AND, m.ABS, 4),
        0x2E: (i.ROL, m.ABS, 6), 0x30: (i.BMI, m.REL, 2), 0x31: (i.AND, m.IND_Y, 5),
        0x35: (i.AND, m.ZPG_X, 4), 0x36: (i.ROL, m.ZPG_X, 6), 0x38: (i.SEC, m.IMPL, 2),
        0x39: (i.AND, m.ABS_Y, 4), 0x3D: (i.AND, m.ABS_X, 4), 0x3E: (i.ROL, m.ABS_X, 7),
        0x40: (i.RTI, m.IMPL, 6), 0x41: (i.EOR, m.X_IND, 6), 0x45: (i.EOR, m.ZPG, 3),
        0x46: (i.LSR, m.ZPG, 5), 0x48: (i.PHA, m.IMPL, 3), 0x49: (i.EOR, m.IMM, 2),
        0x4A: (i.LSR, m.ACC, 2), 0x4C: (i.JMP, m.ABS, 3), 0x4D: (i.EOR, m.ABS, 4),
        0x4E: (i.LSR, m.ABS, 6), 0x50: (i.BVC, m.REL, 2), 0x51: (i.EOR, m.IND_Y, 5),
        0x55: (i.EOR, m.ZPG_X, 4), 0x56: (i.LSR, m.ZPG_X, 6), 0x58: (i.CLI, m.IMPL, 2),
        0x59: (i.EOR, m.ABS_Y, 4), 0x5D: (i.EOR, m.ABS_X, 4), 0x5E: (i.LSR, m.ABS_X, 7),
        0x60: (i.RTS, m.IMPL, 6), 0x61: (i.ADC, m.X_IND, 6), 0x65: (i.ADC, m.ZPG, 3),
        0x66: (i.ROR, m.ZPG, 5), 0x68: (i.PLA, m.IMPL, 4), 0x69: (i.ADC, m.IMM, 2),
        0x6A: (i.ROR, m.ACC, 2), 0x6C: (i.JMP, m.IND, 5), 0x6D: (i.ADC, m.ABS, 4),
        0x6E: (i.ROR, m.ABS, 6), 0x70: (i.BVS, m.REL, 2), 0x71: (i.ADC, m.IND_Y, 5),
        0x75: (i.ADC, m.ZPG_X, 4), 0x76: (i.ROR, m.ZPG_X, 6), 0x78: (i.SEI, m.IMPL, 2),
        0x79: (i.ADC, m.ABS_Y, 4), 0x7D: (i.ADC, m.ABS_X, 4), 0x7E: (i.ROR, m.ABS_X, 7),
        0x81: (i.STA, m.X_IND, 6), 0x84: (i.STY, m.ZPG, 3), 0x85: (i.STA, m.ZPG, 3),
        0x86: (i.STX, m.ZPG, 3), 0x88: (i.DEY, m.IMPL, 2), 0x8A: (i.TXA, m.IMPL, 2),
        0x8C: (i.STY, m.ABS, 4), 0x8D: (i.STA, m.ABS, 4), 0x8E: (i.STX, m.ABS, 4),
        0x90: (i.BCC, m.REL, 2), 0x91: (i.STA, m.IND_Y, 6), 0x94: (i.STY, m.ZPG_X, 4),
        0x95: (i.STA, m.ZPG_X, 4), 0x96: (i.STX, m.ZPG_Y, 4), 0x98: (i.TYA, m.IMPL, 2),
        0x99: (i.STA, m.ABS_Y, 5), 0x9A: (i.TXS, m.IMPL, 2), 0x9D: (i.STA, m.ABS_X, 5),
        0xA0: (i.LDY, m.IMM, 2), 0xA1: (i.LDA, m.X_IND, 6), 0xA2: (i.LDX, m.IMM, 2),
        0xA4: (i.LDY, m.ZPG, 3), 0xA5: (i.LDA, m.ZPG, 3), 0xA6: (i.LDX, m.ZPG, 3),
        0xA8: (i.TAY, m.IMPL, 2), 0xA9: (i.LDA, m.IMM, 2), 0xAA: (i.TAX, m.IMPL, 2),
        0xAC: (i.LDY, m.ABS, 4), 0xAD: (i.LDA, m.ABS, 4), 0xAE: (i.LDX, m.ABS, 4),
        0xB0: (i.BCS, m.REL, 2), 0xB1: (i.LDA, m.IND_Y, 5), 0xB4: (i.LDY, m.ZPG_X, 4),
        0xB5: (i.LDA, m.ZPG_X, 4), 0xB6: (i.LDX, m.ZPG_Y, 4), 0xB8: (i.CLV, m.IMPL, 2),
        0xB9: (i.LDA, m.ABS_Y, 4), 0xBA: (i.TSX, m.IMPL, 2), 0xBC: (i.LDY, m.ABS_X, 4),
        0xBD: (i.LDA, m.ABS_X, 4), 0xBE: (i.LDX, m.ABS_Y, 4), 0xC0: (i.CPY, m.IMM, 2),
        0xC1: (i.CMP, m.X_IND, 6), 0xC4: (i.CPY, m.ZPG, 3), 0xC5: (i.CMP, m.ZPG, 3),
        0xC6: (i.DEC, m.ZPG, 5), 0xC8: (i.INY, m.IMPL, 2), 0xC9: (i.CMP, m.IMM, 2),
        0xCA: (i.DEX, m.IMPL, 2), 0xCC: (i.CPY, m.ABS, 4), 0xCD: (i.CMP, m.ABS, 4),
        0xCE: (i.DEC, m.ABS, 6), 0xD0: (i.BNE, m.REL, 2), 0xD1: (i.CMP, m.IND_Y, 5),
        0xD5: (i.CMP, m.ZPG_X, 4), 0xD6: (i.DEC, m.ZPG_X, 6), 0xD8: (i.CLD, m.IMPL, 2),
        0xD9: (i.CMP, m.ABS_Y, 4), 0xDD: (i.CMP, m.ABS_X, 4), 0xDE: (i.DEC, m.ABS_X, 7),
        0xE0: (i.CPX, m.IMM, 2), 0xE1: (i.SBC, m.X_IND, 6), 0xE4: (i.CPX, m.ZPG, 3),
        0xE5: (i.SBC, m.ZPG, 3), 0xE6: (i.INC, m.ZPG, 5), 0xE8: (i.INX, m.IMPL, 2),
        0xE9: (i.SBC, m.IMM, 2), 0xEA: (i.NOP, m.IMPL, 2), 0xEC: (i.CPX, m.ABS, 4),
        0xED: (i.SBC, m.ABS, 4), 0xEE: (i.INC, m.ABS, 6), 0xF0: (i.BEQ, m.REL, 2),
        0xF1: (i.SBC, m.IND_Y, 5), 0xF5: (i.SBC, m.ZPG_X, 4), 0xF6: (i.INC, m.ZPG_X, 6),
        0xF8: (i.SED, m.IMPL, 2), 0xF9: (i.SBC, m.ABS_Y, 4), 0xFD: (i.SBC, m.ABS_X, 4),
        0xFE: (i.INC, m.ABS_X, 7),
    }
    page_cross = {
        0x11, 0x19, 0x1D, 0x31, 0x39, 0x3D, 0x51, 0x59, 0x5D, 0x71, 0x79, 0x7D,
        0xB1, 0xB9, 0xBC, 0xBD, 0xBE, 0xD1, 0xD9, 0xDD, 0xF1, 0xF9, 0xFD,
    }
    # Unofficial NOPs: (raw byte recorded in the table, mode, cycles).
    unofficial = {
        0x0C: (0x0C, m.ABS, 4), 0x14: (0x14, m.ZPG_X, 4), 0x1A: (0x1A, m.IMPL, 2),
        0x1C: (0x1C, m.ABS_X, 4), 0x34: (0x34, m.ZPG_X, 4), 0x3A: (0x3A, m.IMPL, 2),
        0x3C: (0x3C, m.ABS_X, 4), 0x54: (0x54, m.ZPG_X, 4), 0x5A: (0x5A, m.IMPL, 2),
        0x5C: (0x5C, m.ABS_X, 4), 0x74: (0x74, m.ZPG_X, 4), 0x7A: (0x7A, m.IMPL, 2),
        0x7C: (0x7C, m.ABS_X, 4), 0x80: (0x3A, m.IMM, 2), 0xD4: (0xD4, m.ZPG_X, 4),
        0xDA: (0xDA, m.IMPL, 2), 0xDC: (0xDC, m.ABS_X, 4), 0xF4: (0xF4, m.ZPG_X, 4),
        0xFA: (0xFA, m.IMPL, 2), 0xFC: (0xFC, m.ABS_X, 4),
    }

    table = []
    for code in range(256):
        if code in documented:
            instr, mode, cycles = documented[code]
            table.append(Opcode(code, instr, mode, cycles, code in page_cross,
                                instr.name, mode.value))
        elif code in unofficial:
            raw, mode, cycles = unofficial[code]
            table.append(Opcode(raw, i.INVALID, mode, cycles, True, _INVALID_NAME, mode.value))
        else:
            table.append(_invalid(code))
    return tuple(table)


OPCODES: tuple[Opcode, ...] = _build_table()


def lookup(code: int) -> Opcode:
    """Return the table entry for an opcode byte."""
    if not 0 <= code <= 0xFF:
        raise ValueError(f"opcode must be a byte, got {code}")
    return OPCODES[code]