"""Decoding of 6502 instructions and a disassembly view of PRG ROM."""

from __future__ import annotations

from typing import Protocol

from nesemu.bits import get_dword, to_signed
from nesemu.cartridge import Cartridge
from nesemu.instructions import AddrMode, Instr, Instruction, Opcode, lookup
from nesemu.registers import CpuRegisters

_FAILED_OPCODE = Opcode(0, Instr.INVALID, AddrMode.INVALID, 0, False, "NOP*",
                        AddrMode.INVALID.value)


class CpuBus(Protocol):
    """The memory bus as the CPU sees it."""

    registers: CpuRegisters
    cartridge: Cartridge | None

    def read(self, address: int) -> int: ...

    def seek(self, address: int) -> int: ...

    def write(self, address: int, value: int) -> None: ...


def _page_crossed(address1: int, address2: int) -> int:
    """One extra cycle when the two addresses lie on different pages."""
    return 1 if (address1 & 0xFF00) != (address2 & 0xFF00) else 0


def _decode(bus: CpuBus, pc_address: int, seek_only: bool, verbose: bool) -> Instruction:
    opcode = lookup(bus.seek(pc_address))
    if not opcode.valid:
        raise ValueError(f"not a valid instruction at {pc_address:#06x}")

    regs = bus.registers
    name = opcode.instr_name
    fetch = bus.seek if seek_only else bus.read
    operand = (pc_address + 1) & 0xFFFF
    arg_address = 0
    cycle_count = opcode.cycles
    output_to_accum = False
    text = ""
    mode = opcode.addrm

    if mode is AddrMode.IMPL:
        inst_len = 1
        if verbose:
            text = name
    elif mode is AddrMode.ACC:
        inst_len = 1
        output_to_accum = True
        if verbose:
            text = f"{name} A"
    elif mode is AddrMode.IMM:
        inst_len = 2
        arg_address = operand
        if verbose:
            text = f"{name} #${bus.seek(arg_address):02X}"
    elif mode is AddrMode.ZPG:
        inst_len = 2
        arg_address = fetch(operand)
        if verbose:
            text = f"{name} ${arg_address:02X} = {bus.seek(arg_address):02X}"
    elif mode in (AddrMode.ZPG_X, AddrMode.ZPG_Y):
        inst_len = 2
        index_name, index = ("X", regs.x) if mode is AddrMode.ZPG_X else ("Y", regs.y)
        base = fetch(operand)
        arg_address = (base + index) % 0x100
        if verbose:
            text = (f"{name} ${base:02X},{index_name} @ {arg_address:02X}"
                    f" = {bus.seek(arg_address):02X}")
    elif mode is AddrMode.REL:
        inst_len = 2
        offset = to_signed(fetch(operand))
        arg_address = (offset + pc_address + 2) & 0xFFFF
        if verbose:
            text = f"{name} ${arg_address:04X}"
    elif mode is AddrMode.X_IND:
        inst_len = 2
        pointer = fetch(operand)
        pointer_x = (pointer + regs.x) & 0xFF
        arg_address = get_dword(bus, pointer_x, True, not seek_only)
        if verbose:
            text = (f"{name} (${pointer:02X},X) @ {pointer_x:02X} = {arg_address:04X}"
                    f" = {bus.seek(arg_address):02X}")
    elif mode is AddrMode.IND_Y:
        inst_len = 2
        pointer = fetch(operand)
        base = get_dword(bus, pointer, True, not seek_only)
        arg_address = (base + regs.y) & 0xFFFF
        if opcode.instr is not Instr.STA:
            cycle_count += _page_crossed(base, arg_address)
        if verbose:
            text = (f"{name} (${pointer:02X}),Y = {base:04X} @ {arg_address:04X}"
                    f" = {bus.seek(arg_address):02X}")
    elif mode is AddrMode.ABS:
        inst_len = 3
        arg_address = get_dword(bus, operand, False, not seek_only)
        if verbose:
            value = bus.seek(arg_address)
            text = f"{name} ${arg_address:04X}"
            if opcode.instr not in (Instr.JMP, Instr.JSR):
                text += f" = {value:02X}"
    elif mode in (AddrMode.ABS_X, AddrMode.ABS_Y):
        inst_len = 3
        index_name, index = ("X", regs.x) if mode is AddrMode.ABS_X else ("Y", regs.y)
        base = get_dword(bus, operand, False, not seek_only)
        arg_address = (base + index) & 0xFFFF
        if opcode.instr is not Instr.STA:
            cycle_count += _page_crossed(base, arg_address)
        if verbose:
            text = (f"{name} ${base:04X},{index_name} @ {arg_address:04X}"
                    f" = {bus.seek(arg_address):02X}")
    elif mode is AddrMode.IND:
        inst_len = 3
        pointer = get_dword(bus, operand, False, not seek_only)
        arg_address = get_dword(bus, pointer, True, not seek_only)
        if verbose:
            text = f"{name} (${pointer:04X}) = {arg_address:04X}"
    else:
        raise ValueError(f"invalid addressing mode {mode}")

    return Instruction(
        opcode=opcode,
        pc_address=pc_address,
        arg_address=arg_address,
        address_mode_text=text,
        inst_len=inst_len,
        cycle_count=cycle_count,
        output_to_accum=output_to_accum,
    )


def decode_instruction(
    bus: CpuBus, pc_address: int, seek_only: bool = False, verbose: bool = False
) -> Instruction:
    """Decode the instruction at ``pc_address``.

    With ``seek_only`` operands are peeked rather than read, so decoding has
    no side effects on the bus. With ``verbose`` a textual rendering is
    produced. Raises :class:`ValueError` if the instruction cannot be decoded.
    """
    try:
        return _decode(bus, pc_address, seek_only, verbose)
    except (IndexError, ValueError) as exc:
        raise ValueError(f"cannot decode instruction at {pc_address:#06x}: {exc}") from exc


def generate_cpu_screen(
    bus: CpuBus,
    total_cycles: int,
    instructions_before: int = 10,
    instructions_after: int = 10,
) -> str:
    """Disassemble PRG ROM around the program counter and show the registers."""
    if bus.cartridge is None or bus.cartridge.prg_rom is None:
        raise ValueError("no cartridge with PRG ROM is loaded")
    regs = bus.registers
    prg_rom = bus.cartridge.prg_rom

    decoded: list[Instruction] = []
    current = -1
    address = prg_rom.start_address
    while address < prg_rom.end_address:
        if address == regs.pc:
            current = len(decoded)
        try:
            instruction = decode_instruction(bus, address, True, True)
        except ValueError:
            instruction = Instruction(opcode=_FAILED_OPCODE, pc_address=address, inst_len=1)
        decoded.append(instruction)
        address += instruction.inst_len

    first = max(current - instructions_before, 0)
    last = min(current + instructions_after, len(decoded))
    lines = [
        f"{'->' if index == current else '  '}0x{decoded[index].pc_address:X} "
        f"{decoded[index].address_mode_text}\n"
        for index in range(first, last)
    ]
    hex_spec = "02X" if lines else "02x"
    footer = (
        f"CYC:{total_cycles} "
        f"A:{regs.a:{hex_spec}} "
        f"X:{regs.x:{hex_spec}} "
        f"Y:{regs.y:{hex_spec}} "
        f"P:{regs.p:{hex_spec}} "
        f"SP:{regs.s:{hex_spec}} "
    )
    return "".join(lines) + footer