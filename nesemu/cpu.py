"""The 6502 core: executes instructions and services interrupts."""

from __future__ import annotations

import enum
import logging
from typing import Protocol

from nesemu.bits import Bit, get_bits, get_dword, to_signed
from nesemu.decoder import CpuBus, decode_instruction
from nesemu.decoder import generate_cpu_screen as _render_cpu_screen
from nesemu.instructions import Instr, Instruction
from nesemu.registers import CpuRegisters

_log = logging.getLogger(__name__)

STACK_BASE = 0x0100
RESET_VECTOR = 0xFFFC
NMI_VECTOR = 0xFFFA
IRQ_VECTOR = 0xFFFE
INTERRUPT_CYCLES = 7
POWER_ON_CYCLES = 7


class _SystemBus(CpuBus, Protocol):
    """A CPU bus that also carries the interrupt lines and the DMA state."""

    nmi: bool
    irq: bool

    def is_dma_active(self) -> bool: ...


class InterruptType(enum.Enum):
    """What caused the CPU to jump through an interrupt vector."""

    BREAK = enum.auto()
    NMI = enum.auto()
    IRQ = enum.auto()


def _page_crossed(address1: int, address2: int) -> int:
    return 1 if (address1 & 0xFF00) != (address2 & 0xFF00) else 0


class Cpu:
    """A 6502 CPU attached to a memory bus."""

    def __init__(self, bus: _SystemBus) -> None:
        self.bus = bus
        self.total_cycles = 0

    @property
    def regs(self) -> CpuRegisters:
        """The register file, which lives on the bus."""
        return self.bus.registers

    # -- power and interrupts -------------------------------------------------

    def power_cycle(self, override_pc: int | None = None) -> None:
        """Reset the registers and APU ports and load the program counter.

        The program counter comes from the reset vector unless
        ``override_pc`` is given.
        """
        regs = self.regs
        regs.p = 0x34
        regs.a = 0
        regs.x = 0
        regs.y = 0xFD
        self.bus.write(0x4017, 0)
        self.bus.write(0x4015, 0)
        for address in range(0x4000, 0x400F):
            self.bus.write(address, 0)
        for address in range(0x4010, 0x4013):
            self.bus.write(address, 0)

        if override_pc is None:
            regs.pc = get_dword(self.bus, RESET_VECTOR)
        else:
            regs.pc = override_pc
        self.total_cycles = POWER_ON_CYCLES

    def handle_irq(self, verbose: bool = False) -> int:
        """Service an interrupt request unless interrupts are disabled."""
        if not self.regs.i:
            self.handle_interrupt(InterruptType.IRQ, verbose)
        return INTERRUPT_CYCLES

    def handle_nmi(self, verbose: bool = False) -> int:
        """Service a non-maskable interrupt."""
        self.handle_interrupt(InterruptType.NMI, verbose)
        return INTERRUPT_CYCLES

    def handle_interrupt(self, kind: InterruptType, verbose: bool = False) -> None:
        """Push the program counter and status, then jump through the vector."""
        regs = self.regs
        status = regs.p
        if kind is InterruptType.BREAK:
            vector = IRQ_VECTOR
            status |= Bit.BIT4
        elif kind is InterruptType.IRQ:
            vector = IRQ_VECTOR
        elif kind is InterruptType.NMI:
            vector = NMI_VECTOR
        else:
            raise ValueError(f"unknown interrupt type: {kind!r}")
        status |= Bit.BIT5
        new_pc = get_dword(self.bus, vector)

        if verbose:
            print(f"interrupt called, jumping to: {new_pc}")

        self._push_word(regs.pc)
        regs.i = True
        self._push(status)
        regs.pc = new_pc

    # -- stack ------------------------------------------------------------------

    def _push(self, value: int) -> None:
        regs = self.regs
        self.bus.write(STACK_BASE + regs.s, value & 0xFF)
        regs.s -= 1

    def _push_word(self, value: int) -> None:
        self._push((value >> 8) & 0xFF)
        self._push(value & 0xFF)

    def _pop(self) -> int:
        regs = self.regs
        regs.s += 1
        return self.bus.read(STACK_BASE + regs.s)

    # -- flag helpers -------------------------------------------------------------

    def _set_zero_and_neg(self, value: int) -> None:
        regs = self.regs
        regs.z = (value & 0xFF) == 0
        regs.n = bool(get_bits(value, 7))

    def _compare(self, register: int, value: int) -> None:
        self._set_zero_and_neg((register - value) & 0xFF)
        self.regs.c = register >= value

    def _add_with_carry(self, value: int) -> None:
        regs = self.regs
        old_a, carry = regs.a, int(regs.c)
        regs.a = old_a + value + carry
        regs.c = old_a + value + carry > 0xFF
        signed = to_signed(old_a) + to_signed(value) + carry
        regs.v = not -128 <= signed <= 127
        self._set_zero_and_neg(regs.a)

    def _subtract_with_carry(self, value: int) -> None:
        regs = self.regs
        old_a, carry = regs.a, int(regs.c)
        regs.a = old_a - (value + (1 - carry))
        regs.c = old_a - value - 1 + carry >= 0
        signed = to_signed(old_a) - to_signed(value) - (1 - carry)
        regs.v = not -128 <= signed <= 127
        self._set_zero_and_neg(regs.a)

    # -- execution ----------------------------------------------------------------

    def _trace(self, inst: Instruction) -> None:
        regs = self.regs
        code = "".join(f"{self.bus.seek((regs.pc + k) & 0xFFFF):02X} "
                       for k in range(inst.inst_len))
        print(
            f"{regs.pc:04X}  {code:<10}{inst.address_mode_text:<32}"
            f"A:{regs.a:02X} X:{regs.x:02X} Y:{regs.y:02X} "
            f"P:{regs.p:02X} SP:{regs.s:02X} "
            f"PPU:{0:>3},{0:>3} CYC:{self.total_cycles:<4} "
        )

    def _operand(self, inst: Instruction) -> int:
        return self.regs.a if inst.output_to_accum else self.bus.read(inst.arg_address)

    def _store_result(self, inst: Instruction, value: int) -> None:
        value &= 0xFF
        if inst.output_to_accum:
            self.regs.a = value
        else:
            self.bus.write(inst.arg_address, value)
        self._set_zero_and_neg(value)

    def _branch(self, taken: bool, target: int) -> int:
        if not taken:
            return 0
        extra = 1 + _page_crossed(target, self.regs.pc)
        self.regs.pc = target
        return extra

    def step(self, verbose: bool = False) -> int:
        """Run one instruction or interrupt and return the cycles it took."""
        bus = self.bus
        if bus.is_dma_active():
            return 1

        if bus.nmi:
            cycles = self.handle_nmi(verbose)
            bus.nmi = False
            return cycles

        if bus.irq:
            cycles = self.handle_irq(verbose)
            bus.irq = False
            return cycles

        regs = self.regs
        try:
            inst = decode_instruction(bus, regs.pc, False, verbose)
        except ValueError:
            _log.error("failed to decode instruction at %#06x opcode: %#04x",
                       regs.pc, bus.seek(regs.pc))
            regs.pc += 1
            return 0

        if verbose:
            self._trace(inst)

        regs.pc += inst.inst_len
        cycles = inst.cycle_count + self._execute(inst, verbose)
        self.total_cycles += cycles
        return cycles

    def _execute(self, inst: Instruction, verbose: bool) -> int:
        """Carry out a decoded instruction; return any extra cycles it took."""
        regs = self.regs
        bus = self.bus
        arg = inst.arg_address
        instr = inst.opcode.instr

        if instr is Instr.ADC:
            self._add_with_carry(bus.read(arg))
        elif instr is Instr.SBC:
            self._subtract_with_carry(bus.read(arg))
        elif instr is Instr.AND:
            regs.a &= bus.read(arg)
            self._set_zero_and_neg(regs.a)
        elif instr is Instr.ORA:
            regs.a |= bus.read(arg)
            self._set_zero_and_neg(regs.a)
        elif instr is Instr.EOR:
            regs.a ^= bus.read(arg)
            self._set_zero_and_neg(regs.a)
        elif instr is Instr.ASL:
            value = self._operand(inst)
            regs.c = bool(get_bits(value, 7))
            self._store_result(inst, value << 1)
        elif instr is Instr.LSR:
            value = self._operand(inst)
            regs.c = bool(get_bits(value, 0))
            self._store_result(inst, value >> 1)
        elif instr is Instr.ROL:
            value = self._operand(inst)
            result = ((value << 1) & 0xFF) | int(regs.c)
            regs.c = bool(get_bits(value, 7))
            self._store_result(inst, result)
        elif instr is Instr.ROR:
            value = self._operand(inst)
            result = (value >> 1) | (int(regs.c) << 7)
            regs.c = bool(get_bits(value, 0))
            self._store_result(inst, result)
        elif instr is Instr.BCC:
            return self._branch(not regs.c, arg)
        elif instr is Instr.BCS:
            return self._branch(regs.c, arg)
        elif instr is Instr.BEQ:
            return self._branch(regs.z, arg)
        elif instr is Instr.BNE:
            return self._branch(not regs.z, arg)
        elif instr is Instr.BMI:
            return self._branch(regs.n, arg)
        elif instr is Instr.BPL:
            return self._branch(not regs.n, arg)
        elif instr is Instr.BVC:
            return self._branch(not regs.v, arg)
        elif instr is Instr.BVS:
            return self._branch(regs.v, arg)
        elif instr is Instr.BIT:
            value = bus.read(arg)
            self._set_zero_and_neg(regs.a & value)
            regs.v = bool(get_bits(value, 6))
            regs.n = bool(get_bits(value, 7))
        elif instr is Instr.BRK:
            self.handle_interrupt(InterruptType.BREAK, verbose)
        elif instr is Instr.CLC:
            regs.c = False
        elif instr is Instr.CLD:
            regs.d = False
        elif instr is Instr.CLI:
            regs.i = False
        elif instr is Instr.CLV:
            regs.v = False
        elif instr is Instr.SEC:
            regs.c = True
        elif instr is Instr.SED:
            regs.d = True
        elif instr is Instr.SEI:
            regs.i = True
        elif instr is Instr.CMP:
            self._compare(regs.a, bus.read(arg))
        elif instr is Instr.CPX:
            self._compare(regs.x, bus.read(arg))
        elif instr is Instr.CPY:
            self._compare(regs.y, bus.read(arg))
        elif instr is Instr.DEC:
            result = (bus.read(arg) - 1) & 0xFF
            bus.write(arg, result)
            self._set_zero_and_neg(result)
        elif instr is Instr.INC:
            result = (bus.read(arg) + 1) & 0xFF
            bus.write(arg, result)
            self._set_zero_and_neg(result)
        elif instr is Instr.DEX:
            regs.x -= 1
            self._set_zero_and_neg(regs.x)
        elif instr is Instr.DEY:
            regs.y -= 1
            self._set_zero_and_neg(regs.y)
        elif instr is Instr.INX:
            regs.x += 1
            self._set_zero_and_neg(regs.x)
        elif instr is Instr.INY:
            regs.y += 1
            self._set_zero_and_neg(regs.y)
        elif instr is Instr.JMP:
            regs.pc = arg
        elif instr is Instr.JSR:
            self._push_word((regs.pc - 1) & 0xFFFF)
            regs.pc = arg
        elif instr is Instr.RTS:
            regs.pcl = self._pop()
            regs.pch = self._pop()
            regs.pc += 1
        elif instr is Instr.RTI:
            regs.p = self._pop() | 0x20
            regs.pcl = self._pop()
            regs.pch = self._pop()
        elif instr is Instr.LDA:
            regs.a = bus.read(arg)
            self._set_zero_and_neg(regs.a)
        elif instr is Instr.LDX:
            regs.x = bus.read(arg)
            self._set_zero_and_neg(regs.x)
        elif instr is Instr.LDY:
            regs.y = bus.read(arg)
            self._set_zero_and_neg(regs.y)
        elif instr is Instr.STA:
            bus.write(arg, regs.a)
        elif instr is Instr.STX:
            bus.write(arg, regs.x)
        elif instr is Instr.STY:
            bus.write(arg, regs.y)
        elif instr is Instr.NOP:
            pass
        elif instr is Instr.PHA:
            self._push(regs.a)
        elif instr is Instr.PHP:
            self._push(regs.p | Bit.BIT4 | Bit.BIT5)
        elif instr is Instr.PLA:
            regs.a = self._pop()
            self._set_zero_and_neg(regs.a)
        elif instr is Instr.PLP:
            regs.p = (self._pop() & 0xEF) | 0x20
        elif instr is Instr.TAX:
            regs.x = regs.a
            self._set_zero_and_neg(regs.x)
        elif instr is Instr.TAY:
            regs.y = regs.a
            self._set_zero_and_neg(regs.y)
        elif instr is Instr.TSX:
            regs.x = regs.s
            self._set_zero_and_neg(regs.x)
        elif instr is Instr.TXA:
            regs.a = regs.x
            self._set_zero_and_neg(regs.a)
        elif instr is Instr.TXS:
            regs.s = regs.x
        elif instr is Instr.TYA:
            regs.a = regs.y
            self._set_zero_and_neg(regs.a)
        else:
            _log.error("unknown instruction at pc: %#06x", regs.pc)
        return 0

    # -- disassembly --------------------------------------------------------------

    def generate_cpu_screen(self, instructions_before: int = 10,
                            instructions_after: int = 10) -> str:
        """Disassemble PRG ROM around the program counter and show the registers."""
        return _render_cpu_screen(self.bus, self.total_cycles,
                                  instructions_before, instructions_after)