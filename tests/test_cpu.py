import pytest

from nesemu.cpu import Cpu, InterruptType
from nesemu.registers import CpuRegisters


class FakeBus:
    def __init__(self):
        self.mem = bytearray(0x10000)
        self.registers = CpuRegisters()
        self.cartridge = None
        self.nmi = False
        self.irq = False
        self.dma_active = False

    def read(self, address):
        return self.mem[address & 0xFFFF]

    def seek(self, address):
        return self.mem[address & 0xFFFF]

    def write(self, address, value):
        self.mem[address & 0xFFFF] = value & 0xFF

    def is_dma_active(self):
        return self.dma_active


def make_cpu(program, at=0x8000):
    bus = FakeBus()
    bus.mem[at:at + len(program)] = bytes(program)
    bus.mem[0xFFFC] = at & 0xFF
    bus.mem[0xFFFD] = at >> 8
    cpu = Cpu(bus)
    cpu.power_cycle()
    bus.registers.s = 0xFD
    return cpu, bus


def test_power_cycle_reads_reset_vector():
    cpu, bus = make_cpu([0xEA], at=0x8123)
    assert bus.registers.pc == 0x8123
    assert bus.registers.p == 0x34
    assert bus.registers.y == 0xFD
    assert cpu.total_cycles == 7


def test_power_cycle_override_pc():
    cpu, bus = make_cpu([0xEA])
    cpu.power_cycle(0xC000)
    assert bus.registers.pc == 0xC000


def test_lda_immediate_sets_negative():
    cpu, bus = make_cpu([0xA9, 0x80])
    cycles = cpu.step()
    assert bus.registers.a == 0x80
    assert bus.registers.n and not bus.registers.z
    assert cycles == 2
    assert bus.registers.pc == 0x8002


def test_lda_zero_sets_zero_flag():
    cpu, bus = make_cpu([0xA9, 0x00])
    cpu.step()
    assert bus.registers.z and not bus.registers.n


def test_adc_signed_overflow():
    cpu, bus = make_cpu([0x18, 0xA9, 0x50, 0x69, 0x50])
    for _ in range(3):
        cpu.step()
    assert bus.registers.a == 0xA0
    assert bus.registers.v
    assert not bus.registers.c


def test_sbc_with_carry_set():
    cpu, bus = make_cpu([0x38, 0xA9, 0x05, 0xE9, 0x03])
    for _ in range(3):
        cpu.step()
    assert bus.registers.a == 0x02
    assert bus.registers.c
    assert not bus.registers.v


def test_jsr_rts_round_trip():
    cpu, bus = make_cpu([0x20, 0x00, 0x90])
    bus.mem[0x9000] = 0x60
    stack_before = bus.registers.s
    cpu.step()
    assert bus.registers.pc == 0x9000
    cpu.step()
    assert bus.registers.pc == 0x8003
    assert bus.registers.s == stack_before


def test_pha_pla_round_trip():
    cpu, bus = make_cpu([0xA9, 0x42, 0x48, 0xA9, 0x00, 0x68])
    for _ in range(4):
        cpu.step()
    assert bus.registers.a == 0x42
    assert bus.registers.s == 0xFD


def test_sta_zero_page():
    cpu, bus = make_cpu([0xA9, 0x37, 0x85, 0x10])
    cpu.step()
    cpu.step()
    assert bus.mem[0x10] == 0x37


def test_branch_taken_adds_cycle():
    cpu, bus = make_cpu([0xA9, 0x01, 0xD0, 0x02])
    cpu.step()
    cycles = cpu.step()
    assert bus.registers.pc == 0x8006
    assert cycles == 3


def test_branch_not_taken():
    cpu, bus = make_cpu([0xA9, 0x00, 0xD0, 0x02])
    cpu.step()
    cycles = cpu.step()
    assert bus.registers.pc == 0x8004
    assert cycles == 2


def test_cmp_equal_sets_zero_and_carry():
    cpu, bus = make_cpu([0xA9, 0x10, 0xC9, 0x10])
    cpu.step()
    cpu.step()
    assert bus.registers.z and bus.registers.c


def test_rol_then_ror_restores_value():
    cpu, bus = make_cpu([0x18, 0xA9, 0x81, 0x2A, 0x6A])
    for _ in range(3):
        cpu.step()
    assert bus.registers.c
    cpu.step()
    assert bus.registers.a == 0x81


def test_total_cycles_accumulate():
    cpu, bus = make_cpu([0xEA, 0xEA])
    start = cpu.total_cycles
    spent = cpu.step() + cpu.step()
    assert cpu.total_cycles == start + spent


def test_dma_active_stalls_cpu():
    cpu, bus = make_cpu([0xA9, 0x01])
    bus.dma_active = True
    assert cpu.step() == 1
    assert bus.registers.pc == 0x8000


def test_invalid_opcode_skips_byte():
    cpu, bus = make_cpu([0x02])
    assert cpu.step() == 0
    assert bus.registers.pc == 0x8001


def test_nmi_jumps_through_vector():
    cpu, bus = make_cpu([0xEA])
    bus.mem[0xFFFA] = 0x34
    bus.mem[0xFFFB] = 0x12
    bus.nmi = True
    assert cpu.step() == 7
    assert not bus.nmi
    assert bus.registers.pc == 0x1234
    assert bus.registers.i
    pushed_status = bus.mem[0x0100 + bus.registers.s + 1]
    assert pushed_status & 0x20


def test_masked_irq_is_ignored():
    cpu, bus = make_cpu([0xEA])
    bus.registers.i = True
    bus.irq = True
    assert cpu.step() == 7
    assert not bus.irq
    assert bus.registers.pc == 0x8000


def test_rti_returns_from_interrupt():
    cpu, bus = make_cpu([0xEA])
    bus.mem[0xFFFE] = 0x00
    bus.mem[0xFFFF] = 0x90
    bus.mem[0x9000] = 0x40
    cpu.handle_interrupt(InterruptType.IRQ)
    assert bus.registers.pc == 0x9000
    cpu.step()
    assert bus.registers.pc == 0x8000


def test_break_sets_b_bit_in_pushed_status():
    cpu, bus = make_cpu([0x00])
    bus.mem[0xFFFE] = 0x00
    bus.mem[0xFFFF] = 0x90
    assert cpu.step() == 0
    assert bus.registers.pc == 0x9000
    assert bus.registers.i
    pushed_status = bus.mem[0x0100 + bus.registers.s + 1]
    assert pushed_status & 0x10
    assert pushed_status & 0x20


def test_verbose_trace_printed(capsys):
    cpu, bus = make_cpu([0xA9, 0x80])
    cpu.step(verbose=True)
    out = capsys.readouterr().out
    assert out.startswith("8000  A9 80")
    assert "LDA #$80" in out


def test_cpu_screen_needs_cartridge():
    cpu, bus = make_cpu([0xEA])
    with pytest.raises(ValueError):
        cpu.generate_cpu_screen(2, 2)