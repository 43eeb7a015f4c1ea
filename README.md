# nesemu

Building blocks for a Nintendo Entertainment System emulator. The package is
written in plain Python and has no third-party dependencies.

## Modules

- `nesemu.bits` provides the bit helpers. `get_bits` extracts a bit range.
  `get_dword` reads a little-endian 16-bit word from any object with `read` and
  `seek`, and can wrap within a page. The module also has `flip_byte`,
  `to_signed`, `vec_split`, `approx_sin` and the `Bit` masks.
- `nesemu.memory` provides `MemoryRegion`, an abstract component that covers an
  inclusive address range. It also provides `MemoryRepeater`, a shared
  `bytearray` mirrored across a larger address range. Out-of-range access to a
  `MemoryRepeater` raises `ValueError`.
- `nesemu.matrix` provides `Matrix`, a width-by-height grid addressed as
  `(y, x)`, with `get`, `set`, `set_region` and `dump`. A position outside the
  grid raises `IndexError`.
- `nesemu.safequeue` provides `ThreadSafeQueue`, a lock-guarded FIFO with an
  optional `max_size`. Its methods are `push`, `extend` and `pop(count)`. When
  the queue overflows, the oldest records are dropped.
- `nesemu.registers` provides `CpuRegisters`, which holds `pc`, `s`, `p`, `a`,
  `x` and `y`. Each value wraps to the width of its register. The status flags
  are available as booleans: `c`, `z`, `i`, `d`, `b`, `expansion`, `v` and `n`.
  `to_bytes` and `from_bytes` convert to and from a 7-byte packed layout.
- `nesemu.cpu_memory` provides `CpuMemoryMap`, which is 2 KiB of RAM mirrored
  over `$0000-$1FFF`.
- `nesemu.instructions` provides the opcode table `OPCODES` and `lookup(code)`.
  It also provides `Instr`, `AddrMode`, `Opcode` and the `Instruction` record.
- `nesemu.controller` provides `NesInput`, `NesController` and
  `ControllerManager`. Together these emulate the two joypad shift registers at
  `$4016` and `$4017`.
- `nesemu.ines` provides `MirrorType` and `INesRom`, the parsed form of a
  `.nes` file.
- `nesemu.cartridge` provides `Cartridge` and `CartridgeMapping0`.
  `CartridgeMapping0` is mapper 0 (NROM):
  - PRG ROM is mirrored over `$8000-$FFFF`.
  - CHR ROM sits at `$0000-$1FFF`.
  - There is 8 KiB of PRG RAM at `$6000-$7FFF` when the ROM has a battery.
- `nesemu.loader` provides `parse_ines_bytes`, `parse_ines(path)` and
  `load_cartridge(path)`. They raise `RomFormatError` in these cases:
  - the data is not an iNES file;
  - the file is NES 2.0;
  - the mapper is not supported.
- `nesemu.decoder` provides `decode_instruction` and `generate_cpu_screen`.
  Both work over any object that satisfies the `CpuBus` protocol. When an
  instruction cannot be decoded, `decode_instruction` raises `ValueError`.
- `nesemu.cpu` provides `Cpu`, which has these methods:
  - `power_cycle`
  - `step`, which returns the cycles used
  - `handle_nmi`, `handle_irq` and `handle_interrupt`
  - `generate_cpu_screen`, a disassembly view around the program counter

## Installing

```
pip install .
```

The tests use pytest, which the `test` extra installs:

```
pip install .[test]
pytest
```

## Example

This example builds a mapper 0 image in memory. It then runs one instruction on
a small bus that routes addresses to CPU RAM and the cartridge.

```python
from nesemu.cartridge import CartridgeMapping0
from nesemu.cpu import Cpu
from nesemu.cpu_memory import CpuMemoryMap
from nesemu.instructions import lookup
from nesemu.loader import parse_ines_bytes
from nesemu.registers import CpuRegisters

image = b"NES\x1a" + bytes([1, 1]) + bytes(10) + bytes(16384) + bytes(8192)
rom = parse_ines_bytes(image)
rom.prg_rom_data[0x0000:0x0002] = bytes([0xA9, 0x42])   # LDA #$42 at $8000
rom.prg_rom_data[0x3FFC:0x3FFE] = bytes([0x00, 0x80])   # reset vector -> $8000

cartridge = CartridgeMapping0()
cartridge.load_ines(rom)


class Bus:
    def __init__(self, cartridge):
        self.registers = CpuRegisters()
        self.cartridge = cartridge
        self.ram = CpuMemoryMap()
        self.nmi = False
        self.irq = False

    def is_dma_active(self):
        return False

    def _target(self, address):
        for region in (self.ram, self.cartridge):
            if region.contains(address):
                return region
        return None

    def read(self, address):
        target = self._target(address)
        return target.read(address) if target else 0

    def seek(self, address):
        target = self._target(address)
        return target.seek(address) if target else 0

    def write(self, address, value):
        target = self._target(address)
        if target:
            target.write(address, value)


cpu = Cpu(Bus(cartridge))
cpu.power_cycle()
print(cpu.step(), hex(cpu.regs.a))         # 2 0x42
print(lookup(0xA9).instr_name, lookup(0xA9).cycles)   # LDA 2
```

## What the package does not do

The package is not a complete console. It has no picture processing unit, no
audio unit, no sprite DMA and no full memory bus, so nothing draws frames or
produces sound. A caller has to supply the bus that `Cpu` runs on, and that bus
must provide `registers`, `cartridge`, `read`, `seek`, `write`, `nmi`, `irq` and
`is_dma_active`. The package has no command-line program and no window.

Only the iNES format and mapper 0 are supported. NES 2.0 files are rejected. A
trainer in a ROM is skipped and not used.