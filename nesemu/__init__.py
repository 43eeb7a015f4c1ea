"""Parts of a NES emulator: 6502 CPU and decoder, memory regions, joypads and iNES cartridges."""

__version__ = "0.1.0"