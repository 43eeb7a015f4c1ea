"""Standard NES joypads mapped at 0x4016 and 0x4017."""

from __future__ import annotations

import enum
import logging

from nesemu.bits import get_bits
from nesemu.memory import MemoryRegion

_log = logging.getLogger(__name__)

BUTTON_COUNT = 8
_IDLE_VALUE = 0x41
_OPEN_BUS = 0x40


class NesInput(enum.IntEnum):
    """Joypad buttons, in the order they are shifted out."""

    UNDEFINED = -1
    A = 0
    B = 1
    SELECT = 2
    START = 3
    UP = 4
    DOWN = 5
    LEFT = 6
    RIGHT = 7


class NesController(MemoryRegion):
    """One joypad's shift register at a single CPU address."""

    def __init__(self, cpu_address: int) -> None:
        super().__init__(cpu_address, cpu_address)
        self._pressed = [False] * BUTTON_COUNT
        self._read_buffer = [False] * BUTTON_COUNT
        self._buffer_index = BUTTON_COUNT
        self._strobing = False

    @property
    def pressed(self) -> list[bool]:
        """The current state of every button, in :class:`NesInput` order."""
        return list(self._pressed)

    def set_key(self, button: NesInput, pressed: bool) -> None:
        """Record a button press or release; ``UNDEFINED`` is ignored."""
        if button == NesInput.UNDEFINED:
            return
        self._pressed[button] = pressed

    def write(self, address: int, value: int) -> None:
        """Latch the button states and restart the shift register."""
        self._read_buffer = list(self._pressed)
        self._buffer_index = 0
        self._strobing = not get_bits(value, 0)

    def read(self, address: int) -> int:
        value = self.seek(address)
        self._buffer_index += 1
        return value

    def seek(self, address: int) -> int:
        if self._buffer_index >= BUTTON_COUNT or not self._strobing:
            return _IDLE_VALUE
        return _OPEN_BUS | int(self._read_buffer[self._buffer_index])


class ControllerManager(MemoryRegion):
    """Both joypad ports."""

    def __init__(self) -> None:
        super().__init__(0x4016, 0x4017)
        self.controllers = [NesController(0x4016), NesController(0x4017)]

    def _controller(self, controller: int) -> NesController:
        if not 0 <= controller < len(self.controllers):
            raise ValueError(f"invalid controller number: {controller}")
        return self.controllers[controller]

    def set_key(self, button: NesInput, pressed: bool, controller: int = 0) -> None:
        """Press or release a button on one controller."""
        self._controller(controller).set_key(button, pressed)

    def key_pressed(self, controller: int = 0) -> list[bool]:
        """The button states of one controller."""
        return self._controller(controller).pressed

    def write(self, address: int, value: int) -> None:
        """A write is seen by every controller."""
        for pad in self.controllers:
            pad.write(address, value)

    def read(self, address: int) -> int:
        for pad in self.controllers:
            if pad.contains(address):
                return pad.read(address)
        _log.error("controller manager: failed to read from address %#06x", address)
        return 0

    def seek(self, address: int) -> int:
        for pad in self.controllers:
            if pad.contains(address):
                return pad.seek(address)
        _log.error("controller manager: failed to seek from address %#06x", address)
        return 0