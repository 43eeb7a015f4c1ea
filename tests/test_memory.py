import pytest

from nesemu.memory import MemoryRegion, MemoryRepeater


class ConstantRegion(MemoryRegion):
    def __init__(self, start, end, value):
        super().__init__(start, end)
        self.value = value
        self.written = []

    def seek(self, address):
        return self.value

    def write(self, address, value):
        self.written.append((address, value))


def test_region_contains_is_inclusive():
    repeater = MemoryRepeater(0x4016, 0x4017, bytearray(2))
    assert MemoryRegion.contains(repeater, 0x4016)
    assert repeater.contains(0x4017)
    assert not repeater.contains(0x4015)
    assert not repeater.contains(0x4018)


def test_region_read_defaults_to_seek():
    region = ConstantRegion(0, 10, 0x41)
    assert MemoryRegion.read(region, 3) == 0x41


def test_region_is_abstract():
    with pytest.raises(TypeError):
        MemoryRegion(0, 1)


def test_repeater_mirrors_buffer():
    repeater = MemoryRepeater(0x0000, 0x1FFF, bytearray(2048))
    repeater.write(0x0001, 0x5A)
    for mirror in (0x0801, 0x1001, 0x1801):
        assert repeater.read(mirror) == 0x5A
        assert repeater.seek(mirror) == 0x5A


def test_repeater_shares_buffer():
    data = bytearray(16)
    repeater = MemoryRepeater(0x6000, 0x600F, data)
    repeater.write(0x6003, 0x77)
    assert data[3] == 0x77
    data[4] = 0x99
    assert repeater.seek(0x6004) == 0x99


def test_lower_offset_relative_to_start():
    repeater = MemoryRepeater(0x6000, 0x7FFF, bytearray(0x100))
    assert repeater.lower_offset(0x6000) == 0
    assert repeater.lower_offset(0x6000 + 0x100) == 0
    assert repeater.lower_offset(0x6005) == repeater.lower_offset(0x6105)


def test_repeater_length_limits_mirroring():
    data = bytearray(range(8))
    repeater = MemoryRepeater(0, 15, data, length=4)
    assert repeater.data_len == 4
    assert repeater.read(4) == data[0]
    assert repeater.read(7) == data[3]


def test_repeater_rejects_addresses_outside_range():
    repeater = MemoryRepeater(0x8000, 0xFFFF, bytearray(16))
    with pytest.raises(ValueError):
        repeater.seek(0x7FFF)
    with pytest.raises(ValueError):
        repeater.write(0x7FFF, 1)


def test_repeater_without_data_raises():
    repeater = MemoryRepeater(0, 15, None)
    with pytest.raises(ValueError):
        repeater.read(0)
    with pytest.raises(ValueError):
        repeater.write(0, 1)


def test_repeater_length_beyond_data_raises():
    repeater = MemoryRepeater(0, 15, bytearray(2), length=8)
    with pytest.raises(IndexError):
        repeater.seek(5)


def test_repeater_write_keeps_low_byte():
    repeater = MemoryRepeater(0, 3, bytearray(4))
    repeater.write(1, 0x1AB)
    assert repeater.seek(1) == 0x1AB & 0xFF