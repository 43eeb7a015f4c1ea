import pytest

from nesemu.ines import INesRom, MirrorType


def test_defaults_match_an_empty_rom():
    rom = INesRom()
    assert rom.prg_rom_len == 0
    assert rom.chr_rom_len == 0
    assert rom.mapper_number == 0
    assert rom.mirroring_type is MirrorType.HORIZONTAL
    assert rom.battery_present is False
    assert rom.trainer_present is False
    assert rom.prg_rom_data is None
    assert rom.chr_rom_data is None


def test_fields_keep_given_values():
    prg = bytearray(b"\x01\x02")
    rom = INesRom(prg_rom_len=2, mirroring_type=MirrorType.VERTICAL, prg_rom_data=prg,
                  battery_present=True)
    assert rom.prg_rom_len == 2
    assert rom.mirroring_type is MirrorType.VERTICAL
    assert rom.prg_rom_data is prg
    assert rom.battery_present is True


def test_fields_are_mutable():
    rom = INesRom()
    rom.mapper_number = 4
    rom.mirroring_type = MirrorType.FOUR_SCREEN
    assert rom.mapper_number == 4
    assert rom.mirroring_type is MirrorType.FOUR_SCREEN


@pytest.mark.parametrize("name", ["NOT_SET", "ONE_WAY", "HORIZONTAL", "VERTICAL", "FOUR_SCREEN"])
def test_rom_keeps_each_mirror_type(name):
    mirror = MirrorType[name]
    rom = INesRom(mirroring_type=mirror)
    assert rom.mirroring_type is mirror
    others = [m for m in MirrorType if m is not mirror]
    assert all(rom.mirroring_type.value != m.value for m in others)