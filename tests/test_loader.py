import pytest

from nesemu.cartridge import CartridgeMapping0
from nesemu.ines import MirrorType
from nesemu.loader import RomFormatError, load_cartridge, parse_ines, parse_ines_bytes


def _header(prg_banks=1, chr_banks=1, flag_6=0, flag_7=0):
    return b"NES\x1a" + bytes([prg_banks, chr_banks, flag_6, flag_7]) + bytes(8)


def _image(prg_banks=1, chr_banks=1, flag_6=0, flag_7=0, trainer=b""):
    prg = bytes((i * 7) & 0xFF for i in range(prg_banks * 16384))
    chr_data = bytes((i * 5) & 0xFF for i in range(chr_banks * 8192))
    return _header(prg_banks, chr_banks, flag_6, flag_7) + trainer + prg + chr_data, prg, chr_data


def test_sizes_and_data():
    image, prg, chr_data = _image()
    rom = parse_ines_bytes(image)
    assert rom.prg_rom_len == 16384
    assert rom.chr_rom_len == 8192
    assert bytes(rom.prg_rom_data) == prg
    assert bytes(rom.chr_rom_data) == chr_data


def test_multiple_banks_match_data_length():
    image, prg, _ = _image(prg_banks=2, chr_banks=0)
    rom = parse_ines_bytes(image)
    assert rom.prg_rom_len == len(prg)
    assert len(rom.prg_rom_data) == rom.prg_rom_len
    assert rom.chr_rom_len == 0


@pytest.mark.parametrize(
    "flag_6, expected",
    [(0x00, MirrorType.HORIZONTAL), (0x01, MirrorType.VERTICAL),
     (0x08, MirrorType.ONE_WAY), (0x09, MirrorType.FOUR_SCREEN)],
)
def test_mirroring(flag_6, expected):
    image, _, _ = _image(flag_6=flag_6)
    assert parse_ines_bytes(image).mirroring_type is expected


def test_battery_flag():
    image, _, _ = _image(flag_6=0x02)
    rom = parse_ines_bytes(image)
    assert rom.battery_present is True
    assert rom.trainer_present is False


def test_mapper_number_combines_nibbles():
    image, _, _ = _image(flag_6=0x30, flag_7=0x40)
    assert parse_ines_bytes(image).mapper_number == 0x43


def test_trainer_is_skipped():
    image, prg, _ = _image(flag_6=0x04, trainer=b"\xEE" * 512)
    rom = parse_ines_bytes(image)
    assert rom.trainer_present is True
    assert bytes(rom.prg_rom_data) == prg


def test_truncated_data_is_zero_filled():
    image = _header() + b"\x55" * 10
    rom = parse_ines_bytes(image)
    assert len(rom.prg_rom_data) == rom.prg_rom_len
    assert rom.prg_rom_data[:10] == b"\x55" * 10
    assert not any(rom.prg_rom_data[10:])
    assert not any(rom.chr_rom_data)


def test_bad_magic_rejected():
    with pytest.raises(RomFormatError):
        parse_ines_bytes(b"NOPE" + bytes(12))


def test_empty_data_rejected():
    with pytest.raises(RomFormatError):
        parse_ines_bytes(b"")


def test_nes2_rejected():
    image, _, _ = _image(flag_7=0x08)
    with pytest.raises(RomFormatError):
        parse_ines_bytes(image)


def test_parse_file(tmp_path):
    image, prg, _ = _image(flag_6=0x01)
    path = tmp_path / "game.nes"
    path.write_bytes(image)
    rom = parse_ines(path)
    assert bytes(rom.prg_rom_data) == prg
    assert rom.mirroring_type is MirrorType.VERTICAL


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_ines(tmp_path / "absent.nes")


def test_load_cartridge_mapper0(tmp_path):
    image, prg, _ = _image()
    path = tmp_path / "game.nes"
    path.write_bytes(image)
    cart = load_cartridge(path)
    assert isinstance(cart, CartridgeMapping0)
    assert cart.read(0xFFFC) == prg[0x3FFC]
    assert cart.read(0x8000) == prg[0]


def test_load_cartridge_unsupported_mapper(tmp_path):
    image, _, _ = _image(flag_6=0x10)
    path = tmp_path / "game.nes"
    path.write_bytes(image)
    with pytest.raises(RomFormatError):
        load_cartridge(path)