import pytest

from cx16.cartridge import (
    BANK_SIZE,
    HEADER_SIZE,
    MAGIC,
    VERSION,
    BankType,
    Cartridge,
    CartridgeError,
)


def test_new_cartridge_is_empty():
    cart = Cartridge()
    assert cart.bank_type(32) is BankType.NONE
    assert cart.description == ""
    assert cart.read(0xC000, 40) == 0


def test_banks_below_32_are_outside():
    cart = Cartridge()
    cart.fill(32, 32, BankType.INITIALIZED_RAM, 7)
    assert cart.bank_type(31) is BankType.NONE
    assert cart.read(0xC000, 31) == 0
    with pytest.raises(ValueError):
        cart.define_bank_range(10, 40, BankType.ROM)


def test_define_bank_range_rejects_reversed_range():
    cart = Cartridge()
    with pytest.raises(ValueError):
        cart.define_bank_range(50, 40, BankType.ROM)


def test_define_bank_range_sets_types():
    cart = Cartridge()
    cart.define_bank_range(33, 35, BankType.UNINITIALIZED_RAM)
    assert [cart.bank_type(b) for b in (32, 33, 34, 35, 36)] == [
        BankType.NONE,
        BankType.UNINITIALIZED_RAM,
        BankType.UNINITIALIZED_RAM,
        BankType.UNINITIALIZED_RAM,
        BankType.NONE,
    ]


def test_unknown_bank_type_warns():
    cart = Cartridge()
    with pytest.warns(UserWarning):
        cart.define_bank_range(32, 32, 9)
    assert cart.bank_type(32) == 9


def test_write_only_affects_ram_banks():
    cart = Cartridge()
    cart.fill(32, 32, BankType.ROM, 0x11)
    cart.fill(33, 33, BankType.INITIALIZED_RAM, 0x00)
    cart.write(0xC000, 32, 0x55)
    cart.write(0xD234, 33, 0x55)
    assert cart.read(0xC000, 32) == 0x11
    assert cart.read(0xD234, 33) == 0x55


def test_address_outside_window_rejected():
    cart = Cartridge()
    with pytest.raises(ValueError):
        cart.read(0x8000, 32)


def test_text_fields_trim_and_truncate():
    cart = Cartridge()
    cart.description = "Demo  "
    cart.author = "x" * 40
    assert cart.description == "Demo"
    assert cart.author == "x" * 32


def test_save_load_round_trip(tmp_path):
    cart = Cartridge()
    cart.description = "Demo"
    cart.program_version = "1.2"
    cart.fill(32, 33, BankType.ROM, 0x42)
    cart.define_bank_range(34, 34, BankType.UNINITIALIZED_RAM)
    path = tmp_path / "demo.crt"
    cart.save(path)

    data = path.read_bytes()
    assert data[:16] == MAGIC
    assert data[16:32] == VERSION
    assert len(data) == HEADER_SIZE + 2 * BANK_SIZE

    loaded = Cartridge.load(path)
    assert loaded.description == "Demo"
    assert loaded.program_version == "1.2"
    assert loaded.read(0xFFFF, 33) == 0x42
    assert loaded.bank_type(34) is BankType.UNINITIALIZED_RAM
    assert loaded.read(0xC000, 34) == 0


def test_load_rejects_wrong_extension(tmp_path):
    path = tmp_path / "demo.bin"
    path.write_bytes(b"")
    with pytest.raises(CartridgeError):
        Cartridge.load(path)


def test_save_rejects_wrong_extension(tmp_path):
    with pytest.raises(CartridgeError):
        Cartridge().save(tmp_path / "demo.prg")


def test_load_rejects_short_header(tmp_path):
    path = tmp_path / "short.crt"
    path.write_bytes(MAGIC + VERSION)
    with pytest.raises(CartridgeError):
        Cartridge.load(path)


def test_load_rejects_bad_magic(tmp_path):
    cart = Cartridge()
    path = tmp_path / "bad.crt"
    cart.save(path)
    data = bytearray(path.read_bytes())
    data[0:4] = b"NOPE"
    path.write_bytes(bytes(data))
    with pytest.raises(CartridgeError):
        Cartridge.load(path)


def test_load_rejects_bad_version(tmp_path):
    cart = Cartridge()
    path = tmp_path / "old.crt"
    cart.save(path)
    data = bytearray(path.read_bytes())
    data[16:21] = b"99.99"
    path.write_bytes(bytes(data))
    with pytest.raises(CartridgeError):
        Cartridge.load(path)


def test_load_rejects_truncated_bank(tmp_path):
    cart = Cartridge()
    cart.fill(32, 32, BankType.ROM, 1)
    path = tmp_path / "cut.crt"
    cart.save(path)
    path.write_bytes(path.read_bytes()[:-10])
    with pytest.raises(CartridgeError):
        Cartridge.load(path)


def test_nvram_round_trip(tmp_path):
    cart = Cartridge()
    cart.fill(32, 32, BankType.INITIALIZED_NVRAM, 0x10)
    path = tmp_path / "game.crt"
    cart.save(path)

    loaded = Cartridge.load(path)
    assert loaded.nvram_path == tmp_path / "game.nvram"
    assert loaded.read(0xC123, 32) == 0x10
    loaded.write(0xC123, 32, 0x99)
    loaded.save_nvram()
    assert (tmp_path / "game.nvram").stat().st_size == BANK_SIZE

    reloaded = Cartridge.load(path)
    assert reloaded.read(0xC123, 32) == 0x99
    assert reloaded.read(0xC124, 32) == 0x10


def test_save_nvram_without_path_fails():
    with pytest.raises(CartridgeError):
        Cartridge().save_nvram()


def test_import_files_pads_last_bank(tmp_path):
    payload = bytes(range(256)) * 80
    source = tmp_path / "code.bin"
    source.write_bytes(payload)
    cart = Cartridge()
    cart.import_files([source], 32, BankType.ROM, 0xAA)

    assert cart.bank_type(32) is BankType.ROM
    assert cart.bank_type(33) is BankType.ROM
    assert cart.bank_type(34) is BankType.NONE
    assert cart.read(0xC000, 32) == payload[0]
    assert cart.read(0xC000, 33) == payload[BANK_SIZE]
    tail = len(payload) - BANK_SIZE
    assert cart.read(0xC000 + tail, 33) == 0xAA
    assert cart.read(0xFFFF, 33) == 0xAA


def test_import_missing_file_fails(tmp_path):
    with pytest.raises(CartridgeError):
        Cartridge().import_files([tmp_path / "missing.bin"], 32, BankType.ROM)


def test_load_without_randomize_zeroes_ram(tmp_path):
    cart = Cartridge()
    cart.define_bank_range(32, 32, BankType.UNINITIALIZED_NVRAM)
    path = tmp_path / "ram.crt"
    cart.save(path)
    loaded = Cartridge.load(path, randomize=False)
    assert all(loaded.read(0xC000 + i, 32) == 0 for i in range(0, BANK_SIZE, 257))
    assert path.stat().st_size == HEADER_SIZE