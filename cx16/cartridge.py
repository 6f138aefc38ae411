"""Cartridge images: a header followed by up to 224 banks of 16 KiB."""

from __future__ import annotations

import random
import warnings
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

MAX_BANKS = 224
BANK_SIZE = 0x4000
MAX_SIZE = BANK_SIZE * MAX_BANKS
FIRST_BANK = 32

MAGIC = b"CX16 CARTRIDGE\r\n"
VERSION = b"01.00           "

_TEXT_SIZE = 32
_RESERVED_SIZE = 64 + 32
_BANK_INFO_OFFSET = len(MAGIC) + len(VERSION) + 4 * _TEXT_SIZE + _RESERVED_SIZE
HEADER_SIZE = _BANK_INFO_OFFSET + MAX_BANKS

_WHITESPACE = " \t\n\v\f\r"

PathLike = Union[str, Path]


class BankType(IntEnum):
    """What a cartridge bank holds and how it is stored."""

    NONE = 0
    ROM = 1
    UNINITIALIZED_RAM = 2
    INITIALIZED_RAM = 3
    UNINITIALIZED_NVRAM = 4
    INITIALIZED_NVRAM = 5


_STORED_IN_IMAGE = {BankType.ROM, BankType.INITIALIZED_RAM, BankType.INITIALIZED_NVRAM}
_STORED_IN_NVRAM = {BankType.UNINITIALIZED_NVRAM, BankType.INITIALIZED_NVRAM}
_WRITABLE = {
    BankType.UNINITIALIZED_RAM,
    BankType.INITIALIZED_RAM,
    BankType.UNINITIALIZED_NVRAM,
    BankType.INITIALIZED_NVRAM,
}


class CartridgeError(Exception):
    """A cartridge image could not be read or written."""


class _TextField:
    """A fixed-width, space-padded text field of the header."""

    def __set_name__(self, owner: type, name: str) -> None:
        self.storage = "_" + name

    def __get__(self, obj: object, objtype: type | None = None):
        if obj is None:
            return self
        raw: bytes = getattr(obj, self.storage)
        text = raw.split(b"\0", 1)[0].decode("latin-1")
        return text.rstrip(_WHITESPACE)

    def __set__(self, obj: object, value: str) -> None:
        encoded = value.encode("latin-1", errors="replace")[:_TEXT_SIZE]
        setattr(obj, self.storage, encoded.ljust(_TEXT_SIZE, b" "))


def _bank_offset(bank: int) -> Optional[int]:
    """Index into the bank table for a CPU bank number, or None if out of range."""
    index = bank - FIRST_BANK
    if bank < FIRST_BANK or index >= MAX_BANKS:
        return None
    return index


def _require_bank(bank: int) -> int:
    index = _bank_offset(bank)
    if index is None:
        raise ValueError(f"bank {bank} is not a cartridge bank")
    return index


def _known_type(value: int) -> Union[BankType, int]:
    try:
        return BankType(value)
    except ValueError:
        return value


def _warn_unknown(index: int) -> None:
    warnings.warn(f"Unknown cartridge bank type at {index}", stacklevel=3)


class Cartridge:
    """An in-memory cartridge: header fields, bank types and bank contents.

    Banks are addressed by CPU bank number (32 to 255); ``memory`` holds all
    224 banks back to back.
    """

    description = _TextField()
    author = _TextField()
    copyright = _TextField()
    program_version = _TextField()

    def __init__(self) -> None:
        self.magic = MAGIC
        self.version = VERSION
        self._description = bytes(_TEXT_SIZE)
        self._author = bytes(_TEXT_SIZE)
        self._copyright = bytes(_TEXT_SIZE)
        self._program_version = bytes(_TEXT_SIZE)
        self.reserved = bytes(_RESERVED_SIZE)
        self.bank_info = bytearray(MAX_BANKS)
        self.memory = bytearray(MAX_SIZE)
        self.path: Optional[Path] = None
        self.nvram_path: Optional[Path] = None

    # -- header ---------------------------------------------------------------

    def _header(self) -> bytes:
        return b"".join(
            (
                self.magic,
                self.version,
                self._description,
                self._author,
                self._copyright,
                self._program_version,
                self.reserved,
                bytes(self.bank_info),
            )
        )

    def _parse_header(self, header: bytes) -> None:
        fields = []
        offset = 0
        for size in (len(MAGIC), len(VERSION), _TEXT_SIZE, _TEXT_SIZE,
                     _TEXT_SIZE, _TEXT_SIZE, _RESERVED_SIZE, MAX_BANKS):
            fields.append(header[offset:offset + size])
            offset += size
        (self.magic, self.version, self._description, self._author,
         self._copyright, self._program_version, self.reserved, bank_info) = fields
        self.bank_info = bytearray(bank_info)

    def _bank_slice(self, index: int) -> slice:
        start = index * BANK_SIZE
        return slice(start, start + BANK_SIZE)

    def _initialize_bank(self, index: int, randomize: bool) -> None:
        self.memory[self._bank_slice(index)] = (
            random.randbytes(BANK_SIZE) if randomize else bytes(BANK_SIZE)
        )

    # -- files ----------------------------------------------------------------

    @classmethod
    def load(cls, path: PathLike, randomize: bool = False) -> "Cartridge":
        """Read a ``.crt`` image, taking NVRAM banks from a ``.nvram`` file beside it."""
        path_text = str(path)
        if Path(path_text).suffix.lower() != ".crt":
            raise CartridgeError(f'Path "{path_text}" does not appear to be a cartridge (.crt) file.')

        cart = cls()
        nvram_path = Path(path_text[:-3] + "nvram")
        try:
            image = open(path_text, "rb")
        except OSError as exc:
            raise CartridgeError(f'Could not load cartridge "{path_text}": {exc}') from exc
        try:
            nvram: Optional[BinaryIO] = open(nvram_path, "rb")
        except OSError:
            nvram = None

        try:
            header = image.read(HEADER_SIZE)
            if len(header) != HEADER_SIZE:
                raise CartridgeError(f'Could not load cartridge "{path_text}": Could not read header.')
            cart._parse_header(header)
            if cart.magic != MAGIC:
                raise CartridgeError(f'Could not load cartridge "{path_text}": Not a cartridge file.')
            if cart.version != VERSION:
                raise CartridgeError(f'Could not load cartridge "{path_text}": Unsupported version.')

            for index, kind in enumerate(cart.bank_info):
                if kind in (BankType.ROM, BankType.INITIALIZED_RAM):
                    cart._read_bank(image, index, path_text)
                elif kind in (BankType.UNINITIALIZED_RAM, BankType.UNINITIALIZED_NVRAM):
                    cart._initialize_bank(index, randomize)
                elif kind == BankType.INITIALIZED_NVRAM:
                    if nvram is not None:
                        cart._read_bank(nvram, index, path_text)
                        image.seek(BANK_SIZE, 1)
                    else:
                        cart._read_bank(image, index, path_text)
                elif kind != BankType.NONE:
                    _warn_unknown(index)
        finally:
            image.close()
            if nvram is not None:
                nvram.close()

        cart.path = Path(path_text)
        cart.nvram_path = nvram_path
        return cart

    def _read_bank(self, stream: BinaryIO, index: int, path_text: str) -> None:
        data = stream.read(BANK_SIZE)
        if len(data) != BANK_SIZE:
            raise CartridgeError(f'Could not load cartridge "{path_text}": bank data is truncated.')
        self.memory[self._bank_slice(index)] = data

    def _write_banks(self, stream: BinaryIO, stored: set) -> None:
        for index, kind in enumerate(self.bank_info):
            if kind in stored:
                stream.write(self.memory[self._bank_slice(index)])
            elif _known_type(kind) not in BankType.__members__.values():
                _warn_unknown(index)

    def save(self, path: PathLike) -> None:
        """Write the header and every bank that the image stores."""
        path_text = str(path)
        if not Path(path_text).suffix.startswith(".crt"):
            raise CartridgeError(f'Path "{path_text}" does not appear to be a cartridge (.crt) file.')
        try:
            with open(path_text, "wb") as image:
                image.write(self._header())
                self._write_banks(image, _STORED_IN_IMAGE)
        except OSError as exc:
            raise CartridgeError(f'Could not save cartridge "{path_text}": {exc}') from exc

    def save_nvram(self) -> None:
        """Write every NVRAM bank to ``nvram_path``."""
        if self.nvram_path is None:
            raise CartridgeError("cartridge has no nvram path")
        try:
            with open(self.nvram_path, "wb") as nvram:
                self._write_banks(nvram, _STORED_IN_NVRAM)
        except OSError as exc:
            raise CartridgeError(f'Could not save nvram "{self.nvram_path}": {exc}') from exc

    # -- building -------------------------------------------------------------

    def _range(self, start_bank: int, end_bank: int) -> range:
        start = _require_bank(start_bank)
        end = _require_bank(end_bank)
        if start > end:
            raise ValueError(f"start bank {start_bank} is after end bank {end_bank}")
        return range(start, end + 1)

    def define_bank_range(self, start_bank: int, end_bank: int, bank_type: int) -> None:
        """Set the type of banks ``start_bank`` to ``end_bank`` inclusive."""
        banks = self._range(start_bank, end_bank)
        if bank_type > max(BankType):
            warnings.warn(
                f"Attempting to define unknown cartridge bank type {bank_type}", stacklevel=2
            )
        for index in banks:
            self.bank_info[index] = int(bank_type)

    def import_files(
        self,
        paths: Iterable[PathLike],
        start_bank: int,
        bank_type: int,
        fill_value: int = 0,
    ) -> None:
        """Copy files back to back from ``start_bank``, padding the last bank."""
        start = _require_bank(start_bank)
        offset = start * BANK_SIZE
        for path in paths:
            available = MAX_SIZE - offset
            if available == 0:
                raise CartridgeError("cartridge is full")
            try:
                with open(path, "rb") as source:
                    data = source.read(available)
            except OSError as exc:
                raise CartridgeError(f'Could not import "{path}": {exc}') from exc
            self.memory[offset:offset + len(data)] = data
            offset += len(data)

        fill_end = min((offset + BANK_SIZE - 1) & (0xFF << 14), MAX_SIZE)
        if fill_end > offset:
            self.memory[offset:fill_end] = bytes([fill_value & 0xFF]) * (fill_end - offset)

        last = (offset - 1) // BANK_SIZE
        for index in range(start, last + 1):
            self.bank_info[index] = int(bank_type)

    def fill(self, start_bank: int, end_bank: int, bank_type: int, fill_value: int = 0) -> None:
        """Fill banks ``start_bank`` to ``end_bank`` with one byte and set their type."""
        banks = self._range(start_bank, end_bank)
        begin = banks.start * BANK_SIZE
        end = banks.stop * BANK_SIZE
        self.memory[begin:end] = bytes([fill_value & 0xFF]) * (end - begin)
        for index in banks:
            self.bank_info[index] = int(bank_type)

    # -- bus access -----------------------------------------------------------

    def _address_index(self, address: int, index: int) -> int:
        if not 0xC000 <= address <= 0xFFFF:
            raise ValueError(f"address {address:#x} is outside the cartridge window")
        return index * BANK_SIZE + address - 0xC000

    def read(self, address: int, bank: int) -> int:
        """Read a byte in the $C000-$FFFF window of ``bank``; 0 outside the cartridge."""
        index = _bank_offset(bank)
        if index is None:
            return 0
        return self.memory[self._address_index(address, index)]

    def write(self, address: int, bank: int, value: int) -> None:
        """Write a byte to a RAM or NVRAM bank; writes elsewhere are ignored."""
        index = _bank_offset(bank)
        if index is None or self.bank_info[index] not in _WRITABLE:
            return
        self.memory[self._address_index(address, index)] = value & 0xFF

    def bank_type(self, bank: int) -> Union[BankType, int]:
        """The type of ``bank``; ``BankType.NONE`` outside the cartridge."""
        index = _bank_offset(bank)
        if index is None:
            return BankType.NONE
        return _known_type(self.bank_info[index])