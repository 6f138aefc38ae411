"""Effective-address calculation for every addressing mode."""

from __future__ import annotations

from .tables import Mode


def _sign_extend(byte: int) -> int:
    """Widen an 8-bit branch offset to a 16-bit two's complement value."""
    return byte | 0xFF00 if byte & 0x80 else byte


class AddressingMixin:
    """Operand decoding; mixed into a class built on ``CpuSupport``.

    Resolving a mode consumes the operand bytes after the opcode and leaves
    the result in ``ea`` (address), ``eal`` (bank) and ``reladdr`` (branch
    offset). ``penaltyaddr`` and ``penaltyd`` are raised for page crossings
    and an unaligned direct page.
    """

    ea: int = 0
    eal: int = 0
    reladdr: int = 0
    penaltyaddr: int = 0
    penaltyd: int = 0

    def resolve(self, mode: Mode | str) -> None:
        """Decode the operand of the current instruction for ``mode``."""
        try:
            handler = self._HANDLERS[Mode(mode)]
        except (KeyError, ValueError):
            raise ValueError(f"unknown addressing mode: {mode!r}") from None
        handler(self)

    # -- operand fetching -----------------------------------------------------

    def _fetch(self) -> int:
        value = self.bus.read(self.regs.k, self.regs.pc)
        self.regs.pc += 1
        return value

    def _operand_word(self) -> int:
        low = self.bus.read(self.regs.k, self.regs.pc)
        high = self.bus.read(self.regs.k, (self.regs.pc + 1) & 0xFFFF)
        self.regs.pc += 2
        return low | (high << 8)

    def _read_word(self, bank: int, address: int) -> int:
        low = self.bus.read(bank, address & 0xFFFF)
        high = self.bus.read(bank, (address + 1) & 0xFFFF)
        return low | (high << 8)

    def _check_direct_page(self) -> None:
        if self.regs.dp & 0x00FF:
            self.penaltyd = 1

    # -- modes ----------------------------------------------------------------

    def _none(self) -> None:
        pass

    def _imm8(self) -> None:
        self.ea = self.regs.pc
        self.regs.pc += 1
        self.eal = self.regs.k

    def _immm(self) -> None:
        self._imm8()
        if self.memory_16bit():
            self.regs.pc += 1

    def _immx(self) -> None:
        self._imm8()
        if self.index_16bit():
            self.regs.pc += 1

    def _imm16(self) -> None:
        self.ea = self.regs.pc
        self.eal = self.regs.k
        self.regs.pc += 2

    def _zp_with_offset(self, offset: int) -> None:
        operand = self._fetch()
        self._check_direct_page()
        self.ea = self.direct_page_add((operand + offset) & 0xFFFF)
        self.eal = 0x00

    def _rel(self) -> None:
        self.reladdr = _sign_extend(self._fetch())

    def _rel16(self) -> None:
        self.reladdr = self._operand_word()

    def _abso(self) -> None:
        self.ea = self._operand_word()
        self.eal = self.regs.db

    def _absolute_indexed(self, index: int) -> None:
        base = self._operand_word()
        self.ea = (base + index) & 0xFFFF
        self.eal = self.regs.db
        if (base & 0xFF00) != (self.ea & 0xFF00):
            self.penaltyaddr = 1

    def _ind(self) -> None:
        pointer = self._operand_word()
        self.ea = self._read_word(0x00, pointer)
        self.eal = self.regs.k

    def _ind0(self) -> None:
        operand = self._fetch()
        low = self.bus.read(0x00, self.direct_page_add(operand))
        high = self.bus.read(0x00, self.direct_page_add(operand + 1))
        self.ea = low | (high << 8)
        self.eal = self.regs.db
        self._check_direct_page()

    def _indx(self) -> None:
        operand = (self._fetch() + self.regs.x) & 0xFFFF
        low = self.bus.read(0x00, self.direct_page_add(operand))
        high = self.bus.read(0x00, self.direct_page_add((operand + 1) & 0xFFFF))
        self.ea = low | (high << 8)
        self.eal = self.regs.db
        self._check_direct_page()

    def _indy(self) -> None:
        operand = self._fetch()
        low = self.bus.read(0x00, self.direct_page_add(operand))
        high = self.bus.read(0x00, self.direct_page_add(operand + 1))
        base = low | (high << 8)
        self.ea = (base + self.regs.y) & 0xFFFF
        self.eal = self.regs.db
        self._check_direct_page()
        if (base & 0xFF00) != (self.ea & 0xFF00):
            self.penaltyaddr = 1

    def _ind0p(self) -> None:
        operand = self._fetch()
        self.ea = self._read_word(0x00, self.regs.dp + operand)
        self.eal = 0x00
        self._check_direct_page()

    def _zprel(self) -> None:
        operands = self._operand_word()
        self.ea = operands & 0xFF
        self.eal = 0x00
        self.reladdr = _sign_extend(operands >> 8)

    def _sr(self) -> None:
        self.ea = (self.regs.sp + self._fetch()) & 0xFFFF
        self.eal = 0x00

    def _sridy(self) -> None:
        pointer = (self.regs.sp + self._fetch()) & 0xFFFF
        base = self._read_word(0x00, pointer)
        self.ea = (base + self.regs.y) & 0xFFFF
        self.eal = 0x00
        if (base & 0xFF00) != (self.ea & 0xFF00):
            self.penaltyaddr = 1

    def _bmv(self) -> None:
        self.ea = self.regs.pc
        self.regs.pc += 2

    def _absl(self) -> None:
        self._abso()
        self.eal = self._fetch()

    def _abslx(self) -> None:
        self._absolute_indexed(self.regs.x)
        self.eal = self._fetch()

    def _aindl(self) -> None:
        self._ind()
        self.eal = self._fetch()

    def _zp_long_with_offset(self, offset: int) -> None:
        operand = self._fetch()
        dp = self.regs.dp
        target = 0
        for i in range(3):
            target |= self.bus.read(0x00, (dp + operand + i) & 0xFFFF) << (8 * i)
        target += offset
        self.ea = target & 0xFFFF
        self.eal = (target >> 16) & 0xFF
        self._check_direct_page()

    def _ainx(self) -> None:
        pointer = (self._operand_word() + self.regs.x) & 0xFFFF
        self.ea = self._read_word(self.regs.k, pointer)

    _HANDLERS = {
        Mode.IMP: _none,
        Mode.IMP8: _none,
        Mode.ACC: _none,
        Mode.IMM8: _imm8,
        Mode.IMMM: _immm,
        Mode.IMMX: _immx,
        Mode.IMM16: _imm16,
        Mode.ZP: lambda self: self._zp_with_offset(0),
        Mode.ZPX: lambda self: self._zp_with_offset(self.regs.x),
        Mode.ZPY: lambda self: self._zp_with_offset(self.regs.y),
        Mode.REL: _rel,
        Mode.REL16: _rel16,
        Mode.ABSO: _abso,
        Mode.ABSX: lambda self: self._absolute_indexed(self.regs.x),
        Mode.ABSY: lambda self: self._absolute_indexed(self.regs.y),
        Mode.IND: _ind,
        Mode.IND0: _ind0,
        Mode.INDX: _indx,
        Mode.INDY: _indy,
        Mode.IND0P: _ind0p,
        Mode.ZPREL: _zprel,
        Mode.SR: _sr,
        Mode.SRIDY: _sridy,
        Mode.BMV: _bmv,
        Mode.ABSL: _absl,
        Mode.ABSLX: _abslx,
        Mode.AINDL: _aindl,
        Mode.INDL0: lambda self: self._zp_long_with_offset(0),
        Mode.INDLY: lambda self: self._zp_long_with_offset(self.regs.y),
        Mode.AINX: _ainx,
    }