"""The core instruction set: what each operation does once its operand is decoded."""

from __future__ import annotations

from .registers import Flag
from .support import InterruptType
from .tables import Mode

_PENALTY_NOPS = frozenset({0x1C, 0x3C, 0x5C, 0x7C, 0xDC, 0xFC})


class OperationsMixin:
    """Instruction semantics; mixed into a class built on ``CpuSupport``.

    The operand has already been decoded into ``ea``/``eal``/``reladdr`` and
    ``mode`` holds the addressing mode of the instruction being executed, so
    that accumulator-mode instructions act on the accumulator instead of
    memory. Cycle penalties are signalled through the ``penalty*`` fields.
    """

    opcode: int = 0
    mode: Mode = Mode.IMP
    penaltyop: int = 0
    penaltym: int = 0
    penaltyx: int = 0
    penaltyn: int = 0
    penaltye: int = 0

    def execute_operation(self, name: str) -> None:
        """Carry out the operation called ``name`` (e.g. ``"lda"``)."""
        try:
            handler = self._OPERATIONS[name]
        except KeyError:
            raise ValueError(f"unknown operation: {name!r}") from None
        handler(self)

    # -- operand access -------------------------------------------------------

    def _get_value(self, wide: bool) -> int:
        if self.mode is Mode.ACC:
            return self.regs.c if wide else self.regs.a
        if wide:
            low = self.bus.read(self.eal, self.ea & 0xFFFF)
            high = self.bus.read(self.eal, (self.ea + 1) & 0xFFFF)
            return low | (high << 8)
        return self.bus.read(self.eal, self.ea & 0xFFFF)

    def _put_value(self, value: int, wide: bool) -> None:
        value &= 0xFFFF
        if self.mode is Mode.ACC:
            if wide:
                self.regs.c = value
            else:
                self.regs.a = value & 0xFF
        elif wide:
            self.bus.write(self.eal, self.ea & 0xFFFF, value & 0xFF)
            self.bus.write(self.eal, (self.ea + 1) & 0xFFFF, value >> 8)
        else:
            self.bus.write(self.eal, self.ea & 0xFFFF, value & 0xFF)

    def _carry(self) -> int:
        return self.regs.status & Flag.CARRY

    def _zero_sign(self, n: int, wide: bool) -> None:
        self._zero_calc(n, wide)
        self._sign_calc(n, wide)

    # -- arithmetic -----------------------------------------------------------

    def _op_adc(self) -> None:
        self.penaltyop = 1
        regs = self.regs
        wide = self.memory_16bit()
        if regs.status & Flag.DECIMAL:
            if wide:
                value = self._get_value(True)
                tmp = (regs.c & 0x000F) + (value & 0x000F) + self._carry()
                tmp2 = (regs.c & 0x00F0) + (value & 0x00F0)
                tmp3 = (regs.c & 0x0F00) + (value & 0x0F00)
                tmp4 = (regs.c & 0xF000) + (value & 0xF000)
                if tmp > 0x0009:
                    tmp2 += 0x0010
                    tmp += 0x0006
                if tmp2 > 0x0090:
                    tmp3 += 0x0100
                    tmp2 += 0x0060
                if tmp3 > 0x0900:
                    tmp4 += 0x1000
                    tmp3 += 0x0600
                tmpov = tmp4
                if tmp4 > 0x9000:
                    tmp4 += 0x6000
                self._set_flag(Flag.CARRY, bool(tmp4 & 0xFFFF0000))
                result = (tmp & 0x000F) | (tmp2 & 0x00F0) | (tmp3 & 0x0F00) | (tmp4 & 0xF000)
                ovresult = (tmp & 0x000F) | (tmp2 & 0x00F0) | (tmp3 & 0x0F00) | (tmpov & 0xF000)
                self._overflow_calc(ovresult, regs.c, value, True)
            else:
                value = self._get_value(False)
                tmp = (regs.a & 0x0F) + (value & 0x0F) + self._carry()
                tmp2 = (regs.a & 0xF0) + (value & 0xF0)
                if tmp > 0x09:
                    tmp2 += 0x10
                    tmp += 0x06
                tmpov = tmp2
                if tmp2 > 0x90:
                    tmp2 += 0x60
                self._set_flag(Flag.CARRY, bool(tmp2 & 0xFF00))
                result = (tmp & 0x0F) | (tmp2 & 0xF0)
                ovresult = ((tmp & 0x0F) | (tmpov & 0xF0)) & 0xFF
                self._overflow_calc(ovresult, regs.a, value, False)
            self.clockticks += int(not regs.is65c816)
        elif wide:
            value = self._get_value(True)
            result = regs.c + value + self._carry()
            self._overflow_calc(result, regs.c, value, True)
            self._carry_calc(result, True)
        else:
            value = self._get_value(False)
            result = regs.a + value + self._carry()
            self._overflow_calc(result, regs.a, value, False)
            self._carry_calc(result, False)
        wide = self.memory_16bit()
        self._zero_sign(result, wide)
        self._save_accum(result)

    def _op_sbc(self) -> None:
        self.penaltyop = 1
        regs = self.regs
        wide = self.memory_16bit()
        if regs.status & Flag.DECIMAL:
            if wide:
                value = self._get_value(True)
                tmp = ((regs.c & 0x000F) - (value & 0x000F) + self._carry() - 1) & 0xFFFF
                tmp2 = ((regs.c & 0x00F0) - (value & 0x00F0)) & 0xFFFF
                tmp3 = ((regs.c & 0x0F00) - (value & 0x0F00)) & 0xFFFF
                tmp4 = ((regs.c & 0xF000) - (value & 0xF000)) & 0xFFFFFFFF
                if tmp & 0xFFF0:
                    tmp2 = (tmp2 - 0x0010) & 0xFFFF
                    tmp = (tmp - 0x0006) & 0xFFFF
                if tmp2 & 0xFF00:
                    tmp3 = (tmp3 - 0x0100) & 0xFFFF
                    tmp2 = (tmp2 - 0x0060) & 0xFFFF
                if tmp3 & 0xF000:
                    tmp4 = (tmp4 - 0x1000) & 0xFFFFFFFF
                    tmp3 = (tmp3 - 0x0600) & 0xFFFF
                tmpc = tmp4
                if tmp4 >= 0x0000A000:
                    tmp4 = (tmp4 - 0x6000) & 0xFFFFFFFF
                result = (tmp & 0x000F) | (tmp2 & 0x00F0) | (tmp3 & 0x0F00) | (tmp4 & 0xF000)
                c_result = (tmp & 0x000F) | (tmp2 & 0x00F0) | (tmp3 & 0x0F00) | (tmpc & 0xF000)
                self._set_flag(Flag.CARRY, c_result <= regs.c)
                ovresult = (regs.c + (value ^ 0xFFFF) + self._carry()) & 0xFFFF
                self._overflow_calc(ovresult, regs.c, value ^ 0xFFFF, True)
            else:
                value = self._get_value(False)
                tmp = ((regs.a & 0x0F) - (value & 0x0F) + self._carry() - 1) & 0xFFFF
                tmp2 = ((regs.a & 0xF0) - (value & 0xF0)) & 0xFFFF
                if tmp & 0xFFF0:
                    tmp2 = (tmp2 - 0x10) & 0xFFFF
                    tmp = (tmp - 0x06) & 0xFFFF
                tmpc = tmp2
                if tmp2 & 0xFF00:
                    tmp2 = (tmp2 - 0x60) & 0xFFFF
                result = (tmp & 0x0F) | (tmp2 & 0xF0)
                c_result = (tmp & 0x0F) | (tmpc & 0xF0)
                self._set_flag(Flag.CARRY, c_result <= regs.a)
                ovresult = (regs.a + (value ^ 0xFF) + self._carry()) & 0xFF
                self._overflow_calc(ovresult, regs.a, value ^ 0xFF, False)
            self.clockticks += int(not regs.is65c816)
        else:
            if wide:
                value = self._get_value(True) ^ 0xFFFF
                result = regs.c + value + self._carry()
                self._overflow_calc(result, regs.c, value, True)
            else:
                value = self._get_value(False) ^ 0x00FF
                result = regs.a + value + self._carry()
                self._overflow_calc(result, regs.a, value, False)
            self._carry_calc(result, wide)
        wide = self.memory_16bit()
        self._zero_sign(result, wide)
        self._save_accum(result)

    # -- logic ----------------------------------------------------------------

    def _logic(self, combine) -> None:
        self.penaltyop = 1
        wide = self.memory_16bit()
        value = self._get_value(wide)
        result = combine(self._acc_for_mode(), value)
        self._zero_sign(result, wide)
        self._save_accum(result)

    def _op_and(self) -> None:
        self._logic(lambda acc, value: acc & value)

    def _op_ora(self) -> None:
        self._logic(lambda acc, value: acc | value)

    def _op_eor(self) -> None:
        self._logic(lambda acc, value: acc ^ value)

    def _op_bit(self) -> None:
        wide = self.memory_16bit()
        value = self._get_value(wide)
        self._zero_calc(self._acc_for_mode() & value, wide)
        # BIT #imm affects only Z on the 65C02.
        if self.opcode != 0x89:
            self.regs.status = (self.regs.status & 0x3F) | (value & 0xC0)

    # -- shifts and read-modify-write -----------------------------------------

    def _op_asl(self) -> None:
        wide = self.memory_16bit()
        result = self._get_value(wide) << 1
        self._carry_calc(result, wide)
        self._zero_sign(result, wide)
        self._put_value(result, wide)

    def _op_lsr(self) -> None:
        wide = self.memory_16bit()
        value = self._get_value(wide)
        result = value >> 1
        self._set_flag(Flag.CARRY, bool(value & 1))
        self._zero_sign(result, wide)
        self._put_value(result, wide)

    def _op_rol(self) -> None:
        wide = self.memory_16bit()
        result = (self._get_value(wide) << 1) | self._carry()
        self._carry_calc(result, wide)
        self._zero_sign(result, wide)
        self._put_value(result, wide)

    def _op_ror(self) -> None:
        wide = self.memory_16bit()
        value = self._get_value(wide)
        result = (value >> 1) | (self._carry() << (15 if wide else 7))
        self._set_flag(Flag.CARRY, bool(value & 1))
        self._zero_sign(result, wide)
        self._put_value(result, wide)

    def _op_inc(self) -> None:
        wide = self.memory_16bit()
        result = (self._get_value(wide) + 1) & 0xFFFF
        self._zero_sign(result, wide)
        self._put_value(result, wide)

    def _op_dec(self) -> None:
        wide = self.memory_16bit()
        result = (self._get_value(wide) - 1) & 0xFFFF
        self._zero_sign(result, wide)
        self._put_value(result, wide)

    # -- index register arithmetic --------------------------------------------

    def _step_index(self, full: str, low: str, delta: int) -> None:
        regs = self.regs
        if self.index_16bit():
            setattr(regs, full, getattr(regs, full) + delta)
            self._zero_sign(getattr(regs, full), True)
        else:
            setattr(regs, low, (getattr(regs, low) + delta) & 0xFF)
            self._zero_sign(getattr(regs, low), False)

    def _op_inx(self) -> None:
        self._step_index("x", "xl", 1)

    def _op_iny(self) -> None:
        self._step_index("y", "yl", 1)

    def _op_dex(self) -> None:
        self._step_index("x", "xl", -1)

    def _op_dey(self) -> None:
        self._step_index("y", "yl", -1)

    # -- comparisons ----------------------------------------------------------

    def _compare(self, register: int, low: int, wide: bool) -> None:
        value = self._get_value(wide)
        if wide:
            result = (register - value) & 0xFFFF
            self._set_flag(Flag.CARRY, register >= value)
            self._set_flag(Flag.ZERO, register == value)
        else:
            result = (low - value) & 0xFFFF
            self._set_flag(Flag.CARRY, low >= (value & 0xFF))
            self._set_flag(Flag.ZERO, low == (value & 0xFF))
        self._sign_calc(result, wide)

    def _op_cmp(self) -> None:
        self.penaltyop = 1
        self._compare(self.regs.c, self.regs.a, self.memory_16bit())

    def _op_cpx(self) -> None:
        self._compare(self.regs.x, self.regs.xl, self.index_16bit())

    def _op_cpy(self) -> None:
        self._compare(self.regs.y, self.regs.yl, self.index_16bit())

    # -- branches and jumps ---------------------------------------------------

    def _branch(self, condition: bool) -> None:
        if condition:
            oldpc = self.regs.pc
            self.regs.pc = oldpc + self.reladdr
            self.clockticks += 1
            if (oldpc & 0xFF00) != (self.regs.pc & 0xFF00):
                self.penaltye = 1

    def _op_bcc(self) -> None:
        self._branch(not self.regs.status & Flag.CARRY)

    def _op_bcs(self) -> None:
        self._branch(bool(self.regs.status & Flag.CARRY))

    def _op_beq(self) -> None:
        self._branch(bool(self.regs.status & Flag.ZERO))

    def _op_bne(self) -> None:
        self._branch(not self.regs.status & Flag.ZERO)

    def _op_bmi(self) -> None:
        self._branch(bool(self.regs.status & Flag.SIGN))

    def _op_bpl(self) -> None:
        self._branch(not self.regs.status & Flag.SIGN)

    def _op_bvc(self) -> None:
        self._branch(not self.regs.status & Flag.OVERFLOW)

    def _op_bvs(self) -> None:
        self._branch(bool(self.regs.status & Flag.OVERFLOW))

    def _op_brl(self) -> None:
        self.regs.pc = self.regs.pc + self.reladdr

    def _op_jmp(self) -> None:
        self.regs.pc = self.ea

    def _op_jml(self) -> None:
        self.regs.pc = self.ea
        self.regs.k = self.eal

    def _op_jsr(self) -> None:
        self.push16((self.regs.pc - 1) & 0xFFFF)
        self.regs.pc = self.ea

    def _op_jsl(self) -> None:
        self.push8(self.regs.k)
        self.push16((self.regs.pc - 1) & 0xFFFF)
        self.regs.pc = self.ea
        self.regs.k = self.eal

    def _op_rts(self) -> None:
        self.regs.pc = self.pull16() + 1

    def _op_rtl(self) -> None:
        self.regs.pc = self.pull16() + 1
        self.regs.k = self.pull8()

    def _op_rti(self) -> None:
        regs = self.regs
        regs.status = self.pull8()
        regs.pc = self.pull16()
        if regs.e:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH
        else:
            if regs.status & Flag.INDEX_WIDTH:
                regs.xh = 0
                regs.yh = 0
            regs.k = self.pull8()

    def _op_brk(self) -> None:
        self.penaltyn = 1
        self.regs.pc += 1
        self.interrupt(InterruptType.BRK)

    def _op_cop(self) -> None:
        self.penaltyn = 1
        self.regs.pc += 1
        self.interrupt(InterruptType.COP)

    # -- flag instructions ----------------------------------------------------

    def _op_clc(self) -> None:
        self._set_flag(Flag.CARRY, False)

    def _op_cld(self) -> None:
        self._set_flag(Flag.DECIMAL, False)

    def _op_cli(self) -> None:
        self._set_flag(Flag.INTERRUPT, False)

    def _op_clv(self) -> None:
        self._set_flag(Flag.OVERFLOW, False)

    def _op_sec(self) -> None:
        self._set_flag(Flag.CARRY, True)

    def _op_sed(self) -> None:
        self._set_flag(Flag.DECIMAL, True)

    def _op_sei(self) -> None:
        self._set_flag(Flag.INTERRUPT, True)

    def _op_rep(self) -> None:
        regs = self.regs
        regs.status &= ~(self._get_value(False) & 0xFF)
        if regs.e:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH

    def _op_sep(self) -> None:
        regs = self.regs
        regs.status |= self._get_value(False) & 0xFF
        if regs.e:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH
        if regs.status & Flag.INDEX_WIDTH:
            regs.xh = 0
            regs.yh = 0

    def _op_xce(self) -> None:
        regs = self.regs
        carry = regs.status & Flag.CARRY
        regs.status = (regs.status & ~Flag.CARRY & 0xFF) | (Flag.CARRY if regs.e else 0)
        regs.e = carry != 0
        if regs.e:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH
            regs.sp = 0x0100 | (regs.sp & 0x00FF)
            regs.xh = 0
            regs.yh = 0

    # -- loads and stores -----------------------------------------------------

    def _op_lda(self) -> None:
        self.penaltyop = 1
        self.penaltym = 1
        if self.memory_16bit():
            self.regs.c = self._get_value(True)
            self._zero_sign(self.regs.c, True)
        else:
            self.regs.a = self._get_value(False) & 0xFF
            self._zero_sign(self.regs.a, False)

    def _load_index(self, full: str, low: str) -> None:
        self.penaltyop = 1
        self.penaltyx = 1
        regs = self.regs
        if self.index_16bit():
            setattr(regs, full, self._get_value(True))
            self._zero_sign(getattr(regs, full), True)
        else:
            setattr(regs, low, self._get_value(False) & 0xFF)
            self._zero_sign(getattr(regs, low), False)

    def _op_ldx(self) -> None:
        self._load_index("x", "xl")

    def _op_ldy(self) -> None:
        self._load_index("y", "yl")

    def _op_sta(self) -> None:
        self._put_value(self._acc_for_mode(), self.memory_16bit())

    def _op_stx(self) -> None:
        wide = self.index_16bit()
        self._put_value(self.regs.x if wide else self.regs.xl, wide)

    def _op_sty(self) -> None:
        wide = self.index_16bit()
        self._put_value(self.regs.y if wide else self.regs.yl, wide)

    # -- stack ----------------------------------------------------------------

    def _op_pea(self) -> None:
        self.push16(self._get_value(True))

    def _op_pei(self) -> None:
        self.push16(self.ea)

    def _op_per(self) -> None:
        self.push16((self.regs.pc + self.reladdr) & 0xFFFF)

    def _op_pha(self) -> None:
        if self.memory_16bit():
            self.push16(self.regs.c)
        else:
            self.push8(self.regs.a)

    def _op_phb(self) -> None:
        self.push8(self.regs.db)

    def _op_phd(self) -> None:
        self.push16(self.regs.dp)

    def _op_phk(self) -> None:
        self.push8(self.regs.k)

    def _op_php(self) -> None:
        status = self.regs.status
        self.push8(status | Flag.BREAK if self.regs.e else status)

    def _op_pla(self) -> None:
        if self.memory_16bit():
            self.regs.c = self.pull16()
            self._zero_sign(self.regs.c, True)
        else:
            self.regs.a = self.pull8()
            self._zero_sign(self.regs.a, False)

    def _op_plb(self) -> None:
        self.regs.db = self.pull8()
        self._zero_sign(self.regs.db, False)

    def _op_pld(self) -> None:
        self.regs.dp = self.pull16()

    def _op_plp(self) -> None:
        regs = self.regs
        regs.status = self.pull8()
        if regs.e:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH
        elif regs.status & Flag.INDEX_WIDTH:
            regs.xh = 0
            regs.yh = 0

    # -- transfers ------------------------------------------------------------

    def _transfer_to_index(self, full: str, low: str, wide_source: int, narrow_source: int) -> None:
        regs = self.regs
        if self.index_16bit():
            setattr(regs, full, wide_source)
            self._zero_sign(getattr(regs, full), True)
        else:
            setattr(regs, low, narrow_source & 0xFF)
            self._zero_sign(getattr(regs, low), False)

    def _op_tax(self) -> None:
        self._transfer_to_index("x", "xl", self.regs.c, self.regs.a)

    def _op_tay(self) -> None:
        self._transfer_to_index("y", "yl", self.regs.c, self.regs.a)

    def _op_txy(self) -> None:
        self._transfer_to_index("y", "yl", self.regs.x, self.regs.xl)

    def _op_tyx(self) -> None:
        self._transfer_to_index("x", "xl", self.regs.y, self.regs.yl)

    def _op_tsx(self) -> None:
        regs = self.regs
        if self.index_16bit():
            regs.x = regs.sp
            self._zero_sign(regs.x, True)
        else:
            regs.xl = regs.sp & 0xFF
            regs.xh = 0
            self._zero_sign(regs.xl, False)

    def _transfer_to_accumulator(self, full: int, low: int) -> None:
        regs = self.regs
        if self.memory_16bit():
            if self.index_16bit():
                regs.c = full
                self._zero_sign(regs.c, True)
            else:
                regs.a = low
                regs.b = 0
                self._zero_sign(regs.a, False)
        else:
            regs.a = low
            self._zero_sign(regs.a, False)

    def _op_txa(self) -> None:
        self._transfer_to_accumulator(self.regs.x, self.regs.xl)

    def _op_tya(self) -> None:
        self._transfer_to_accumulator(self.regs.y, self.regs.yl)

    def _op_txs(self) -> None:
        regs = self.regs
        regs.sp = 0x100 | regs.xl if regs.e else regs.x

    def _op_tcd(self) -> None:
        self.regs.dp = self.regs.c
        self._zero_sign(self.regs.dp, True)

    def _op_tdc(self) -> None:
        self.regs.c = self.regs.dp
        self._zero_sign(self.regs.c, True)

    def _op_tcs(self) -> None:
        self.regs.sp = self.regs.c

    def _op_tsc(self) -> None:
        self.regs.c = self.regs.sp
        self._zero_sign(self.regs.c, True)

    def _op_xba(self) -> None:
        regs = self.regs
        regs.a, regs.b = regs.b, regs.a
        self._zero_sign(regs.a, False)

    # -- block moves and no-ops -----------------------------------------------

    def _block_move(self, delta: int) -> None:
        regs = self.regs
        # Both bank bytes are taken from the first operand byte.
        dst = self._get_value(self.ea != 0) & 0xFF
        src = self._get_value(True) & 0xFF
        if self.index_16bit():
            source, target = regs.x, regs.y
            regs.x = source + delta
            regs.y = target + delta
        else:
            source, target = regs.xl, regs.yl
            regs.xl = (source + delta) & 0xFF
            regs.yl = (target + delta) & 0xFF
        self.bus.write(dst, target, self.bus.read(src, source))
        regs.c = regs.c - 1
        if regs.c != 0xFFFF:
            regs.pc -= 3

    def _op_mvn(self) -> None:
        self._block_move(1)

    def _op_mvp(self) -> None:
        self._block_move(-1)

    def _op_nop(self) -> None:
        if self.opcode in _PENALTY_NOPS:
            self.penaltyop = 1

    def _op_wdm(self) -> None:
        pass

    _OPERATIONS = {
        "adc": _op_adc, "sbc": _op_sbc,
        "and": _op_and, "ora": _op_ora, "eor": _op_eor, "bit": _op_bit,
        "asl": _op_asl, "lsr": _op_lsr, "rol": _op_rol, "ror": _op_ror,
        "inc": _op_inc, "dec": _op_dec,
        "inx": _op_inx, "iny": _op_iny, "dex": _op_dex, "dey": _op_dey,
        "cmp": _op_cmp, "cpx": _op_cpx, "cpy": _op_cpy,
        "bcc": _op_bcc, "bcs": _op_bcs, "beq": _op_beq, "bne": _op_bne,
        "bmi": _op_bmi, "bpl": _op_bpl, "bvc": _op_bvc, "bvs": _op_bvs,
        "brl": _op_brl, "jmp": _op_jmp, "jml": _op_jml, "jsr": _op_jsr,
        "jsl": _op_jsl, "rts": _op_rts, "rtl": _op_rtl, "rti": _op_rti,
        "brk": _op_brk, "cop": _op_cop,
        "clc": _op_clc, "cld": _op_cld, "cli": _op_cli, "clv": _op_clv,
        "sec": _op_sec, "sed": _op_sed, "sei": _op_sei,
        "rep": _op_rep, "sep": _op_sep, "xce": _op_xce,
        "lda": _op_lda, "ldx": _op_ldx, "ldy": _op_ldy,
        "sta": _op_sta, "stx": _op_stx, "sty": _op_sty,
        "pea": _op_pea, "pei": _op_pei, "per": _op_per,
        "pha": _op_pha, "phb": _op_phb, "phd": _op_phd, "phk": _op_phk,
        "php": _op_php, "pla": _op_pla, "plb": _op_plb, "pld": _op_pld,
        "plp": _op_plp,
        "tax": _op_tax, "tay": _op_tay, "txy": _op_txy, "tyx": _op_tyx,
        "tsx": _op_tsx, "txa": _op_txa, "tya": _op_tya, "txs": _op_txs,
        "tcd": _op_tcd, "tdc": _op_tdc, "tcs": _op_tcs, "tsc": _op_tsc,
        "xba": _op_xba, "mvn": _op_mvn, "mvp": _op_mvp,
        "nop": _op_nop, "wdm": _op_wdm,
    }