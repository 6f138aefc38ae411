import pytest

from cx16.addressing import AddressingMixin
from cx16.operations import OperationsMixin
from cx16.registers import Flag
from cx16.support import Bus, CpuSupport
from cx16.tables import Mode


class Machine(OperationsMixin, AddressingMixin, CpuSupport):
    pass


def make(c816=False):
    machine = Machine(Bus())
    machine.reset(c816)
    return machine


def operand(machine, value, address=0x0300):
    machine.bus.write(0, address, value)
    machine.ea = address
    machine.eal = 0
    machine.mode = Mode.ZP


def flags(machine, *wanted):
    return tuple(bool(machine.regs.status & f) for f in wanted)


def test_unknown_operation_raises():
    with pytest.raises(ValueError):
        make().execute_operation("xyz")


def test_lda_loads_and_sets_sign():
    m = make()
    operand(m, 0x80)
    m.execute_operation("lda")
    assert m.regs.a == 0x80
    assert flags(m, Flag.SIGN, Flag.ZERO) == (True, False)


def test_lda_zero_sets_zero_flag():
    m = make()
    operand(m, 0)
    m.regs.a = 5
    m.execute_operation("lda")
    assert m.regs.a == 0
    assert flags(m, Flag.ZERO) == (True,)


@pytest.mark.parametrize("a,v", [(0x12, 0x34), (0x7F, 0x01), (0xF0, 0x20), (0x00, 0xFF)])
def test_adc_then_sbc_round_trip(a, v):
    m = make()
    m.regs.a = a
    m.execute_operation("clc")
    operand(m, v)
    m.execute_operation("adc")
    m.execute_operation("sec")
    m.execute_operation("sbc")
    assert m.regs.a == a


def test_adc_signed_overflow():
    m = make()
    m.regs.a = 0x7F
    m.execute_operation("clc")
    operand(m, 0x01)
    m.execute_operation("adc")
    assert m.regs.a == 0x80
    assert flags(m, Flag.OVERFLOW, Flag.SIGN, Flag.CARRY) == (True, True, False)


def test_decimal_adc_carries_digit():
    m = make()
    m.execute_operation("sed")
    m.execute_operation("clc")
    m.regs.a = 0x19
    operand(m, 0x01)
    before = m.clockticks
    m.execute_operation("adc")
    assert m.regs.a == 0x20
    assert m.clockticks == before + 1


@pytest.mark.parametrize("a,v", [(0x45, 0x27), (0x99, 0x01), (0x10, 0x09)])
def test_decimal_adc_sbc_round_trip(a, v):
    m = make()
    m.execute_operation("sed")
    m.execute_operation("clc")
    m.regs.a = a
    operand(m, v)
    m.execute_operation("adc")
    m.execute_operation("sec")
    m.execute_operation("sbc")
    assert m.regs.a == a


def test_cmp_equal_sets_zero_and_carry():
    m = make()
    m.regs.a = 0x42
    operand(m, 0x42)
    m.execute_operation("cmp")
    assert flags(m, Flag.ZERO, Flag.CARRY) == (True, True)


def test_cmp_smaller_clears_carry():
    m = make()
    m.regs.a = 0x10
    operand(m, 0x20)
    m.execute_operation("cmp")
    assert flags(m, Flag.CARRY, Flag.ZERO) == (False, False)


def test_asl_accumulator_moves_top_bit_to_carry():
    m = make()
    m.mode = Mode.ACC
    m.regs.a = 0x81
    m.execute_operation("asl")
    assert flags(m, Flag.CARRY) == (True,)
    assert m.regs.a == 0x02


@pytest.mark.parametrize("value", [0x00, 0x01, 0x80, 0xA5, 0xFF])
def test_rol_then_ror_round_trip(value):
    m = make()
    operand(m, value)
    m.execute_operation("clc")
    m.execute_operation("rol")
    m.execute_operation("ror")
    assert m.bus.read(0, 0x0300) == value
    assert flags(m, Flag.CARRY) == (False,)


def test_inc_dec_memory_round_trip():
    m = make()
    operand(m, 0xFF)
    m.execute_operation("inc")
    assert m.bus.read(0, 0x0300) == 0
    assert flags(m, Flag.ZERO) == (True,)
    m.execute_operation("dec")
    assert m.bus.read(0, 0x0300) == 0xFF


def test_dex_wraps_low_byte():
    m = make()
    m.regs.xl = 0
    m.execute_operation("dex")
    assert m.regs.xl == 0xFF
    assert flags(m, Flag.SIGN) == (True,)


def test_pha_pla_round_trip():
    m = make()
    m.regs.a = 0x5A
    sp = m.regs.sp
    m.execute_operation("pha")
    m.regs.a = 0
    m.execute_operation("pla")
    assert m.regs.a == 0x5A
    assert m.regs.sp == sp


def test_php_in_emulation_sets_break_bit_on_stack():
    m = make()
    sp = m.regs.sp
    m.execute_operation("php")
    assert (m.bus.read(0, sp) & Flag.BREAK) == Flag.BREAK


def test_jsr_rts_returns_after_call():
    m = make()
    m.regs.pc = 0x1003
    m.ea = 0x2000
    m.execute_operation("jsr")
    assert m.regs.pc == 0x2000
    m.execute_operation("rts")
    assert m.regs.pc == 0x1003


def test_jsl_rtl_restores_bank():
    m = make(c816=True)
    m.regs.pc = 0x1004
    m.regs.k = 0x01
    m.ea = 0x3000
    m.eal = 0x02
    m.execute_operation("jsl")
    assert (m.regs.k, m.regs.pc) == (0x02, 0x3000)
    m.execute_operation("rtl")
    assert (m.regs.k, m.regs.pc) == (0x01, 0x1004)


def test_bne_taken_adds_offset_and_cycle():
    m = make()
    m.regs.pc = 0x1000
    m.reladdr = 0x0010
    m.execute_operation("clc")
    m.regs.status &= ~Flag.ZERO & 0xFF
    before = m.clockticks
    m.execute_operation("bne")
    assert m.regs.pc == 0x1010
    assert m.clockticks == before + 1


def test_beq_not_taken_leaves_pc():
    m = make()
    m.regs.pc = 0x1000
    m.reladdr = 0x0010
    m.regs.status &= ~Flag.ZERO & 0xFF
    m.execute_operation("beq")
    assert m.regs.pc == 0x1000


def test_bit_immediate_keeps_sign_and_overflow():
    m = make()
    m.opcode = 0x89
    m.regs.a = 0
    m.regs.status &= ~(Flag.SIGN | Flag.OVERFLOW) & 0xFF
    operand(m, 0xC0)
    m.execute_operation("bit")
    assert flags(m, Flag.SIGN, Flag.OVERFLOW, Flag.ZERO) == (False, False, True)


def test_bit_memory_copies_top_bits():
    m = make()
    m.opcode = 0x24
    m.regs.a = 0xFF
    operand(m, 0xC0)
    m.execute_operation("bit")
    assert flags(m, Flag.SIGN, Flag.OVERFLOW) == (True, True)


def test_brk_jumps_through_irq_vector():
    m = make()
    m.bus.write(0, 0xFFFE, 0x34)
    m.bus.write(0, 0xFFFF, 0x12)
    m.regs.pc = 0x0801
    m.execute_operation("brk")
    assert m.regs.pc == 0x1234
    assert m.penaltyn == 1
    assert flags(m, Flag.INTERRUPT) == (True,)


def test_xce_twice_restores_mode():
    m = make(c816=True)
    m.execute_operation("clc")
    m.execute_operation("xce")
    assert m.regs.e is False
    assert flags(m, Flag.CARRY) == (True,)
    m.execute_operation("xce")
    assert m.regs.e is True
    assert m.regs.sp & 0xFF00 == 0x0100


def test_xba_twice_is_identity():
    m = make(c816=True)
    m.regs.c = 0x1234
    m.execute_operation("xba")
    assert (m.regs.a, m.regs.b) == (0x12, 0x34)
    m.execute_operation("xba")
    assert m.regs.c == 0x1234


def test_rep_in_emulation_keeps_width_bits():
    m = make(c816=True)
    operand(m, 0x30)
    m.execute_operation("rep")
    assert flags(m, Flag.INDEX_WIDTH, Flag.MEMORY_WIDTH) == (True, True)


def test_native_16bit_lda_reads_word():
    m = make(c816=True)
    m.execute_operation("clc")
    m.execute_operation("xce")
    operand(m, 0x30)
    m.execute_operation("rep")
    assert m.memory_16bit()
    m.bus.write(0, 0x0400, 0x34)
    m.bus.write(0, 0x0401, 0x12)
    m.ea = 0x0400
    m.execute_operation("lda")
    assert m.regs.c == 0x1234


def test_tax_txa_round_trip():
    m = make()
    m.regs.a = 0x77
    m.execute_operation("tax")
    m.regs.a = 0
    m.execute_operation("txa")
    assert m.regs.a == 0x77
    assert m.regs.xl == 0x77


def test_txs_in_emulation_stays_in_page_one():
    m = make()
    m.regs.xl = 0x40
    m.execute_operation("txs")
    assert m.regs.sp == 0x0140


def test_mvn_copies_single_byte_and_finishes():
    m = make(c816=True)
    m.execute_operation("clc")
    m.execute_operation("xce")
    operand(m, 0x30)
    m.execute_operation("rep")
    m.regs.x = 0x1000
    m.regs.y = 0x2000
    m.regs.c = 0
    m.bus.write(0, 0x1000, 0x42)
    m.regs.pc = 0x0500
    m.bus.write(0, 0x0600, 0)
    m.ea = 0x0600
    m.eal = 0
    m.mode = Mode.BMV
    m.execute_operation("mvn")
    assert m.bus.read(0, 0x2000) == 0x42
    assert m.regs.x == 0x1000 + 1
    assert m.regs.c == 0xFFFF
    assert m.regs.pc == 0x0500


def test_nop_penalty_only_for_absolute_nops():
    m = make()
    m.opcode = 0xFC
    m.execute_operation("nop")
    assert m.penaltyop == 1
    m.penaltyop = 0
    m.opcode = 0xEA
    m.execute_operation("nop")
    assert m.penaltyop == 0