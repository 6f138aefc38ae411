import pytest

from cx16.addressing import AddressingMixin
from cx16.extensions import ExtensionsMixin
from cx16.operations import OperationsMixin
from cx16.registers import Flag
from cx16.support import Bus, CpuSupport
from cx16.tables import Mode


class _Core(ExtensionsMixin, OperationsMixin, AddressingMixin, CpuSupport):
    def __init__(self, bus):
        super().__init__(bus)
        self.warnings = []

    def rockwell_warning(self, instruction):
        self.warnings.append(instruction)
        self.warn_rockwell = False


@pytest.fixture
def core():
    c = _Core(Bus())
    c.regs.e = True
    c.regs.sp = 0x1FF
    c.mode = Mode.ZP
    c.ea = 0x10
    c.eal = 0
    return c


def test_stz_clears_memory(core):
    core.bus.write(0, 0x10, 0x55)
    core.execute_extension("stz")
    assert core.bus.read(0, 0x10) == 0


def test_smb_sets_bit(core):
    core.execute_extension("smb3")
    assert core.bus.read(0, 0x10) == 0x08


def test_rmb_clears_only_its_bit(core):
    core.bus.write(0, 0x10, 0xFF)
    core.execute_extension("rmb3")
    assert core.bus.read(0, 0x10) == 0xFF & ~0x08


def test_bbr_branches_when_bit_clear(core):
    core.regs.pc = 0x200
    core.reladdr = 5
    core.execute_extension("bbr0")
    assert core.regs.pc == 0x205
    assert core.clockticks == 1


def test_bbs_does_not_branch_when_bit_clear(core):
    core.regs.pc = 0x200
    core.reladdr = 5
    core.execute_extension("bbs0")
    assert core.regs.pc == 0x200
    assert core.clockticks == 0


def test_bbs_page_cross_costs_two(core):
    core.bus.write(0, 0x10, 0x80)
    core.regs.pc = 0x20F0
    core.reladdr = 0x20
    core.execute_extension("bbs7")
    assert core.regs.pc == 0x2110
    assert core.clockticks == 2


def test_rockwell_warning_given_once(core):
    core.warn_rockwell = True
    core.execute_extension("smb1")
    core.execute_extension("bbr2")
    assert core.warnings == ["SMB1"]


def test_tsb_sets_bits_and_zero(core):
    core.regs.a = 0x0F
    core.bus.write(0, 0x10, 0xF0)
    core.execute_extension("tsb")
    assert core.bus.read(0, 0x10) == 0xFF
    assert core.regs.status & Flag.ZERO


def test_trb_clears_accumulator_bits(core):
    core.regs.a = 0x0F
    core.bus.write(0, 0x10, 0xFF)
    core.execute_extension("trb")
    assert core.bus.read(0, 0x10) == 0xF0
    assert not core.regs.status & Flag.ZERO


def test_phx_plx_round_trip(core):
    core.regs.xl = 0x42
    core.execute_extension("phx")
    assert core.regs.sp == 0x1FE
    core.regs.xl = 0
    core.execute_extension("plx")
    assert core.regs.xl == 0x42
    assert core.regs.sp == 0x1FF


def test_phy_ply_round_trip_sets_sign(core):
    core.regs.yl = 0x80
    core.execute_extension("phy")
    core.regs.yl = 0
    core.execute_extension("ply")
    assert core.regs.yl == 0x80
    assert core.regs.status & Flag.SIGN


def test_bra_page_cross_in_emulation(core):
    core.regs.pc = 0x20F0
    core.reladdr = 0x20
    core.execute_extension("bra")
    assert core.regs.pc == 0x2110
    assert core.clockticks == 1


def test_wai_sets_waiting(core):
    core.execute_extension("wai")
    assert core.waiting is True


def test_dbg_reports_stop_address(core):
    core.regs.pc = 0x301
    core.execute_extension("dbg")
    assert core.bus.stops == [0x300]


def test_unknown_extension_rejected(core):
    with pytest.raises(ValueError):
        core.execute_extension("xyz")