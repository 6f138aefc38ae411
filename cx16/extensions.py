"""Instructions added by the 65C02: STZ, BRA, PHX/PLX, TSB/TRB, WAI, DBG and the Rockwell bit ops."""

from __future__ import annotations

from .registers import Flag


class ExtensionsMixin:
    """65C02 additions; mixed into a class that also has ``OperationsMixin``.

    The Rockwell bit instructions (BBR, BBS, SMB, RMB) report themselves
    through ``rockwell_warning`` while ``warn_rockwell`` is true.
    """

    warn_rockwell: bool = False

    def execute_extension(self, name: str) -> None:
        """Carry out the 65C02 extension called ``name`` (e.g. ``"stz"``)."""
        try:
            handler = self._EXTENSIONS[name]
        except KeyError:
            raise ValueError(f"unknown extension: {name!r}") from None
        handler(self)

    def _rockwell(self, instruction: str) -> None:
        if self.warn_rockwell:
            self.rockwell_warning(instruction)

    # -- stores and branches --------------------------------------------------

    def _ext_stz(self) -> None:
        self._put_value(0, self.memory_16bit())

    def _ext_bra(self) -> None:
        oldpc = self.regs.pc
        self.regs.pc = oldpc + self.reladdr
        if self.regs.e and (oldpc & 0xFF00) != (self.regs.pc & 0xFF00):
            self.clockticks += 1

    # -- index register stack operations --------------------------------------

    def _push_index(self, full: str, low: str) -> None:
        self.penaltym = 1
        if self.index_16bit():
            self.push16(getattr(self.regs, full))
        else:
            self.push8(getattr(self.regs, low))

    def _pull_index(self, full: str, low: str) -> None:
        self.penaltym = 1
        regs = self.regs
        if self.index_16bit():
            setattr(regs, full, self.pull16())
            self._zero_sign(getattr(regs, full), True)
        else:
            setattr(regs, low, self.pull8())
            self._zero_sign(getattr(regs, low), False)

    def _ext_phx(self) -> None:
        self._push_index("x", "xl")

    def _ext_plx(self) -> None:
        self._pull_index("x", "xl")

    def _ext_phy(self) -> None:
        self._push_index("y", "yl")

    def _ext_ply(self) -> None:
        self._pull_index("y", "yl")

    # -- test and set / reset bits --------------------------------------------

    def _ext_tsb(self) -> None:
        wide = self.memory_16bit()
        value = self._get_value(wide)
        acc = self._acc_for_mode()
        self._zero_calc(acc & value, wide)
        self._put_value(value | acc, wide)

    def _ext_trb(self) -> None:
        wide = self.memory_16bit()
        value = self._get_value(wide)
        self._zero_calc(self._acc_for_mode() & value, wide)
        mask = self.regs.c ^ 0xFFFF if wide else self.regs.a ^ 0xFF
        self._put_value(value & mask, wide)

    # -- processor control ----------------------------------------------------

    def _ext_dbg(self) -> None:
        self.bus.stop((self.regs.pc - 1) & 0xFFFF)

    def _ext_wai(self) -> None:
        self.waiting = True

    # -- Rockwell bit instructions --------------------------------------------

    def _branch_on_bit(self, bit: int, when_set: bool) -> None:
        self._rockwell("BBS" if when_set else "BBR")
        is_set = bool(self._get_value(False) & (1 << bit))
        if is_set == when_set:
            oldpc = self.regs.pc
            self.regs.pc = oldpc + self.reladdr
            if (oldpc & 0xFF00) != (self.regs.pc & 0xFF00):
                self.clockticks += 2
            else:
                self.clockticks += 1

    def _change_bit(self, bit: int, set_it: bool) -> None:
        self._rockwell(f"{'SMB' if set_it else 'RMB'}{bit}")
        value = self._get_value(False)
        if set_it:
            value |= 1 << bit
        else:
            value &= ~(1 << bit) & 0xFF
        self._put_value(value, False)

    _EXTENSIONS = {
        "stz": _ext_stz,
        "bra": _ext_bra,
        "phx": _ext_phx,
        "plx": _ext_plx,
        "phy": _ext_phy,
        "ply": _ext_ply,
        "tsb": _ext_tsb,
        "trb": _ext_trb,
        "dbg": _ext_dbg,
        "wai": _ext_wai,
        **{f"bbr{b}": (lambda self, b=b: self._branch_on_bit(b, False)) for b in range(8)},
        **{f"bbs{b}": (lambda self, b=b: self._branch_on_bit(b, True)) for b in range(8)},
        **{f"smb{b}": (lambda self, b=b: self._change_bit(b, True)) for b in range(8)},
        **{f"rmb{b}": (lambda self, b=b: self._change_bit(b, False)) for b in range(8)},
    }


# Status flags stay importable alongside the mixin for callers inspecting results.
__all__ = ["ExtensionsMixin", "Flag"]