"""The 65C02 / 65C816 processor: fetch, decode, execute and cycle accounting."""

from __future__ import annotations

from typing import Callable, Optional

from .addressing import AddressingMixin
from .extensions import ExtensionsMixin
from .operations import OperationsMixin
from .registers import Flag
from .support import Bus, CpuSupport, InterruptType
from .tables import addressing_mode, base_cycles, operation_name


class Cpu(ExtensionsMixin, OperationsMixin, AddressingMixin, CpuSupport):
    """A complete CPU attached to a ``Bus``.

    ``clockticks`` is the running cycle count and ``instructions`` the number
    of instructions executed. The processor is reset on construction.
    """

    def __init__(self, bus: Bus, is65c816: bool = False, warn_rockwell: bool = True) -> None:
        super().__init__(bus)
        self.warn_rockwell = warn_rockwell
        self.instructions = 0
        self.clockgoal = 0
        self.opcode_addr = 0
        self.opcode_bank = 0
        self._hook: Optional[Callable[[], None]] = None
        self.reset(is65c816)

    # -- instruction cycle ----------------------------------------------------

    def _run_instruction(self) -> None:
        regs = self.regs
        self.opcode_addr = regs.pc
        self.opcode_bank = regs.k
        self.opcode = self.bus.read(regs.k, regs.pc)
        regs.pc += 1

        if regs.e:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH

        self.penaltyop = 0
        self.penaltyaddr = 0
        self.penaltym = 0
        self.penaltye = 0
        self.penaltyn = 0
        self.penaltyx = 0
        self.penaltyd = 0

        native = regs.is65c816
        self.mode = addressing_mode(self.opcode, native)
        self.resolve(self.mode)
        name = operation_name(self.opcode, native)
        if name in self._EXTENSIONS:
            self.execute_extension(name)
        else:
            self.execute_operation(name)
        self.clockticks += base_cycles(self.opcode, native)

    def _common_penalties(self) -> None:
        regs = self.regs
        if self.memory_16bit():
            self.clockticks += self.penaltym
        if self.index_16bit():
            self.clockticks += self.penaltyx
        if self.penaltyn and not regs.e:
            self.clockticks += 1
        if self.penaltye and regs.e:
            self.clockticks += 1

    def _after_instruction(self) -> None:
        self.instructions += 1
        if self._hook is not None:
            self._hook()

    def execute(self, tickcount: int) -> None:
        """Run instructions until ``tickcount`` more cycles have elapsed."""
        if self.waiting:
            self.clockticks += tickcount
            self.clockgoal = self.clockticks
            return

        self.clockgoal += tickcount
        while self.clockticks < self.clockgoal:
            self._run_instruction()
            if not self.regs.e and self.penaltyop and self.penaltyaddr:
                self.clockticks += 1
            self._common_penalties()
            self._after_instruction()

    def step(self) -> None:
        """Run a single instruction (or one idle cycle while waiting)."""
        if self.waiting:
            self.clockticks += 1
            self.clockgoal = self.clockticks
            return

        self._run_instruction()
        if self.penaltyop and self.penaltyaddr:
            self.clockticks += 1
        self._common_penalties()
        if self.penaltyd:
            self.clockticks += 1
        self.clockgoal = self.clockticks
        self._after_instruction()

    # -- interrupts -----------------------------------------------------------

    def nmi(self) -> None:
        """Raise a non-maskable interrupt."""
        self.interrupt(InterruptType.NMI)
        self.waiting = False

    def irq(self) -> None:
        """Raise an interrupt request; taken only when I is clear."""
        if not self.regs.status & Flag.INTERRUPT:
            self.interrupt(InterruptType.IRQ)
        self.waiting = False

    # -- hooks and diagnostics ------------------------------------------------

    def hook(self, callback: Optional[Callable[[], None]]) -> None:
        """Call ``callback`` after every instruction; ``None`` removes it."""
        self._hook = callback

    def rockwell_warning(self, instruction: str) -> None:
        """Report a Rockwell-only instruction once, then stay quiet."""
        if self.opcode_addr < 0xA000:
            pc_bank = 0
        elif self.opcode_addr < 0xC000:
            pc_bank = self.bus.ram_bank()
        else:
            pc_bank = self.bus.rom_bank()

        print(
            f"Warning: encountered Rockwell instruction {instruction} "
            f"at ${pc_bank:02x}:{self.opcode_addr:04x}."
        )
        print("\tFuture Commander X16 hardware may ship with a 65C816 CPU,")
        print("\twhich does not support these instructions.")
        print("\tThis will be the only warning given for Rockwell")
        print("\tinstructions until the emulator is relaunched.")
        print("\tPass -rockwell to the command line to suppress this warning.\n")

        self.warn_rockwell = False