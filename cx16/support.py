"""Memory bus, stack handling, reset and interrupt entry shared by the CPU."""

from __future__ import annotations

from enum import IntEnum

from .registers import Flag, Registers


class Bus:
    """A plain memory bus of sparse 64 KiB banks; subclass to map devices."""

    def __init__(self, ram_bank: int = 0, rom_bank: int = 0) -> None:
        self._banks: dict[int, bytearray] = {}
        self._ram_bank = ram_bank & 0xFF
        self._rom_bank = rom_bank & 0xFF
        self.vector_pulls = 0
        self.stops: list[int] = []

    def read(self, bank: int, address: int) -> int:
        """Return the byte at ``bank:address``; unwritten memory reads 0."""
        memory = self._banks.get(bank & 0xFF)
        return 0 if memory is None else memory[address & 0xFFFF]

    def write(self, bank: int, address: int, value: int) -> None:
        """Store a byte at ``bank:address``."""
        memory = self._banks.setdefault(bank & 0xFF, bytearray(0x10000))
        memory[address & 0xFFFF] = value & 0xFF

    def vector_pull(self) -> None:
        """Note that the CPU fetched an interrupt vector."""
        self.vector_pulls += 1

    def stop(self, address: int) -> None:
        """Note that the CPU executed a debugger stop at ``address``."""
        self.stops.append(address & 0xFFFF)

    def ram_bank(self) -> int:
        """The currently selected RAM bank."""
        return self._ram_bank

    def rom_bank(self) -> int:
        """The currently selected ROM bank."""
        return self._rom_bank


class InterruptType(IntEnum):
    """Interrupt sources, valued by their vector offset."""

    COP = 0x4
    BRK = 0x6
    NMI = 0xA
    IRQ = 0xE


class CpuSupport:
    """Register file plus the helpers every instruction builds on."""

    def __init__(self, bus: Bus) -> None:
        self.bus = bus
        self.regs = Registers()
        self.clockticks = 0
        self.waiting = False

    # -- flag helpers -------------------------------------------------------

    def _set_flag(self, flag: Flag, on: bool) -> None:
        if on:
            self.regs.status |= flag
        else:
            self.regs.status &= ~flag

    def _zero_calc(self, n: int, wide: bool) -> None:
        self._set_flag(Flag.ZERO, not n & (0xFFFF if wide else 0x00FF))

    def _sign_calc(self, n: int, wide: bool) -> None:
        self._set_flag(Flag.SIGN, bool(n & (0x8000 if wide else 0x0080)))

    def _carry_calc(self, n: int, wide: bool) -> None:
        self._set_flag(Flag.CARRY, bool(n & (0x10000 if wide else 0x0100)))

    def _overflow_calc(self, result: int, acc: int, mem: int, wide: bool) -> None:
        mask = 0x8000 if wide else 0x80
        self._set_flag(Flag.OVERFLOW, bool((result ^ acc) & (result ^ mem) & mask))

    def index_16bit(self) -> bool:
        """True when the index registers are 16 bits wide."""
        return self.regs.is65c816 and not self.regs.status & Flag.INDEX_WIDTH

    def memory_16bit(self) -> bool:
        """True when the accumulator and memory accesses are 16 bits wide."""
        return self.regs.is65c816 and not self.regs.status & Flag.MEMORY_WIDTH

    def _acc_for_mode(self) -> int:
        return self.regs.c if self.memory_16bit() else self.regs.a

    def _save_accum(self, n: int) -> None:
        if self.memory_16bit():
            self.regs.c = n
        else:
            self.regs.a = n & 0xFF

    # -- address arithmetic ---------------------------------------------------

    def add_wrap_at_page_boundary(self, value: int, add: int) -> int:
        """Add, wrapping within the page in emulation mode."""
        value &= 0xFFFF
        add &= 0xFF
        if self.regs.e:
            return (value & 0xFF00) | (((value & 0xFF) + add) & 0xFF)
        return (value + add) & 0xFFFF

    def subtract_wrap_at_page_boundary(self, value: int, subtract: int) -> int:
        """Subtract, wrapping within the page in emulation mode."""
        value &= 0xFFFF
        subtract &= 0xFF
        if self.regs.e:
            return (value & 0xFF00) | (((value & 0xFF) - subtract) & 0xFF)
        return (value - subtract) & 0xFFFF

    def increment_wrap_at_page_boundary(self, value: int) -> int:
        """Return ``value`` plus one, page-wrapped in emulation mode."""
        return self.add_wrap_at_page_boundary(value, 1)

    def decrement_wrap_at_page_boundary(self, value: int) -> int:
        """Return ``value`` minus one, page-wrapped in emulation mode."""
        return self.subtract_wrap_at_page_boundary(value, 1)

    def direct_page_add(self, offset: int) -> int:
        """Address of ``offset`` within the direct page."""
        dp = self.regs.dp
        if self.regs.e and (dp & 0x00FF) == 0:
            return (dp & 0xFF00) | (offset & 0xFF)
        return (dp + offset) & 0xFFFF

    # -- stack ----------------------------------------------------------------

    def push8(self, value: int) -> None:
        """Push one byte onto the stack."""
        self.bus.write(0x00, self.regs.sp, value & 0xFF)
        self.regs.sp = self.decrement_wrap_at_page_boundary(self.regs.sp)

    def push16(self, value: int) -> None:
        """Push a word, high byte first."""
        self.push8((value >> 8) & 0xFF)
        self.push8(value & 0xFF)

    def pull8(self) -> int:
        """Pull one byte from the stack."""
        self.regs.sp = self.increment_wrap_at_page_boundary(self.regs.sp)
        return self.bus.read(0x00, self.regs.sp)

    def pull16(self) -> int:
        """Pull a word, low byte first."""
        low = self.pull8()
        return low | (self.pull8() << 8)

    # -- reset and interrupts -----------------------------------------------

    def _read_vector(self, address: int) -> int:
        return self.bus.read(0x00, address) | (self.bus.read(0x00, (address + 1) & 0xFFFF) << 8)

    def reset(self, c816: bool) -> None:
        """Reset the processor and fetch the reset vector."""
        regs = self.regs
        regs.pc = self._read_vector(0xFFFC)
        regs.c = 0
        regs.x = 0
        regs.y = 0
        regs.dp = 0
        regs.sp = 0x1FD
        regs.e = True
        regs.k = 0
        regs.db = 0
        if c816:
            regs.status |= Flag.INDEX_WIDTH | Flag.MEMORY_WIDTH
            regs.is65c816 = True
        else:
            regs.status |= Flag.CONSTANT
            regs.is65c816 = False
        self._set_flag(Flag.INTERRUPT, True)
        self._set_flag(Flag.DECIMAL, False)
        self.waiting = False

    def interrupt(self, vector: InterruptType) -> None:
        """Save state on the stack and jump through the interrupt vector."""
        regs = self.regs
        vector = InterruptType(vector)
        if not regs.e:
            self.push8(regs.k)
        regs.k = 0
        self.push16(regs.pc)
        if regs.e:
            if vector is InterruptType.BRK:
                self.push8(regs.status | Flag.BREAK)
                vector = InterruptType.IRQ
            else:
                self.push8(regs.status & ~Flag.BREAK)
        else:
            self.push8(regs.status)
        self._set_flag(Flag.INTERRUPT, True)
        self._set_flag(Flag.DECIMAL, False)
        self.bus.vector_pull()
        base = 0xFFF0 if regs.e else 0xFFE0
        regs.pc = self._read_vector(base + int(vector))
        self.clockticks += 7