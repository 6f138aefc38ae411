"""Processor status flags and the register file of the 65C02 / 65C816."""

from __future__ import annotations

from enum import IntFlag


class Flag(IntFlag):
    """Bits of the processor status register."""

    CARRY = 0x01
    ZERO = 0x02
    INTERRUPT = 0x04
    DECIMAL = 0x08
    INDEX_WIDTH = 0x10
    MEMORY_WIDTH = 0x20
    OVERFLOW = 0x40
    SIGN = 0x80
    # Names the same bits carry on a 65C02.
    BREAK = 0x10
    CONSTANT = 0x20


class _Field:
    """A register stored as an integer clipped to a fixed width."""

    def __init__(self, mask: int) -> None:
        self.mask = mask

    def __set_name__(self, owner: type, name: str) -> None:
        self.storage = "_" + name

    def __get__(self, obj: object, objtype: type | None = None):
        if obj is None:
            return self
        return getattr(obj, self.storage, 0)

    def __set__(self, obj: object, value: int) -> None:
        setattr(obj, self.storage, int(value) & self.mask)


class _Half:
    """The low or high byte of a 16-bit register."""

    def __init__(self, whole: str, high: bool) -> None:
        self.whole = whole
        self.shift = 8 if high else 0

    def __get__(self, obj: object, objtype: type | None = None):
        if obj is None:
            return self
        return (getattr(obj, self.whole) >> self.shift) & 0xFF

    def __set__(self, obj: object, value: int) -> None:
        current = getattr(obj, self.whole)
        cleared = current & ~(0xFF << self.shift) & 0xFFFF
        setattr(obj, self.whole, cleared | ((int(value) & 0xFF) << self.shift))


class Registers:
    """The CPU register file.

    ``c``, ``x`` and ``y`` are 16 bits wide; ``a``/``b``, ``xl``/``xh`` and
    ``yl``/``yh`` are views of their low and high bytes.
    """

    c = _Field(0xFFFF)
    x = _Field(0xFFFF)
    y = _Field(0xFFFF)
    dp = _Field(0xFFFF)
    sp = _Field(0xFFFF)
    pc = _Field(0xFFFF)
    db = _Field(0xFF)
    k = _Field(0xFF)
    status = _Field(0xFF)

    a = _Half("c", high=False)
    b = _Half("c", high=True)
    xl = _Half("x", high=False)
    xh = _Half("x", high=True)
    yl = _Half("y", high=False)
    yh = _Half("y", high=True)

    def __init__(
        self,
        *,
        c: int = 0,
        x: int = 0,
        y: int = 0,
        dp: int = 0,
        sp: int = 0,
        db: int = 0,
        pc: int = 0,
        k: int = 0,
        status: int = 0,
        e: bool = False,
        is65c816: bool = False,
    ) -> None:
        self.c = c
        self.x = x
        self.y = y
        self.dp = dp
        self.sp = sp
        self.db = db
        self.pc = pc
        self.k = k
        self.status = status
        self.e = bool(e)
        self.is65c816 = bool(is65c816)

    def __repr__(self) -> str:
        return (
            f"Registers(c={self.c:#06x}, x={self.x:#06x}, y={self.y:#06x}, "
            f"dp={self.dp:#06x}, sp={self.sp:#06x}, db={self.db:#04x}, "
            f"pc={self.pc:#06x}, k={self.k:#04x}, status={self.status:#04x}, "
            f"e={self.e}, is65c816={self.is65c816})"
        )