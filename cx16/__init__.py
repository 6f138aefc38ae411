"""Commander X16 emulation core: 65C02/65C816 CPU, opcode tables, cartridge images and audio mixing."""

__version__ = "0.1.0"