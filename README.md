# cx16

Building blocks for emulating a Commander X16 in pure Python:

- **CPU core** (`cx16.cpu.Cpu`): a 65C02 and 65C816 processor with cycle
  counting, interrupts (`irq`, `nmi`), a wait state (`WAI`) and an optional
  hook called after every instruction.
- **Opcode tables** (`cx16.tables`): addressing mode, operation name and base
  cycle count for every opcode of either processor.
- **Cartridges** (`cx16.cartridge.Cartridge`): create, load and save `.crt`
  images with ROM, RAM and NVRAM banks.
- **Audio mixing** (`cx16.audio.AudioMixer`): resamples and mixes PSG, PCM,
  YM2151 and MIDI synth sources to the host sample rate, with a soft limiter.

No third-party packages are needed.

## Running a program

The CPU talks to memory through a `cx16.support.Bus`. The plain `Bus` keeps
sparse 64 KiB banks in which unwritten memory reads as 0; it records
interrupt vector fetches in `vector_pulls` and debugger stops (opcode `$DB`)
in `stops`. Subclass it to map devices, calling `super().__init__()` so those
defaults keep working.

```python
from cx16.cpu import Cpu
from cx16.support import Bus

bus = Bus()
bus.write(0, 0xFFFC, 0x00)   # reset vector -> $0200
bus.write(0, 0xFFFD, 0x02)
for offset, byte in enumerate([0xA9, 0x42, 0xDB]):   # lda #$42 ; dbg
    bus.write(0, 0x0200 + offset, byte)

cpu = Cpu(bus, is65c816=False, warn_rockwell=True)   # resets on construction
cpu.step()
print(hex(cpu.regs.a))   # 0x42
cpu.step()
print(bus.stops)         # [514]  (the address of the dbg opcode, $0202)
```

`Cpu.execute(tickcount)` runs until the given number of clock ticks has
elapsed; `cpu.clockticks` and `cpu.instructions` hold the running totals.
`Cpu.hook(callback)` installs a callback run after each instruction; pass
`None` to remove it. With `warn_rockwell=True` the first Rockwell bit
instruction (BBR, BBS, SMB, RMB) prints a warning once.

The registers live in `cpu.regs` (`cx16.registers.Registers`); the status
bits are named by `cx16.registers.Flag`.

## Looking up opcodes

```python
from cx16.tables import addressing_mode, operation_name, base_cycles

addressing_mode(0xA9, False)   # Mode.IMMM
operation_name(0xA9, False)    # "lda"
base_cycles(0xA9, False)       # 2
operation_name(0x22, True)     # "jsl"
```

An opcode outside 0–255 raises `ValueError`.

## Cartridges

```python
from cx16.cartridge import Cartridge, BankType

cart = Cartridge()
cart.description = "Demo"
cart.fill(32, 33, BankType.ROM, 0xEA)
cart.save("game.crt")

loaded = Cartridge.load("game.crt", randomize=False)
loaded.read(0xC000, 32)   # 0xEA
loaded.description        # "Demo"
```

Bank numbers are the system's bank numbers: cartridge banks run from 32 to
255 and are read and written through the `$C000–$FFFF` window. Writes reach
only RAM and NVRAM banks. `import_files` copies files back to back from a
starting bank and pads the last bank; `define_bank_range` sets bank types.
NVRAM banks are read from, and `save_nvram` writes them to, a `.nvram` file
beside the `.crt` file. Failures raise `CartridgeError`; bad bank ranges
raise `ValueError`; unknown bank types give a warning.

## Audio

Each source given to `AudioMixer` is a callable that takes a frame count and
returns that many interleaved stereo 16-bit samples; `None` is silence.
Call `step(cpu_clocks)` as the CPU runs and `render()` when a sound register
changes; `fill(1024)` returns one buffer of 256 native-endian stereo frames
for the host, padded with silence. A `recorder` callable, when given,
receives every mixed block as a list of interleaved samples.

## What this package does not do

It contains no complete machine and no command to start one: there is no
video, keyboard, SD card, debugger or disassembly text, and the sound chips
themselves are not emulated — the mixer only combines samples that the
caller's sources produce, and it does not open an audio device.

## Tests

```
pip install -e .[test]
pytest
```