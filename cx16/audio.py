"""Mixing of the VERA, YM2151 and MIDI synth outputs into a host audio stream."""

from __future__ import annotations

import threading
from array import array
from typing import Callable, List, Optional, Sequence

Source = Optional[Callable[[int], Sequence[int]]]
Recorder = Optional[Callable[[List[int]], None]]

AUDIO_SAMPLERATE = 25000000 // 512
SAMPLES_PER_BUFFER = 256
SAMPLE_BYTES = 4

_FRAC_BITS = 24
_POS_MASK = SAMPLES_PER_BUFFER - 1
_POS_MASK_FRAC = (SAMPLES_PER_BUFFER << _FRAC_BITS) - 1
_LOOKAHEAD = 4 << _FRAC_BITS
_VERA_CLOCK = 25000000
_YM_CLOCK = 3579545

# Windowed sinc used to resample each source to the host rate.
FILTER = (
    32767, 32765, 32761, 32755, 32746, 32736, 32723, 32707, 32690, 32670, 32649, 32625, 32598, 32570, 32539, 32507,
    32472, 32435, 32395, 32354, 32310, 32265, 32217, 32167, 32115, 32061, 32004, 31946, 31885, 31823, 31758, 31691,
    31623, 31552, 31479, 31404, 31327, 31248, 31168, 31085, 31000, 30913, 30825, 30734, 30642, 30547, 30451, 30353,
    30253, 30151, 30048, 29943, 29835, 29726, 29616, 29503, 29389, 29273, 29156, 29037, 28916, 28793, 28669, 28544,
    28416, 28288, 28157, 28025, 27892, 27757, 27621, 27483, 27344, 27204, 27062, 26918, 26774, 26628, 26481, 26332,
    26182, 26031, 25879, 25726, 25571, 25416, 25259, 25101, 24942, 24782, 24621, 24459, 24296, 24132, 23967, 23801,
    23634, 23466, 23298, 23129, 22959, 22788, 22616, 22444, 22271, 22097, 21923, 21748, 21572, 21396, 21219, 21042,
    20864, 20686, 20507, 20328, 20148, 19968, 19788, 19607, 19426, 19245, 19063, 18881, 18699, 18517, 18334, 18152,
    17969, 17786, 17603, 17420, 17237, 17054, 16871, 16688, 16505, 16322, 16139, 15957, 15774, 15592, 15409, 15227,
    15046, 14864, 14683, 14502, 14321, 14141, 13961, 13781, 13602, 13423, 13245, 13067, 12890, 12713, 12536, 12360,
    12185, 12010, 11836, 11663, 11490, 11317, 11146, 10975, 10804, 10635, 10466, 10298, 10131, 9964, 9799, 9634,
    9470, 9306, 9144, 8983, 8822, 8662, 8504, 8346, 8189, 8033, 7878, 7724, 7571, 7419, 7268, 7118,
    6969, 6822, 6675, 6529, 6385, 6241, 6099, 5958, 5818, 5679, 5541, 5405, 5269, 5135, 5002, 4870,
    4739, 4610, 4482, 4355, 4229, 4104, 3981, 3859, 3738, 3619, 3500, 3383, 3268, 3153, 3040, 2928,
    2817, 2708, 2600, 2493, 2388, 2284, 2181, 2079, 1979, 1880, 1783, 1686, 1591, 1498, 1405, 1314,
    1225, 1136, 1049, 963, 879, 795, 714, 633, 554, 476, 399, 323, 249, 176, 105, 34,
    -34, -102, -168, -234, -298, -361, -422, -482, -542, -599, -656, -712, -766, -819, -871, -922,
    -971, -1020, -1067, -1113, -1158, -1202, -1244, -1286, -1326, -1366, -1404, -1441, -1477, -1512, -1546, -1579,
    -1611, -1642, -1671, -1700, -1728, -1755, -1781, -1806, -1830, -1852, -1874, -1896, -1916, -1935, -1953, -1971,
    -1987, -2003, -2018, -2032, -2045, -2058, -2069, -2080, -2090, -2099, -2108, -2116, -2123, -2129, -2134, -2139,
    -2143, -2147, -2150, -2152, -2153, -2154, -2154, -2154, -2153, -2151, -2149, -2146, -2143, -2139, -2135, -2130,
    -2124, -2118, -2112, -2105, -2098, -2090, -2082, -2073, -2064, -2054, -2045, -2034, -2024, -2012, -2001, -1989,
    -1977, -1965, -1952, -1939, -1926, -1912, -1898, -1884, -1870, -1855, -1840, -1825, -1810, -1794, -1778, -1762,
    -1746, -1730, -1714, -1697, -1680, -1663, -1646, -1629, -1612, -1595, -1577, -1560, -1542, -1525, -1507, -1489,
    -1471, -1453, -1435, -1418, -1400, -1382, -1364, -1346, -1328, -1310, -1292, -1274, -1256, -1238, -1220, -1203,
    -1185, -1167, -1150, -1132, -1115, -1097, -1080, -1063, -1046, -1029, -1012, -995, -978, -962, -945, -929,
    -912, -896, -880, -864, -849, -833, -817, -802, -787, -772, -757, -742, -727, -713, -699, -684,
    -670, -656, -643, -629, -616, -603, -589, -577, -564, -551, -539, -526, -514, -502, -491, -479,
    -468, -456, -445, -434, -423, -413, -402, -392, -381, -371, -361, -352, -342, -333, -323, -314,
    -305, -296, -288, -279, -270, -262, -254, -246, -238, -230, -222, -215, -207, -200, -193, -186,
    -179, -172, -165, -158, -152, -145, -139, -133, -127, -120, -114, -108, -103, -97, -91, -85,
    -80, -74, -69, -63, -58, -53, -47, -42, -37, -32, -27, -22, -17, -12, -7, -2,
)


def _s16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _s32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _filtered(rd: int, *bufs: List[int]) -> tuple[int, int]:
    """Interpolate a stereo frame at fractional read position ``rd``."""
    idx = (rd >> (_FRAC_BITS - 8)) & 0xFF
    pos = (rd >> _FRAC_BITS) * 2
    coefs = (FILTER[256 + idx], FILTER[idx], FILTER[255 - idx], FILTER[511 - idx])
    left = right = 0
    for coef in coefs:
        left += sum(buf[pos] for buf in bufs) * coef
        right += sum(buf[pos + 1] for buf in bufs) * coef
        pos = (pos + 2) & (_POS_MASK * 2)
    return _s32(left), _s32(right)


class AudioMixer:
    """Renders the sound sources in step with the CPU and mixes them.

    Each source is a callable taking a frame count and returning that many
    interleaved stereo 16-bit samples; ``None`` stands for silence. Mixed
    samples go to a ring buffer that ``fill`` drains, and to ``recorder``
    (when given) as lists of interleaved samples.
    """

    cpu_mhz = 8

    def __init__(
        self,
        psg: Source = None,
        pcm: Source = None,
        ym: Source = None,
        midi: Source = None,
        host_sample_rate: int = AUDIO_SAMPLERATE,
        num_buffers: int = 8,
        recorder: Recorder = None,
    ) -> None:
        if host_sample_rate <= 0 or AUDIO_SAMPLERATE // host_sample_rate > SAMPLES_PER_BUFFER:
            raise ValueError("Obtained sample rate is too low")
        self.psg = psg
        self.pcm = pcm
        self.ym = ym
        self.midi = midi
        self.recorder = recorder
        self.host_sample_rate = host_sample_rate

        num_buffers = min(max(num_buffers, 3), 1024)
        self.buffer_size = SAMPLES_PER_BUFFER * num_buffers * 2
        self._buffer = array("h", bytes(2 * self.buffer_size))
        self._rdidx = 0
        self._wridx = 0
        self._written = 0
        self._lock = threading.Lock()

        frac = 1 << _FRAC_BITS
        self._vera_per_cpu = (_VERA_CLOCK << _FRAC_BITS) // 512 // self.cpu_mhz // 1000000
        self._ym_per_cpu = (_YM_CLOCK << _FRAC_BITS) // 64 // self.cpu_mhz // 1000000
        self._fs_per_cpu = self._vera_per_cpu
        self._vera_per_host = (_VERA_CLOCK << _FRAC_BITS) // 512 // host_sample_rate
        self._ym_per_host = (_YM_CLOCK << _FRAC_BITS) // 64 // host_sample_rate
        self._fs_per_host = self._vera_per_host
        assert frac > 0

        self._vera_rd = self._vera_wr = self._vera_hd = 0
        self._ym_rd = self._ym_wr = self._ym_hd = 0
        self._fs_rd = self._fs_wr = self._fs_hd = 0
        self._limiter = 1 << 16

        self._psg_buf = [0] * (2 * SAMPLES_PER_BUFFER)
        self._pcm_buf = [0] * (2 * SAMPLES_PER_BUFFER)
        self._ym_buf = [0] * (2 * SAMPLES_PER_BUFFER)
        self._fs_buf = [0] * (2 * SAMPLES_PER_BUFFER)

    # -- timing ---------------------------------------------------------------

    def step(self, cpu_clocks: int) -> None:
        """Advance the sources by ``cpu_clocks`` CPU cycles, rendering as needed."""
        while cpu_clocks > 0:
            room = ((self._ym_rd - self._ym_hd - (1 << _FRAC_BITS)) & _POS_MASK_FRAC) // self._ym_per_cpu
            clocks = min(cpu_clocks, room)
            self._vera_hd = (self._vera_hd + clocks * self._vera_per_cpu) & _POS_MASK_FRAC
            self._ym_hd = (self._ym_hd + clocks * self._ym_per_cpu) & _POS_MASK_FRAC
            self._fs_hd = (self._fs_hd + clocks * self._fs_per_cpu) & _POS_MASK_FRAC
            cpu_clocks -= clocks
            if cpu_clocks > 0:
                self.render()

    # -- rendering ------------------------------------------------------------

    @staticmethod
    def _render_source(source: Source, buf: List[int], pos: int, count: int) -> None:
        if source is None:
            samples: Sequence[int] = [0] * (2 * count)
        else:
            samples = list(source(count))
            if len(samples) != 2 * count:
                raise ValueError(
                    f"audio source returned {len(samples)} samples, expected {2 * count}"
                )
        buf[pos * 2:pos * 2 + 2 * count] = [_s16(v) for v in samples]

    def _catch_up_writer(self, wr: int, hd: int, pairs) -> int:
        pos = (wr + 1) & _POS_MASK
        length = ((hd >> _FRAC_BITS) - wr) & _POS_MASK
        if pos + length > SAMPLES_PER_BUFFER:
            for source, buf in pairs:
                self._render_source(source, buf, pos, SAMPLES_PER_BUFFER - pos)
            length -= SAMPLES_PER_BUFFER - pos
            pos = 0
        if length > 0:
            for source, buf in pairs:
                self._render_source(source, buf, pos, length)
        return hd >> _FRAC_BITS

    def _record(self, start: int, end: int) -> None:
        if self.recorder is not None and end > start:
            self.recorder(list(self._buffer[start:end]))

    def render(self) -> None:
        """Render every source up to its head and mix what all can supply."""
        self._vera_wr = self._catch_up_writer(
            self._vera_wr, self._vera_hd, ((self.psg, self._psg_buf), (self.pcm, self._pcm_buf))
        )
        self._ym_wr = self._catch_up_writer(self._ym_wr, self._ym_hd, ((self.ym, self._ym_buf),))
        self._fs_wr = self._catch_up_writer(self._fs_wr, self._fs_hd, ((self.midi, self._fs_buf),))

        len_vera = (self._vera_hd - self._vera_rd) & _POS_MASK_FRAC
        len_ym = (self._ym_hd - self._ym_rd) & _POS_MASK_FRAC
        len_fs = (self._fs_hd - self._fs_rd) & _POS_MASK_FRAC
        if len_vera < _LOOKAHEAD or len_ym < _LOOKAHEAD or len_fs < _LOOKAHEAD:
            # the filter needs at least four samples of each source
            return
        len_vera = (len_vera - _LOOKAHEAD) // self._vera_per_host
        len_ym = (len_ym - _LOOKAHEAD) // self._ym_per_host
        len_fs = (len_fs - _LOOKAHEAD) // self._fs_per_host
        length = min(len_vera, len_ym, len_fs)
        native = self.host_sample_rate == AUDIO_SAMPLERATE

        with self._lock:
            wridx_old = self._wridx
            for _ in range(length):
                if native:
                    pos = (self._vera_rd >> _FRAC_BITS) * 2
                    vera_l = _s32((self._psg_buf[pos] + self._pcm_buf[pos]) << 14)
                    vera_r = _s32((self._psg_buf[pos + 1] + self._pcm_buf[pos + 1]) << 14)
                    pos = (self._fs_rd >> _FRAC_BITS) * 2
                    fs_l = _s32(self._fs_buf[pos] << 14)
                    fs_r = _s32(self._fs_buf[pos + 1] << 14)
                else:
                    vera_l, vera_r = _filtered(self._vera_rd, self._psg_buf, self._pcm_buf)
                    fs_l, fs_r = _filtered(self._fs_rd, self._fs_buf)
                ym_l, ym_r = _filtered(self._ym_rd, self._ym_buf)

                # mix = (psg + pcm) * 2 + ym + fs * 4
                mix_l = _s32((vera_l >> 13) + (ym_l >> 15) + (fs_l >> 12))
                mix_r = _s32((vera_r >> 13) + (ym_r >> 15) + (fs_r >> 12))
                amp = max(abs(mix_l), abs(mix_r))
                if amp > 32767:
                    self._limiter = min((32767 << 16) // amp, self._limiter)
                self._buffer[self._wridx] = _s16(((mix_l * self._limiter) & 0xFFFFFFFF) >> 16)
                self._buffer[self._wridx + 1] = _s16(((mix_r * self._limiter) & 0xFFFFFFFF) >> 16)
                self._wridx += 2
                if self._limiter < (1 << 16):
                    self._limiter += 1

                self._vera_rd = (self._vera_rd + self._vera_per_host) & _POS_MASK_FRAC
                self._ym_rd = (self._ym_rd + self._ym_per_host) & _POS_MASK_FRAC
                self._fs_rd = (self._fs_rd + self._fs_per_host) & _POS_MASK_FRAC
                if self._wridx == self.buffer_size:
                    self._record(wridx_old, self.buffer_size)
                    self._wridx = 0
                    wridx_old = 0
            self._record(wridx_old, self._wridx)

            self._written += length * 2
            if self._written > self.buffer_size:
                # skip the reader ahead rather than overflow the ring
                skip = (self._written // self.buffer_size) * SAMPLES_PER_BUFFER * 2
                self._rdidx = (self._rdidx + skip) % self.buffer_size
                self._written -= skip

        if len_vera - length > 1:
            self._vera_rd = (self._vera_rd + self._vera_per_host) & _POS_MASK_FRAC
        if len_ym - length > 1:
            self._ym_rd = (self._ym_rd + self._ym_per_host) & _POS_MASK_FRAC
        if len_fs - length > 1:
            self._fs_rd = (self._fs_rd + self._fs_per_host) & _POS_MASK_FRAC

    # -- output ---------------------------------------------------------------

    def _take(self, out: array, frames: int) -> None:
        count = frames * 2
        out.extend(self._buffer[self._rdidx:self._rdidx + count])
        self._rdidx = (self._rdidx + count) % self.buffer_size
        self._written -= count

    def fill(self, length: int) -> bytes:
        """Return ``length`` bytes of native-endian stereo samples, padded with silence."""
        expected = SAMPLES_PER_BUFFER * SAMPLE_BYTES
        if length != expected:
            raise ValueError(f"Audio buffer size mismatch! (expected: {expected}, got: {length})")
        frames = length // SAMPLE_BYTES
        out = array("h")
        with self._lock:
            if self._rdidx > self._wridx:
                n = min(frames, (self.buffer_size - self._rdidx) // 2)
                self._take(out, n)
                frames -= n
            n = min(frames, max(self._wridx - self._rdidx, 0) // 2)
            self._take(out, n)
            frames -= n
        out.extend([0] * (2 * frames))
        return out.tobytes()