"""Simple FIR filter design helpers."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Callable


class Window(IntEnum):
    """FIR window functions."""

    BOXCAR = 0
    BLACKMAN = 1
    HAMMING = 2


WINDOW_DEFAULT = Window.HAMMING


def next_pow2(x: int) -> int:
    """Return the smallest power of two strictly greater than ``x``, or -1 if above 2**30."""
    for i in range(31):
        pow2 = 1 << i
        if x < pow2:
            return pow2
    return -1


def firdes_filter_len(transition_bw: float) -> int:
    """Return an odd filter length suitable for the given relative transition bandwidth."""
    result = int(4.0 / transition_bw)
    if result % 2 == 0:
        result += 1
    return result


def _blackman(rate: float) -> float:
    rate = 0.5 + rate / 2
    return 0.42 - 0.5 * math.cos(2 * math.pi * rate) + 0.08 * math.cos(4 * math.pi * rate)


def _hamming(rate: float) -> float:
    rate = 0.5 + rate / 2
    return 0.54 - 0.46 * math.cos(2 * math.pi * rate)


def _boxcar(rate: float) -> float:
    return 1.0


_WINDOW_KERNELS: dict[Window, Callable[[float], float]] = {
    Window.HAMMING: _hamming,
    Window.BLACKMAN: _blackman,
    Window.BOXCAR: _boxcar,
}


def _lowpass(length: int, cutoff_rate: float, window: Window) -> list[float]:
    kernel = _WINDOW_KERNELS.get(window, _WINDOW_KERNELS[WINDOW_DEFAULT])
    middle = length // 2
    taps = [0.0] * length
    taps[middle] = 2 * math.pi * cutoff_rate * kernel(0.0)
    for i in range(1, middle + 1):
        value = (math.sin(2 * math.pi * cutoff_rate * i) / i) * kernel(i / middle)
        taps[middle - i] = taps[middle + i] = value
    total = sum(taps)
    return [t / total for t in taps]


def firdes_bandpass_c(
    length: int, lowcut: float, highcut: float, window: Window = WINDOW_DEFAULT
) -> list[complex]:
    """Design complex band-pass FIR taps between relative frequencies ``lowcut`` and ``highcut``.

    A real low-pass filter of width ``highcut - lowcut`` is shifted to the band centre.
    """
    if length <= 0 or length % 2 == 0:
        raise ValueError(f"filter length must be a positive odd number, got {length}")
    realtaps = _lowpass(length, (highcut - lowcut) / 2, window)
    filter_center = (highcut + lowcut) / 2
    two_pi = 2 * math.pi
    phase = 0.0
    output = []
    for tap in realtaps:
        output.append(complex(math.cos(phase) * tap, math.sin(phase) * tap))
        phase += two_pi * filter_center
        while phase > two_pi:
            phase -= two_pi
        while phase < 0:
            phase += two_pi
    return output


def compute_filter_relative_transition_bw(sample_rate: int, transition_bw_hz: int) -> float:
    """Return the transition bandwidth relative to the sampling rate."""
    if sample_rate == 0:
        raise ValueError("sample rate must not be zero")
    return transition_bw_hz / sample_rate


def compute_fft_decimation_rate(sample_rate: int, target_rate: int) -> int:
    """Return the largest power-of-two decimation keeping the rate at or above ``target_rate``."""
    if sample_rate <= 0:
        raise ValueError("sample rate must be positive")
    if target_rate <= 0:
        raise ValueError("target rate must be positive")
    pow2 = next_pow2(math.floor(sample_rate / target_rate))
    return pow2 // 2 if pow2 > 0 else 0