"""I/Q sample formats and conversion of raw sample buffers to complex values."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional

Converter = Callable[[bytes, float], "list[complex]"]


class SampleFormat(IntEnum):
    """Raw I/Q sample formats."""

    UNDEF = 0
    CU8 = 1
    CS16 = 2
    CF32 = 3


def _usable(data: bytes, sample_size: int, full_scale: float) -> bytes:
    if full_scale <= 0:
        raise ValueError("full scale value must be positive")
    buf = bytes(data)
    return buf[: len(buf) - len(buf) % sample_size]


def convert_cu8(data: bytes, full_scale: float) -> list[complex]:
    """Convert unsigned 8-bit I/Q pairs; trailing partial samples are dropped."""
    buf = _usable(data, 2, full_scale)
    shift = full_scale / 2.0
    it = iter(buf)
    return [complex((re - shift) / full_scale, (im - shift) / full_scale) for re, im in zip(it, it)]


def convert_cs16(data: bytes, full_scale: float) -> list[complex]:
    """Convert signed 16-bit little-endian I/Q pairs; trailing partial samples are dropped."""
    buf = _usable(data, 4, full_scale)
    return [complex(re / full_scale, im / full_scale) for re, im in struct.iter_unpack("<hh", buf)]


def convert_cf32(data: bytes, full_scale: float) -> list[complex]:
    """Convert 32-bit float little-endian I/Q pairs; trailing partial samples are dropped."""
    buf = _usable(data, 8, full_scale)
    return [complex(re / full_scale, im / full_scale) for re, im in struct.iter_unpack("<ff", buf)]


@dataclass(frozen=True)
class _FormatParams:
    name: str
    sample_size: int
    full_scale: float
    converter: Optional[Converter]


_PARAMS: dict[SampleFormat, _FormatParams] = {
    SampleFormat.UNDEF: _FormatParams("", 0, 0.0, None),
    SampleFormat.CU8: _FormatParams("CU8", 2, 127.0, convert_cu8),
    SampleFormat.CS16: _FormatParams("CS16", 4, 32767.5, convert_cs16),
    SampleFormat.CF32: _FormatParams("CF32", 8, 1.0, convert_cf32),
}


def _lookup(fmt: int) -> Optional[_FormatParams]:
    try:
        return _PARAMS[SampleFormat(fmt)]
    except ValueError:
        return None


def sample_size(fmt: int) -> int:
    """Octets per complex sample for the format, or 0 if unknown."""
    params = _lookup(fmt)
    return params.sample_size if params else 0


def full_scale_value(fmt: int) -> float:
    """Maximum raw sample magnitude for the format, or 0.0 if unknown."""
    params = _lookup(fmt)
    return params.full_scale if params else 0.0


def get_sample_converter(fmt: int) -> Optional[Converter]:
    """Conversion routine for the format, or None if there is none."""
    params = _lookup(fmt)
    return params.converter if params else None


def sample_format_from_string(text: Optional[str]) -> SampleFormat:
    """Look up a sample format by its name, ignoring case; UNDEF if not found."""
    if text is None:
        return SampleFormat.UNDEF
    wanted = text.lower()
    for fmt, params in _PARAMS.items():
        if params.name.lower() == wanted:
            return fmt
    return SampleFormat.UNDEF