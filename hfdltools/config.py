"""Validation and parsing of command-line option values."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from hfdltools.kvargs import KVArgsError, error_string, parse_kvargs

DEFAULT_OUTPUT = "decoded:text:file:path=-"

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

_INT_RE = re.compile(r"\s*[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:"
    r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan"
    r")",
    re.IGNORECASE,
)


class ConfigError(ValueError):
    """Raised when an option value or a combination of values is invalid."""


@dataclass(frozen=True)
class OutputSpec:
    """A parsed ``<input_type>:<output_format>:<output_type>:<options>`` specifier."""

    intype: str
    outformat: str
    outtype: str
    options: dict[str, str] = field(default_factory=dict)


def _hz_to_khz(hz: float) -> float:
    return hz / 1000.0


def parse_double(text: str) -> float:
    """Parse a floating-point value with single precision.

    Leading whitespace is allowed; trailing characters are not.
    """
    if not _FLOAT_RE.fullmatch(text):
        raise ConfigError(f"Parameter error: '{text}': not a valid floating-point number")
    value = float(text)
    try:
        (single,) = struct.unpack("f", struct.pack("f", value))
    except OverflowError:
        raise ConfigError(f"Parameter error: '{text}': value too large") from None
    return single


def parse_int32(text: str) -> int:
    """Parse a decimal integer strictly inside the signed 32-bit range."""
    if not _INT_RE.fullmatch(text):
        raise ConfigError(
            f"Parameter error: '{text}': not a valid decimal integer number"
        )
    value = int(text.lstrip())
    if value >= INT32_MAX or value <= INT32_MIN:
        raise ConfigError(f"Parameter error: '{text}': value too large")
    return value


def parse_frequency(text: str) -> int:
    """Parse a frequency given in kHz and return it in Hz, truncated to an integer."""
    value = parse_double(text)
    hz = 1e3 * value
    if math.isnan(hz) or hz >= INT32_MAX or hz <= INT32_MIN:
        raise ConfigError(f"'{text}': value too large")
    return int(hz)


def check_frequency_span(freqs: Iterable[int], centerfreq: int, source_rate: int) -> None:
    """Ensure every channel lies within the receiver bandwidth around ``centerfreq``."""
    half_bandwidth = int(source_rate / 2)
    for freq in freqs:
        if abs(centerfreq - freq) >= half_bandwidth:
            raise ConfigError(
                f"Error: channel frequency {_hz_to_khz(freq):.3f} kHz is too far away "
                f"from the center frequency ({_hz_to_khz(centerfreq):.3f} kHz).\n"
                f"Maximum distance from the center frequency for sampling rate "
                f"{source_rate} sps is {_hz_to_khz(half_bandwidth):.3f} kHz."
            )


def compute_centerfreq(freqs: Sequence[int]) -> int:
    """Return the midpoint between the lowest and the highest channel frequency."""
    if not freqs:
        raise ConfigError("No channel frequencies given")
    low, high = min(freqs), max(freqs)
    return low + (high - low) // 2


def parse_output_spec(spec: str) -> OutputSpec:
    """Parse an output specifier of the form ``intype:format:type:key=val,...``."""
    rest = spec
    fields: list[str] = []
    for _ in range(3):
        name, sep, remainder = rest.partition(":")
        if name == "":
            raise ConfigError(
                f"Could not parse output specifier '{spec}': field_name is empty"
            )
        if not sep:
            raise ConfigError(
                f"Could not parse output specifier '{spec}': not enough fields"
            )
        fields.append(name)
        rest = remainder
    try:
        options = parse_kvargs(rest)
    except KVArgsError as exc:
        raise ConfigError(
            f"Could not parse output specifier '{spec}': {error_string(exc.code)}"
        ) from exc
    intype, outformat, outtype = fields
    return OutputSpec(intype=intype, outformat=outformat, outtype=outtype, options=options)