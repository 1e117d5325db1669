import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hfdltools.samples import (
    SampleFormat,
    convert_cf32,
    convert_cs16,
    convert_cu8,
    full_scale_value,
    get_sample_converter,
    sample_format_from_string,
    sample_size,
)


def test_sample_sizes():
    assert sample_size(SampleFormat.CU8) == 2
    assert sample_size(SampleFormat.CS16) == 4
    assert sample_size(SampleFormat.CF32) == 8
    assert sample_size(SampleFormat.UNDEF) == 0
    assert sample_size(99) == 0


def test_full_scale_values():
    assert full_scale_value(SampleFormat.CU8) == 127.0
    assert full_scale_value(SampleFormat.CS16) == 32767.5
    assert full_scale_value(SampleFormat.CF32) == 1.0
    assert full_scale_value(99) == 0.0


@pytest.mark.parametrize(
    "text, expected",
    [
        ("CU8", SampleFormat.CU8),
        ("cs16", SampleFormat.CS16),
        ("Cf32", SampleFormat.CF32),
        ("bogus", SampleFormat.UNDEF),
        (None, SampleFormat.UNDEF),
        ("", SampleFormat.UNDEF),
    ],
)
def test_sample_format_from_string(text, expected):
    assert sample_format_from_string(text) == expected


def test_converters_lookup():
    assert get_sample_converter(SampleFormat.UNDEF) is None
    assert get_sample_converter(42) is None
    assert get_sample_converter(SampleFormat.CU8) is convert_cu8
    assert get_sample_converter(SampleFormat.CS16) is convert_cs16
    assert get_sample_converter(SampleFormat.CF32) is convert_cf32


@given(st.binary(max_size=64))
def test_cu8_round_trip(data):
    fs = full_scale_value(SampleFormat.CU8)
    out = convert_cu8(data, fs)
    assert len(out) == len(data) // 2
    recovered = []
    for s in out:
        recovered.append(round(s.real * fs + fs / 2))
        recovered.append(round(s.imag * fs + fs / 2))
    assert bytes(recovered) == data[: len(out) * 2]


def test_cf32_values_and_truncation():
    raw = struct.pack("<4f", 0.5, -0.25, 1.0, 0.0) + b"\x01\x02\x03"
    out = convert_cf32(raw, 1.0)
    assert out == [complex(0.5, -0.25), complex(1.0, 0.0)]


def test_cs16_drops_partial_sample():
    raw = struct.pack("<2h", 100, -100) + b"\x00\x00"
    assert len(convert_cs16(raw, 32767.5)) == 1


def test_nonpositive_full_scale_rejected():
    with pytest.raises(ValueError):
        convert_cu8(b"\x00\x00", 0.0)
    with pytest.raises(ValueError):
        convert_cf32(bytes(8), -1.0)