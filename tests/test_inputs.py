import io
import struct

import pytest

from hfdltools.inputs import (
    AUTO_GAIN,
    INPUT_FILE_BUFSIZE_DEFAULT,
    FileInput,
    InputConfig,
    InputError,
    InputType,
    create_input,
)
from hfdltools.samples import SampleFormat, convert_cf32, convert_cu8


def make_config(path, sfmt=SampleFormat.CU8, bufsize=-1):
    return InputConfig(source=str(path), type=InputType.FILE, sfmt=sfmt, read_buffer_size=bufsize)


def test_default_config():
    cfg = InputConfig()
    assert cfg.gain == AUTO_GAIN
    assert cfg.sample_rate == -1
    assert cfg.centerfreq == -1
    assert cfg.read_buffer_size == -1
    assert cfg.sfmt == SampleFormat.UNDEF
    assert cfg.type == InputType.UNDEF


def test_create_input_requires_known_type():
    with pytest.raises(InputError):
        create_input(InputConfig(source="x"))


def test_create_file_input(tmp_path):
    inp = create_input(make_config(tmp_path / "a.cu8"))
    assert isinstance(inp, FileInput)
    assert inp.is_open is False


def test_open_sets_defaults(tmp_path):
    path = tmp_path / "a.cu8"
    path.write_bytes(bytes(10))
    cfg = make_config(path)
    inp = create_input(cfg).open()
    try:
        assert cfg.read_buffer_size == INPUT_FILE_BUFSIZE_DEFAULT
        assert inp.bytes_per_sample == 2
        assert inp.full_scale == 127.0
        assert inp.max_tu == INPUT_FILE_BUFSIZE_DEFAULT // 2
    finally:
        inp.close()


def test_sample_format_required(tmp_path):
    path = tmp_path / "a.raw"
    path.write_bytes(b"")
    with pytest.raises(InputError, match="Sample format"):
        create_input(make_config(path, sfmt=SampleFormat.UNDEF)).open()


def test_missing_file(tmp_path):
    with pytest.raises(InputError, match="Failed to open"):
        create_input(make_config(tmp_path / "nope.cu8")).open()


def test_buffer_size_must_be_multiple_of_sample(tmp_path):
    path = tmp_path / "a.cs16"
    path.write_bytes(bytes(8))
    inp = create_input(make_config(path, sfmt=SampleFormat.CS16, bufsize=6))
    with pytest.raises(InputError, match="read-buffer-size"):
        inp.open()
    assert inp.is_open is False


def test_read_blocks_splits_and_converts(tmp_path):
    data = bytes(range(10))
    path = tmp_path / "a.cu8"
    path.write_bytes(data)
    inp = create_input(make_config(path, bufsize=4)).open()
    blocks = list(inp.read_blocks())
    assert [len(b) for b in blocks] == [2, 2, 1]
    flat = [s for b in blocks for s in b]
    assert flat == convert_cu8(data, 127.0)
    assert inp.is_open is False


def test_read_blocks_exact_multiple(tmp_path):
    data = struct.pack("<4f", 0.5, -0.5, 0.25, 0.75)
    path = tmp_path / "a.cf32"
    path.write_bytes(data)
    with create_input(make_config(path, sfmt=SampleFormat.CF32, bufsize=16)) as inp:
        blocks = list(inp.read_blocks())
    assert blocks == [convert_cf32(data, 1.0)]


def test_read_requires_open(tmp_path):
    inp = create_input(make_config(tmp_path / "a.cu8"))
    with pytest.raises(InputError):
        next(inp.read_blocks())


def test_reads_from_stdin(monkeypatch):
    data = bytes([127, 0, 255, 64])
    fake_stdin = io.TextIOWrapper(io.BytesIO(data))
    monkeypatch.setattr("sys.stdin", fake_stdin)
    cfg = InputConfig(source="-", type=InputType.FILE, sfmt=SampleFormat.CU8)
    inp = create_input(cfg).open()
    blocks = list(inp.read_blocks())
    assert blocks == [convert_cu8(data, 127.0)]
    assert fake_stdin.closed is False