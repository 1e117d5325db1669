"""Sample sources: input configuration and the I/Q file reader."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Iterator, Optional

from hfdltools.samples import (
    Converter,
    SampleFormat,
    full_scale_value,
    get_sample_converter,
    sample_size,
)

AUTO_GAIN = -100
INPUT_FILE_BUFSIZE_DEFAULT = 320000


class InputType(IntEnum):
    """Kinds of sample sources."""

    UNDEF = 0
    FILE = 1


class InputError(Exception):
    """Raised when an input cannot be created, opened or read."""


@dataclass
class InputConfig:
    """Settings of a sample source."""

    source: Optional[str] = None
    gain_elements: Optional[str] = None
    antenna: Optional[str] = None
    device_settings: Optional[str] = None
    gain: float = AUTO_GAIN
    correction: float = 0.0
    sample_rate: int = -1
    centerfreq: int = -1
    freq_offset: int = 0
    read_buffer_size: int = -1
    type: InputType = InputType.UNDEF
    sfmt: SampleFormat = SampleFormat.UNDEF


class FileInput:
    """Reads raw I/Q samples from a file, or from standard input when the source is ``-``."""

    def __init__(self, config: InputConfig) -> None:
        self.config = config
        self.full_scale = 0.0
        self.bytes_per_sample = 0
        self.max_tu = 0
        self._converter: Optional[Converter] = None
        self._fh: Optional[BinaryIO] = None
        self._owns_fh = False

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self) -> FileInput:
        """Validate the configuration and open the source."""
        cfg = self.config
        if cfg.sfmt == SampleFormat.UNDEF:
            raise InputError("Sample format must be specified for file inputs")
        if cfg.source is None:
            raise InputError("No input file specified")
        if cfg.read_buffer_size <= 0:
            cfg.read_buffer_size = INPUT_FILE_BUFSIZE_DEFAULT
        if cfg.source == "-":
            self._fh = sys.stdin.buffer
            self._owns_fh = False
        else:
            try:
                self._fh = open(cfg.source, "rb")
            except OSError as exc:
                raise InputError(
                    f"Failed to open input file {cfg.source}: {exc.strerror}"
                ) from exc
            self._owns_fh = True

        self.full_scale = full_scale_value(cfg.sfmt)
        self.bytes_per_sample = sample_size(cfg.sfmt)
        if cfg.read_buffer_size % self.bytes_per_sample != 0:
            self.close()
            raise InputError(
                "Invalid --read-buffer-size value (must be a multiple of sample size, "
                f"which is {self.bytes_per_sample} bytes)"
            )
        self.max_tu = cfg.read_buffer_size // self.bytes_per_sample
        self._converter = get_sample_converter(cfg.sfmt)
        if self._converter is None:
            self.close()
            raise InputError(
                f"No sample conversion routine found for sample format {int(cfg.sfmt)}"
            )
        return self

    def read_blocks(self) -> Iterator[list[complex]]:
        """Yield batches of complex samples until the source is exhausted, then close it."""
        if self._fh is None or self._converter is None:
            raise InputError("input is not open")
        bufsize = self.config.read_buffer_size
        try:
            while True:
                chunk = self._fh.read(bufsize)
                samples = self._converter(chunk, self.full_scale)
                if samples:
                    yield samples
                if len(chunk) != bufsize:
                    break
        finally:
            self.close()

    def close(self) -> None:
        """Close the source; standard input is left open."""
        if self._fh is not None and self._owns_fh:
            self._fh.close()
        self._fh = None
        self._owns_fh = False

    def __enter__(self) -> FileInput:
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_input(config: InputConfig) -> FileInput:
    """Create the input matching the configured type."""
    if config is None:
        raise InputError("No input configuration given")
    if config.type == InputType.FILE:
        return FileInput(config)
    raise InputError("Invalid input specified")