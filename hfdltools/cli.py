"""Command-line front end: option parsing, validation and the sample reading loop."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from hfdltools.config import (
    DEFAULT_OUTPUT,
    ConfigError,
    OutputSpec,
    check_frequency_span,
    compute_centerfreq,
    parse_double,
    parse_frequency,
    parse_int32,
    parse_output_spec,
)
from hfdltools.dsp import compute_fft_decimation_rate
from hfdltools.inputs import InputConfig, InputError, InputType, create_input
from hfdltools.options import USAGE_INDENT_STEP, USAGE_OPT_NAME_COLWIDTH, describe_option
from hfdltools.samples import SampleFormat, sample_format_from_string

VERSION = "1.4.0"
HFDL_SYMBOL_RATE = 1800
SPS = 10
MIN_SAMPLE_RATE = HFDL_SYMBOL_RATE * SPS
OUTPUT_QUEUE_HWM_DEFAULT = 1000
OUTPUT_QUEUE_HWM_NONE = 0
STATION_ID_LEN_MAX = 255

# Long option name -> whether it takes an argument.
_OPTIONS = {
    "version": False,
    "help": False,
    "iq-file": True,
    "sample-format": True,
    "sample-rate": True,
    "centerfreq": True,
    "gain": True,
    "gain-elements": True,
    "freq-correction": True,
    "antenna": True,
    "device-settings": True,
    "freq-offset": True,
    "read-buffer-size": True,
    "output": True,
    "output-queue-hwm": True,
    "utc": False,
    "milliseconds": False,
    "raw-frames": False,
    "prettify-xml": False,
    "station-id": True,
    "output-mpdus": False,
    "output-corrupted-pdus": False,
    "freq-as-squawk": False,
    "system-table": True,
    "system-table-save": True,
}


class _UsageError(ConfigError):
    """An option that is unknown or malformed; the usage text should follow."""


@dataclass
class Settings:
    """Everything the command line configures."""

    input: InputConfig = field(default_factory=InputConfig)
    frequencies: list[int] = field(default_factory=list)
    outputs: list[OutputSpec] = field(default_factory=list)
    output_queue_hwm: int = OUTPUT_QUEUE_HWM_DEFAULT
    utc: bool = False
    milliseconds: bool = False
    output_raw_frames: bool = False
    prettify_xml: bool = False
    station_id: Optional[str] = None
    output_mpdus: bool = False
    output_corrupted_pdus: bool = False
    freq_as_squawk: bool = False
    systable_file: Optional[str] = None
    systable_save_file: Optional[str] = None
    show_help: bool = False
    show_version: bool = False
    centerfreq_computed: bool = False
    warnings: list[str] = field(default_factory=list)


def _version_text() -> str:
    return f"dumphfdl {VERSION}"


def usage_text() -> str:
    """Return the help text."""
    ind = " " * USAGE_INDENT_STEP
    pad = " " * USAGE_OPT_NAME_COLWIDTH
    lines = [
        "Usage:",
        "",
        "Read I/Q samples from file:",
        "",
        f"{ind}dumphfdl [output_options] --iq-file <input_iq_file> [iq_file_options] "
        "<freq_1> [<freq_2> [...]]",
        "",
        "General options:",
        describe_option("--help", "Displays this text", 1),
        describe_option("--version", "Displays program version number", 1),
        "common options:",
        describe_option(
            "<freq_1> [<freq_2> [...]]",
            "HFDL channel frequencies, in kHz, as floating point numbers",
            1,
        ),
        "",
        "iq_file_options:",
        describe_option(
            "--iq-file <string>",
            'Read I/Q samples from file (use "-" to read from standard input)',
            1,
        ),
        describe_option("--sample-rate <integer>", "Set sampling rate (samples per second)", 1),
        describe_option(
            "--centerfreq <float>", "Center frequency of the input data, in kHz (default: auto)", 1
        ),
        describe_option(
            "--sample-format <sample_format>", "Input sample format. Supported formats:", 1
        ),
        describe_option("CU8", "8-bit unsigned (eg. recorded with rtl_sdr)", 2),
        describe_option("CS16", "16-bit signed, little-endian (eg. recorded with sdrplay)", 2),
        describe_option("CF32", "32-bit float, little-endian (eg. Airspy HF+)", 2),
        describe_option(
            "--read-buffer-size <integer>", "Number of bytes to read from file in one batch", 1
        ),
        "",
        "Output options:",
        describe_option(
            "--output <output_specifier>", f"Output specification (default: {DEFAULT_OUTPUT})", 1
        ),
        describe_option("", '(See "--output help" for details)', 1),
        describe_option(
            "--output-queue-hwm <integer>",
            "High water mark value for output queues (0 = no limit)",
            1,
        ),
        f"{pad}(default: {OUTPUT_QUEUE_HWM_DEFAULT} messages, not applicable when using --iq-file)",
        describe_option(
            "--output-mpdus",
            "Include media access control protocol data units in the output (default: false)",
            1,
        ),
        describe_option(
            "--output-corrupted-pdus",
            "Include corrupted / unparseable PDUs in the output (default: false)",
            1,
        ),
        describe_option("--station-id <string>", "Receiver site identifier", 1),
        f"{pad}Maximum length: {STATION_ID_LEN_MAX} characters",
        "",
        "Text output formatting options:",
        describe_option("--utc", "Use UTC timestamps in output and file names", 1),
        describe_option("--milliseconds", "Print milliseconds in timestamps", 1),
        describe_option("--raw-frames", "Print raw data as hex", 1),
        describe_option(
            "--prettify-xml", "Pretty-print XML payloads in ACARS and MIAM CORE PDUs", 1
        ),
        "",
        "Basestation feed options:",
        describe_option(
            "--freq-as-squawk", "(Ab)use squawk field to convey HFDL channel frequency info", 1
        ),
        "",
        "System table options:",
        describe_option("--system-table <string>", "Load system table from the given file", 1),
        describe_option(
            "--system-table-save <string>", "Save updated system table to the given file", 1
        ),
    ]
    return "\n".join(lines) + "\n"


def _match_option(name: str) -> str:
    if name in _OPTIONS:
        return name
    candidates = [opt for opt in _OPTIONS if opt.startswith(name)] if name else []
    if len(candidates) == 1:
        return candidates[0]
    if candidates:
        raise _UsageError(f"option '--{name}' is ambiguous")
    raise _UsageError(f"unrecognized option '--{name}'")


def _tokens(argv: Sequence[str], positionals: list[str]) -> Iterator[tuple[str, Optional[str]]]:
    """Yield (option, argument) pairs; non-option words go to ``positionals``."""
    args = iter(argv)
    for arg in args:
        if arg == "--":
            positionals.extend(args)
            return
        if arg.startswith("--"):
            name, eq, value = arg[2:].partition("=")
            opt = _match_option(name)
            if _OPTIONS[opt]:
                if not eq:
                    nxt = next(args, None)
                    if nxt is None:
                        raise _UsageError(f"option '--{opt}' requires an argument")
                    value = nxt
                yield opt, value
            else:
                if eq:
                    raise _UsageError(f"option '--{opt}' doesn't allow an argument")
                yield opt, None
        elif arg.startswith("-") and arg != "-":
            raise _UsageError(f"invalid option -- '{arg[1:2]}'")
        else:
            positionals.append(arg)


def _apply(settings: Settings, opt: str, value: Optional[str]) -> bool:
    """Apply one option; return True when parsing must stop."""
    cfg = settings.input
    arg = value if value is not None else ""
    match opt:
        case "version":
            settings.show_version = True
            return True
        case "help":
            settings.show_help = True
            return True
        case "iq-file":
            settings.output_queue_hwm = OUTPUT_QUEUE_HWM_NONE
            cfg.source = arg
            cfg.type = InputType.FILE
        case "sample-format":
            cfg.sfmt = sample_format_from_string(arg)
            if cfg.sfmt == SampleFormat.UNDEF:
                raise ConfigError(f"Sample format '{arg}' is unknown")
        case "sample-rate":
            cfg.sample_rate = parse_int32(arg)
        case "centerfreq":
            cfg.centerfreq = parse_frequency(arg)
        case "gain":
            cfg.gain = parse_double(arg)
        case "gain-elements":
            cfg.gain_elements = arg
        case "freq-correction":
            cfg.correction = parse_double(arg)
        case "antenna":
            cfg.antenna = arg
        case "device-settings":
            cfg.device_settings = arg
        case "freq-offset":
            cfg.freq_offset = parse_frequency(arg)
        case "read-buffer-size":
            cfg.read_buffer_size = parse_int32(arg)
        case "output":
            settings.outputs.append(parse_output_spec(arg))
        case "output-queue-hwm":
            settings.output_queue_hwm = parse_int32(arg)
        case "utc":
            settings.utc = True
        case "milliseconds":
            settings.milliseconds = True
        case "raw-frames":
            settings.output_raw_frames = True
        case "prettify-xml":
            settings.prettify_xml = True
        case "station-id":
            if len(arg) > STATION_ID_LEN_MAX:
                settings.warnings.append(
                    "Warning: --station-id argument too long; truncated to "
                    f"{STATION_ID_LEN_MAX} characters"
                )
            settings.station_id = arg[:STATION_ID_LEN_MAX]
        case "output-mpdus":
            settings.output_mpdus = True
        case "output-corrupted-pdus":
            settings.output_corrupted_pdus = True
        case "freq-as-squawk":
            settings.freq_as_squawk = True
        case "system-table":
            settings.systable_file = arg
        case "system-table-save":
            settings.systable_save_file = arg
    return False


def parse_arguments(argv: Sequence[str]) -> Settings:
    """Parse and validate the command line (without the program name).

    Raises :class:`ConfigError` on any invalid option or combination.
    When --help or --version is met, parsing stops there and no validation is done.
    """
    settings = Settings()
    positionals: list[str] = []
    for opt, value in _tokens(argv, positionals):
        if _apply(settings, opt, value):
            return settings

    cfg = settings.input
    if cfg.source is None:
        raise ConfigError("No input specified")
    if not positionals:
        raise ConfigError("No channel frequencies given")
    settings.frequencies = [parse_frequency(word) for word in positionals]

    if cfg.sample_rate < MIN_SAMPLE_RATE:
        raise ConfigError(f"Sample rate must be greater or equal to {MIN_SAMPLE_RATE}")
    if cfg.centerfreq < 0:
        cfg.centerfreq = compute_centerfreq(settings.frequencies)
        settings.centerfreq_computed = True
    check_frequency_span(settings.frequencies, cfg.centerfreq, cfg.sample_rate)
    if settings.output_queue_hwm < 0:
        raise ConfigError(
            "Invalid --output-queue-hwm value: must be a non-negative integer"
        )
    if not settings.outputs:
        settings.outputs.append(parse_output_spec(DEFAULT_OUTPUT))
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the program; return the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    err = sys.stderr
    print(_version_text(), file=err)
    try:
        settings = parse_arguments(argv)
    except _UsageError as exc:
        print(exc, file=err)
        err.write(usage_text())
        return 1
    except ConfigError as exc:
        print(exc, file=err)
        return 1
    if settings.show_version:
        return 0
    if settings.show_help:
        err.write(usage_text())
        return 0
    for warning in settings.warnings:
        print(warning, file=err)

    cfg = settings.input
    if settings.centerfreq_computed:
        print(
            f"{cfg.source}: computed center frequency: {cfg.centerfreq / 1000.0:.3f} kHz",
            file=err,
        )

    try:
        source = create_input(cfg)
    except InputError as exc:
        print(exc, file=err)
        return 1
    try:
        source.open()
    except InputError as exc:
        print(exc, file=err)
        print("Unable to initialize input", file=err)
        return 1

    decimation = compute_fft_decimation_rate(cfg.sample_rate, MIN_SAMPLE_RATE)
    if decimation <= 0:
        source.close()
        print("Unable to compute decimation rate", file=err)
        return 1

    total = 0
    try:
        for block in source.read_blocks():
            total += len(block)
    except KeyboardInterrupt:
        print("Got interrupt, exiting gracefully", file=err)
    except OSError as exc:
        print(f"{cfg.source}: read error: {exc}", file=err)
        return 1
    finally:
        source.close()
    print(
        f"{cfg.source}: processed {total} samples (decimation rate {decimation})",
        file=err,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())