# hfdltools

Building blocks for an HFDL (High Frequency Data Link) receiver:

- reading raw I/Q sample files and converting them to complex values,
- FIR band-pass design and decimation helpers,
- a soft-decision Viterbi decoder for the K=7, rate 1/2 convolutional code,
- parsing of option values, `key=value` lists and output specifiers,
- a command-line front end that validates a receiver configuration and
  reads an I/Q file through.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
hfdltools --iq-file recording.cu8 --sample-format CU8 --sample-rate 192000 8927 8936 8942
```

Channel frequencies are given in kHz. The command checks that the sample
rate is at least 18000 sps, computes the centre frequency when
`--centerfreq` is not given, checks that every channel lies within the
receiver bandwidth, opens the input (use `-` for standard input) and reads
it to the end. On standard error it reports the number of samples read and
the power-of-two decimation rate. It exits with status 1 on any invalid
option or input error.

Run `hfdltools --help` for the full list of options.

## What the package does not do

The command line reads samples but does not demodulate them or decode
HFDL frames, and it does not parse or print any protocol data units. The
`--output` specifiers are checked for syntax only (`<data_type>:<format>:<output_type>:<key>=<value>,...`);
no output is written to them. `--system-table`, `--system-table-save`,
`--station-id`, `--utc`, `--milliseconds`, `--raw-frames`,
`--prettify-xml`, `--output-mpdus`, `--output-corrupted-pdus` and
`--freq-as-squawk` are accepted and stored in `Settings`, but nothing acts
on them. Only file input is available; there is no support for radio
hardware.

## Library use

Read an I/Q file in batches of complex samples:

```python
from hfdltools.inputs import InputConfig, InputType, create_input
from hfdltools.samples import SampleFormat

cfg = InputConfig(source="recording.cs16", type=InputType.FILE, sfmt=SampleFormat.CS16)
with create_input(cfg) as source:
    for block in source.read_blocks():
        ...
```

Convert a raw buffer directly:

```python
from hfdltools.samples import SampleFormat, get_sample_converter, full_scale_value

fmt = SampleFormat.CU8
samples = get_sample_converter(fmt)(raw, full_scale_value(fmt))
```

Decode a convolutionally coded frame (symbols are soft decisions 0..255,
two per bit, including the 6 tail bits):

```python
from hfdltools.viterbi import Viterbi27

dec = Viterbi27(nbits)
dec.update(symbols)
data = dec.chainback(nbits, 0)
```

Parse key-value option strings and output specifiers:

```python
from hfdltools.kvargs import parse_kvargs
from hfdltools.config import parse_output_spec

opts = parse_kvargs("path=-,mode=append")      # KVArgsError on a bad string
spec = parse_output_spec("decoded:text:file:path=-")
```

Other modules: `hfdltools.dsp` (`firdes_bandpass_c`, `firdes_filter_len`,
`next_pow2`, `compute_fft_decimation_rate`,
`compute_filter_relative_transition_bw`), `hfdltools.config`
(`parse_double`, `parse_int32`, `parse_frequency`, `compute_centerfreq`,
`check_frequency_span`, all raising `ConfigError`), `hfdltools.options`
(`describe_option` for help-text lines) and `hfdltools.cli`
(`parse_arguments`, `usage_text`, `main`).