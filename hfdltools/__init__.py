"""HFDL receiver helpers: I/Q input, DSP helpers, Viterbi decoding and option parsing."""

__version__ = "1.4.0"