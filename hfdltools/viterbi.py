"""Soft-decision Viterbi decoder for the K=7, rate 1/2 convolutional code."""

from __future__ import annotations

from typing import Iterable, Sequence

# r=1/2 k=7 convolutional encoder polynomials
V27POLYA = 0x6D
V27POLYB = 0x4F

_NUM_STATES = 64
_HALF_STATES = _NUM_STATES // 2
_TAIL_BITS = 6
_INITIAL_METRIC = 63
_MAX_BRANCH_METRIC = 510
_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000


def parity(x: int) -> int:
    """Return the parity (0 or 1) of the low 24 bits of ``x``, folded to one octet."""
    x ^= x >> 16
    x ^= x >> 8
    return bin(x & 0xFF).count("1") & 1


def _branch_table(poly: int) -> tuple[int, ...]:
    invert = 1 if poly < 0 else 0
    magnitude = abs(poly)
    return tuple(
        255 if invert ^ parity((2 * state) & magnitude) else 0
        for state in range(_HALF_STATES)
    )


def _prefers_second(m0: int, m1: int) -> bool:
    """True when ``m0 - m1`` is positive as a signed 32-bit quantity."""
    diff = (m0 - m1) & _MASK32
    return 0 < diff < _SIGN32


class Viterbi27:
    """Viterbi decoder for frames of up to ``length`` data bits plus a 6-bit tail.

    Symbols are soft decisions in the range 0..255, where 0 is a confident
    zero and 255 a confident one.
    """

    def __init__(
        self,
        length: int,
        polys: Sequence[int] = (V27POLYA, V27POLYB),
        starting_state: int = 0,
    ) -> None:
        if length < 0:
            raise ValueError("frame length must not be negative")
        if len(polys) != 2:
            raise ValueError("exactly two polynomials are required")
        self.length = length
        self._capacity = length + _TAIL_BITS
        self._bt0 = _branch_table(polys[0])
        self._bt1 = _branch_table(polys[1])
        self._metrics: list[int] = []
        self._decisions: list[int] = []
        self.reset(starting_state)

    @property
    def decoded_bit_count(self) -> int:
        """Number of bit decisions accumulated since the last reset."""
        return len(self._decisions)

    def reset(self, starting_state: int = 0) -> None:
        """Prepare the decoder for a new frame starting in the given encoder state."""
        self._metrics = [_INITIAL_METRIC] * _NUM_STATES
        self._metrics[starting_state & (_NUM_STATES - 1)] = 0
        self._decisions = []

    def update(self, symbols: Iterable[int]) -> None:
        """Feed pairs of soft symbols; each pair yields one decoded-bit decision."""
        syms = bytes(symbols)
        if len(syms) % 2:
            raise ValueError("symbols must come in pairs")
        nbits = len(syms) // 2
        if len(self._decisions) + nbits > self._capacity:
            raise ValueError(
                f"too many symbols: decoder holds at most {self._capacity} bit decisions"
            )
        bt0, bt1 = self._bt0, self._bt1
        old = self._metrics
        it = iter(syms)
        for sym0, sym1 in zip(it, it):
            new = [0] * _NUM_STATES
            decision = 0
            for i in range(_HALF_STATES):
                metric = (bt0[i] ^ sym0) + (bt1[i] ^ sym1)
                a = old[i]
                b = old[i + _HALF_STATES]
                m0 = (a + metric) & _MASK32
                m1 = (b + _MAX_BRANCH_METRIC - metric) & _MASK32
                if _prefers_second(m0, m1):
                    new[2 * i] = m1
                    decision |= 1 << (2 * i)
                else:
                    new[2 * i] = m0
                m0 = (a + _MAX_BRANCH_METRIC - metric) & _MASK32
                m1 = (b + metric) & _MASK32
                if _prefers_second(m0, m1):
                    new[2 * i + 1] = m1
                    decision |= 1 << (2 * i + 1)
                else:
                    new[2 * i + 1] = m0
            self._decisions.append(decision)
            old = new
        self._metrics = old

    def chainback(self, nbits: int, endstate: int = 0) -> bytes:
        """Trace back the survivor path and return ``nbits`` decoded bits, MSB first.

        The decoder must have received ``nbits`` plus 6 tail bits worth of symbols.
        """
        if nbits < 0:
            raise ValueError("bit count must not be negative")
        if nbits + _TAIL_BITS > len(self._decisions):
            raise ValueError(
                f"not enough decisions: {nbits + _TAIL_BITS} needed, "
                f"{len(self._decisions)} available"
            )
        state = (endstate % _NUM_STATES) << 2
        out = bytearray((nbits + 7) // 8)
        for n in reversed(range(nbits)):
            k = (self._decisions[n + _TAIL_BITS] >> (state >> 2)) & 1
            state = (state >> 1) | (k << 7)
            out[n >> 3] = state & 0xFF
        return bytes(out)