"""
Tests for the packed segment codec.

Only residues coprime to 30 have a bit; everything else always reads false
and ignores writes.
"""

from math import gcd

import numpy as np
import pytest

from sieve240.segment import (
    FIRST_WORD, MODULUS, OFFSETS, get, new_segment, representable, set_off, set_on,
)
from sieve240.reference import primes_below


def coprime_to_30(n: int) -> bool:
    return gcd(n, 30) == 1


class TestTables:
    """Test the residue tables."""

    def test_offsets_are_coprime_residues(self):
        """OFFSETS lists the 64 residues in [0, 240) coprime to 30, ascending."""
        expected = [r for r in range(MODULUS) if coprime_to_30(r)]
        assert OFFSETS.tolist() == expected
        assert len(OFFSETS) == 64

    def test_representable_matches_gcd(self):
        """representable(idx) iff gcd(idx, 30) == 1."""
        for idx in range(3 * MODULUS):
            assert representable(idx) == coprime_to_30(idx), f"idx={idx}"

    def test_first_word_pattern(self):
        """FIRST_WORD has exactly the primes 7..239 set."""
        flags = np.zeros(MODULUS, dtype=bool)
        flags[primes_below(MODULUS)] = True
        segment = np.array([FIRST_WORD], dtype=np.uint64)
        for idx in range(MODULUS):
            expected = bool(flags[idx]) and idx > 5
            assert get(segment, idx) == expected, f"idx={idx}"

    def test_first_word_literal(self):
        """FIRST_WORD equals the known 64-bit pattern."""
        assert int(FIRST_WORD) == 0b1111100100111101110110111011011001111110111011111101111111111110


class TestSetAndGet:
    """Test set_on / set_off / get on single and multi-word segments."""

    def test_set_small_values(self):
        """Every index in the first word round-trips through off and on."""
        for idx in range(MODULUS):
            segment = new_segment(1)
            set_off(segment, idx)
            assert not get(segment, idx)
            set_on(segment, idx)
            assert get(segment, idx) == coprime_to_30(idx), f"idx={idx}"

    def test_set_large_values(self):
        """Indices deep into a segment hit the right word."""
        base = 99 * MODULUS
        for r in range(MODULUS):
            segment = new_segment(100)
            set_off(segment, base + r)
            assert not get(segment, base + r)
            set_on(segment, base + r)
            assert get(segment, base + r) == coprime_to_30(r)

    def test_set_off_touches_one_bit(self):
        """Clearing one index leaves every other index set."""
        segment = new_segment(3)
        set_off(segment, 241)
        assert segment[0] == np.uint64(0xFFFFFFFFFFFFFFFF)
        assert segment[1] == np.uint64(0xFFFFFFFFFFFFFFFE)
        assert segment[2] == np.uint64(0xFFFFFFFFFFFFFFFF)

    @pytest.mark.parametrize("idx", [0, 2, 3, 4, 5, 6, 9, 10, 15, 25, 240, 480])
    def test_non_representable_ignored(self, idx):
        """Writes to indices divisible by 2, 3 or 5 change nothing."""
        segment = np.zeros(3, dtype=np.uint64)
        set_on(segment, idx)
        assert not segment.any()
        assert not get(segment, idx)

    def test_bit_layout(self):
        """Residue OFFSETS[b] of word w is bit b of word w."""
        segment = np.zeros(2, dtype=np.uint64)
        set_on(segment, MODULUS + 239)
        assert segment[1] == np.uint64(1) << np.uint64(63)
        set_on(segment, 7)
        assert segment[0] == np.uint64(2)
