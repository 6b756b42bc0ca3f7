"""
Tests for the unsegmented reference sieve in the packed layout.
"""

import numpy as np
import pytest

from sieve240.iterator import SieveIterator
from sieve240.reference import covered_bound, encode_primes, primes_below, reference_sieve
from sieve240.segment import FIRST_WORD, MODULUS, get

SMALL_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]
SMALL_COMPOSITES = [4, 6, 8, 9, 10, 12, 14, 15, 16, 18, 20, 21, 22, 24, 25]


class TestPrimesBelow:
    """Test the odd-only Eratosthenes."""

    def test_known_primes(self):
        primes = set(primes_below(100).tolist())
        for p in SMALL_PRIMES:
            assert p in primes, f"primes_below: {p} should be prime"
        for n in SMALL_COMPOSITES:
            assert n not in primes, f"primes_below: {n} should not be prime"
        assert len(primes) == 25

    def test_exclusive_bound(self):
        assert primes_below(97)[-1] == 89
        assert primes_below(98)[-1] == 97
        assert np.array_equal(primes_below(48), SMALL_PRIMES)

    @pytest.mark.parametrize("N, expected", [(0, []), (1, []), (2, []), (3, [2]), (4, [2, 3])])
    def test_tiny_bounds(self, N, expected):
        assert primes_below(N).tolist() == expected

    def test_odd_squares_removed(self):
        primes = set(primes_below(10000).tolist())
        for p in (3, 5, 7, 11, 97):
            assert p * p not in primes


class TestEncoding:
    """Test packing primes into words."""

    def test_covered_bound(self):
        assert covered_bound(0) == MODULUS
        assert covered_bound(239) == MODULUS
        assert covered_bound(240) == 2 * MODULUS

    def test_first_word(self):
        """Primes below 240 pack into exactly FIRST_WORD."""
        words = reference_sieve(0)
        assert len(words) == 1
        assert words[0] == FIRST_WORD

    def test_small_primes_have_no_bit(self):
        assert not encode_primes(np.array([2, 3, 5]), 1).any()

    def test_round_trip_through_decoder(self):
        words = reference_sieve(5000)
        expected = [int(p) for p in primes_below(covered_bound(5000)) if p > 5]
        assert list(SieveIterator(words)) == expected

    def test_bits_match_codec(self):
        words = reference_sieve(2000)
        primes = set(primes_below(MODULUS * len(words)).tolist())
        for n in range(MODULUS * len(words)):
            assert get(words, n) == (n in primes and n > 5), f"n={n}"
