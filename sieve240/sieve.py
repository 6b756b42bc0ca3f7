"""
Queryable store of the primes below a limit.

Responsibility: owning the packed sieve plus its prefix counts, and answering
iteration, primality and n-th prime queries against them.

Indeterminate answers are None:
- is_prime(n) for n > limit()**2
- nth_prime(n) for n >= num_primes()
"""

from itertools import chain, islice
from math import log
from typing import Iterator, Optional

import numpy as np

from . import primefuncs
from .iterator import SieveIterator, decode_word
from .segment import MODULUS, SMALL_PRIMES, get
from .segmented_sieve import SEGMENT_LEN, segmented_sieve

U64_MAX = 2**64 - 1


def _check_u64(n: int, name: str = "n") -> int:
    """Return n as a Python int, or raise ValueError if it is not a u64."""
    if isinstance(n, (bool, np.bool_)) or not isinstance(n, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {n!r}")
    n = int(n)
    if not 0 <= n <= U64_MAX:
        raise ValueError(f"{name} must be in [0, 2**64), got {n}")
    return n


def upper_bound(n: int) -> int:
    """
    Upper bound on the n-th prime (1-indexed).

    Uses p_n < n (ln n + ln ln n), valid for n >= 6; smaller n use 12.
    """
    if n <= 5:
        return 12
    return int(n * (log(n) + log(log(n))))


class Sieve:
    """
    Immutable sieve of the primes below limit().

    Parameters
    ----------
    primes : np.ndarray
        Packed uint64 words as produced by segmented_sieve. The sieve takes
        ownership and marks the array read-only.

    Attributes
    ----------
    primes : np.ndarray
        The packed store (2, 3 and 5 are not encoded).
    counts : np.ndarray
        counts[i] = number of set bits in primes[0..i], non-decreasing.
    """

    def __init__(self, primes: np.ndarray):
        primes.setflags(write=False)
        self.primes = primes
        self.counts = np.cumsum(np.bitwise_count(primes), dtype=np.int64)
        self.counts.setflags(write=False)

    @classmethod
    def to_limit(cls, limit: int, segment_len: int = SEGMENT_LEN,
                 verbose: bool = False) -> "Sieve":
        """Sieve every prime up to (at least) limit."""
        limit = _check_u64(limit, "limit")
        sieve = cls(segmented_sieve(limit, segment_len, verbose))
        if verbose:
            print(f"    Sieve holds {sieve.num_primes():,} primes below {sieve.limit():,}")
        return sieve

    @classmethod
    def to_n_primes(cls, n: int, segment_len: int = SEGMENT_LEN,
                    verbose: bool = False) -> "Sieve":
        """Sieve (at least) the first n primes."""
        n = _check_u64(n)
        return cls.to_limit(upper_bound(n + 1), segment_len, verbose)

    def limit(self) -> int:
        """Exclusive bound of the numbers covered; a multiple of 240."""
        return MODULUS * len(self.primes)

    def num_primes(self) -> int:
        """Number of primes below limit(), including 2, 3 and 5."""
        stored = int(self.counts[-1]) if len(self.counts) else 0
        return len(SMALL_PRIMES) + stored

    def iter(self) -> Iterator[int]:
        """
        Iterate over the primes in ascending order, starting at 2.

        Each call returns a fresh iterator.

        Examples
        --------
        >>> from itertools import takewhile
        >>> sieve = Sieve.to_limit(100)
        >>> list(takewhile(lambda p: p < 30, sieve.iter()))
        [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
        """
        return chain(SMALL_PRIMES, SieveIterator(self.primes))

    __iter__ = iter

    def is_prime(self, n: int) -> Optional[bool]:
        """
        Return whether n is prime.

        Looks n up directly below limit(), falls back to trial division up to
        limit()**2, and returns None beyond that.
        """
        n = _check_u64(n)
        if n in SMALL_PRIMES:
            return True
        limit = self.limit()
        if n < limit:
            return bool(get(self.primes, n))
        if n <= limit * limit:
            return primefuncs.trial_division(n, self)
        return None

    def nth_prime(self, n: int) -> Optional[int]:
        """
        Return the n-th prime, indexed from 0, or None if the sieve holds
        n primes or fewer.
        """
        n = _check_u64(n)
        if n < len(SMALL_PRIMES):
            return SMALL_PRIMES[n]
        if n >= self.num_primes():
            return None

        # The stored counts exclude 2, 3 and 5. side="right" skips every word
        # whose running count equals k, landing on the first word that holds
        # the k-th stored prime.
        k = n - len(SMALL_PRIMES)
        idx = int(np.searchsorted(self.counts, k, side="right"))
        word = self.primes[idx]
        before = int(self.counts[idx]) - int(np.bitwise_count(word))
        return next(islice(decode_word(word, MODULUS * idx), k - before, None))

    def factorise(self, n: int) -> Optional[primefuncs.Factors]:
        """Factor n into (prime, exponent) pairs; see primefuncs.factorise."""
        return primefuncs.factorise(_check_u64(n), self)

    def euler_phi(self, n: int) -> Optional[int]:
        """Euler's totient of n; see primefuncs.euler_phi."""
        return primefuncs.euler_phi(_check_u64(n), self)

    def number_of_divisors(self, n: int) -> Optional[int]:
        """Number of divisors of n; see primefuncs.number_of_divisors."""
        return primefuncs.number_of_divisors(_check_u64(n), self)

    def __repr__(self):
        return f"Sieve(limit={self.limit()}, num_primes={self.num_primes()})"


def build_to_limit(limit: int, segment_len: int = SEGMENT_LEN,
                   verbose: bool = False) -> Sieve:
    """Build a Sieve holding every prime up to limit."""
    return Sieve.to_limit(limit, segment_len, verbose)


def build_to_n_primes(n: int, segment_len: int = SEGMENT_LEN,
                      verbose: bool = False) -> Sieve:
    """Build a Sieve holding at least the first n primes."""
    return Sieve.to_n_primes(n, segment_len, verbose)
