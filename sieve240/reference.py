"""
Reference sieve in the packed layout.

Responsibility: an independent, unsegmented Eratosthenes whose output can be
compared word-for-word with segmented_sieve. It shares only the codec with
the packed sieve: no wheel, no segments, no bootstrap.
"""

import numpy as np
from numba import njit

from .segment import MODULUS, set_on


def covered_bound(limit: int) -> int:
    """Exclusive bound segmented_sieve(limit) covers: next multiple of 240 above limit."""
    return limit - limit % MODULUS + MODULUS


def primes_below(N: int) -> np.ndarray:
    """
    Return every prime p < N, in ascending order.

    Parameters
    ----------
    N : int
        Exclusive upper bound.

    Returns
    -------
    np.ndarray
        int64 array of primes.
    """
    if N < 3:
        return np.empty(0, dtype=np.int64)

    # Odd numbers only: slot i holds 2*i + 1.
    odd = np.ones((N + 1) // 2, dtype=bool)
    odd[0] = False
    for i in range(1, (int(N**0.5) + 1) // 2 + 1):
        if odd[i]:
            p = 2 * i + 1
            odd[p * p // 2::p] = False
    return np.concatenate(([2], 2 * np.nonzero(odd)[0] + 1)).astype(np.int64)


@njit
def _encode(primes, words):
    for i in range(primes.shape[0]):
        set_on(words, primes[i])


def encode_primes(primes: np.ndarray, num_words: int) -> np.ndarray:
    """
    Pack ascending primes into num_words zeroed words.

    2, 3 and 5 have no bit and are dropped by the codec.
    """
    words = np.zeros(num_words, dtype=np.uint64)
    _encode(np.asarray(primes, dtype=np.int64), words)
    return words


def reference_sieve(limit: int) -> np.ndarray:
    """
    Packed words for the primes up to limit, laid out exactly like
    segmented_sieve(limit).
    """
    bound = covered_bound(limit)
    return encode_primes(primes_below(bound), bound // MODULUS)
