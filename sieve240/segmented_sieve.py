"""
Segmented sieve of Eratosthenes over the packed mod-240 encoding.

Responsibility: producing the packed words for every integer below a limit.

Memory use is bounded by one scratch segment of SEGMENT_LEN words (plus the
output) regardless of the limit:
- SEGMENT_LEN = 32768 words = 256KB scratch
- each segment covers 240 * 32768 = 7,864,320 integers

Each sieving prime p carries (next index, wheel index) across segments, so
its multiples are crossed off without any division after the first one.
"""

from math import isqrt

import numpy as np
from numba import njit

from .iterator import SieveIterator, decode_word
from .segment import ALL_ONES, FIRST_WORD, MODULUS, new_segment, set_off
from .wheel import advance, start_index

SEGMENT_LEN = 32768


@njit
def cross_off(segment, num, idx, ix, end):
    """
    Clear the multiples of num coprime to 30 from idx up to (not including) end.

    Parameters
    ----------
    segment : np.ndarray
        uint64 words covering at least [0, end).
    num : int
        Prime whose multiples are removed.
    idx : int
        First multiple to clear, relative to the segment.
    ix : int
        Wheel index of idx / num (see wheel.start_index).
    end : int
        Exclusive bound, relative to the segment.

    Returns
    -------
    tuple
        (first multiple >= end, its wheel index).
    """
    while idx < end:
        set_off(segment, idx)
        ix, diff = advance(num, ix)
        idx += diff
    return idx, ix


@njit
def _sieve_segment(segment, primes, indices, wheel_ix, segment_size):
    """Cross off every tracked prime, then rebase its next index to the following segment."""
    for i in range(primes.shape[0]):
        idx, ix = cross_off(segment, primes[i], indices[i], wheel_ix[i], segment_size)
        indices[i] = idx - segment_size
        wheel_ix[i] = ix


def small_primes(limit: int) -> np.ndarray:
    """
    Sieve the primes up to sqrt(limit) into a single packed segment.

    2, 3 and 5 are not encoded. The segment is rounded up to whole words, so
    it can hold a few primes above sqrt(limit).

    Words are read strictly in order. Every composite in word i has a prime
    factor in an earlier word, so word i is final by the time it is read, and
    crossing off from p*p only clears bits at or after word i. Word 0 starts
    from its exact pattern since 7 * 7 lands inside it.

    Parameters
    ----------
    limit : int
        Upper bound whose square root is covered.

    Returns
    -------
    np.ndarray
        uint64 words encoding the primes in [7, 240 * len).
    """
    num_words = isqrt(limit) // MODULUS + 1
    small_limit = MODULUS * num_words

    sieve = new_segment(num_words)
    sieve[0] = FIRST_WORD

    for word_ix in range(num_words):
        for p in decode_word(sieve[word_ix], MODULUS * word_ix):
            if p * p >= small_limit:
                return sieve
            cross_off(sieve, p, p * p, start_index(p), small_limit)

    return sieve


def segmented_sieve(limit: int, segment_len: int = SEGMENT_LEN,
                    verbose: bool = False) -> np.ndarray:
    """
    Sieve primes up to limit and return them in packed form.

    Parameters
    ----------
    limit : int
        Inclusive upper bound. Rounded up to the next multiple of 240
        strictly above it, so limit itself is always covered.
    segment_len : int
        Words per segment (scratch buffer size).
    verbose : bool
        Print progress.

    Returns
    -------
    np.ndarray
        uint64 words covering [0, limit - limit % 240 + 240). Bit set means
        prime; 2, 3 and 5 are not encoded.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if segment_len < 1:
        raise ValueError(f"segment_len must be positive, got {segment_len}")

    lim = limit - limit % MODULUS + MODULUS
    segment_size = MODULUS * segment_len

    # Step 1: primes up to sqrt(lim)
    small = small_primes(lim)
    sieving_primes = SieveIterator(small)
    pending = next(sieving_primes, None)

    num_segments = -(-lim // segment_size)
    if verbose:
        print(f"    Found {int(np.bitwise_count(small).sum()) + 3} small primes "
              f"below {MODULUS * len(small):,}")
        print(f"    Sieving {num_segments:,} segments of {segment_len:,} words...")

    # Step 2: per-prime (next index, wheel index), relative to the current segment
    primes = np.empty(0, dtype=np.int64)
    indices = np.empty(0, dtype=np.int64)
    wheel_ix = np.empty(0, dtype=np.int64)

    segment = new_segment(segment_len)
    result = np.empty(lim // MODULUS, dtype=np.uint64)

    # Step 3: sieve one segment at a time, reusing the scratch buffer
    low = 0
    while low < lim:
        high = min(low + segment_size, lim)
        size = high - low

        # Start tracking primes whose square falls below this segment's end
        new = []
        while pending is not None and pending * pending < high:
            new.append(pending)
            pending = next(sieving_primes, None)
        if new:
            new_primes = np.array(new, dtype=np.int64)
            primes = np.concatenate((primes, new_primes))
            indices = np.concatenate((indices, new_primes * new_primes - low))
            wheel_ix = np.concatenate(
                (wheel_ix, np.array([start_index(p) for p in new], dtype=np.int64)))

        segment.fill(ALL_ONES)
        if low == 0:
            segment[0] ^= np.uint64(1)  # 1 is not prime

        _sieve_segment(segment, primes, indices, wheel_ix, size)

        words = size // MODULUS
        start = low // MODULUS
        result[start:start + words] = segment[:words]
        low = high

    return result
