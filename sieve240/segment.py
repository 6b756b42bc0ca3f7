"""
Packed segment codec for the mod-240 wheel.

Responsibility: mapping integers to bits. No sieving, no iteration.

Each uint64 word covers 240 consecutive integers. Only the 64 residues
coprime to 30 in [0, 240) can be prime (apart from 2, 3 and 5), so one bit
is stored per such residue and everything else is implicitly composite.

Index mapping:
- word = idx // 240
- bit  = position of (idx % 240) in OFFSETS

For idx=1:   word 0, bit 0
For idx=7:   word 0, bit 1
For idx=241: word 1, bit 0
For idx=239: word 0, bit 63
"""

import numpy as np
from numba import njit

MODULUS = 240
WORD_BITS = 64

# Primes with no representable bit; every query layer special-cases them.
SMALL_PRIMES = (2, 3, 5)

# Residue encoded by each bit position of a word.
OFFSETS = np.array([
    1, 7, 11, 13, 17, 19, 23, 29,
    31, 37, 41, 43, 47, 49, 53, 59,
    61, 67, 71, 73, 77, 79, 83, 89,
    91, 97, 101, 103, 107, 109, 113, 119,
    121, 127, 131, 133, 137, 139, 143, 149,
    151, 157, 161, 163, 167, 169, 173, 179,
    181, 187, 191, 193, 197, 199, 203, 209,
    211, 217, 221, 223, 227, 229, 233, 239,
], dtype=np.int64)

_REPRESENTABLE = np.zeros(MODULUS, dtype=np.bool_)
_BIT_MASK = np.zeros(MODULUS, dtype=np.uint64)
for _bit, _residue in enumerate(OFFSETS):
    _REPRESENTABLE[_residue] = True
    _BIT_MASK[_residue] = np.uint64(1) << np.uint64(_bit)
del _bit, _residue

ALL_ONES = np.uint64(0xFFFFFFFFFFFFFFFF)

# Exact prime pattern of word 0: drops 1 and the composites 49, 77, 91, ...
# (every composite below 240 coprime to 30 has a factor 7, 11 or 13).
FIRST_WORD = np.uint64(sum(
    1 << bit for bit, r in enumerate(OFFSETS.tolist())
    if r > 1 and all(r % p or r == p for p in (7, 11, 13))
))


@njit
def representable(idx: int) -> bool:
    """True iff idx is coprime to 30, i.e. has a bit in the packed form."""
    return _REPRESENTABLE[idx % MODULUS]


@njit
def get(segment: np.ndarray, idx: int) -> bool:
    """
    Read the bit for idx.

    Parameters
    ----------
    segment : np.ndarray
        uint64 words; idx must fall inside them.
    idx : int
        Global index into the range the segment covers.

    Returns
    -------
    bool
        False for indices divisible by 2, 3 or 5, otherwise the stored bit.
    """
    r = idx % MODULUS
    if not _REPRESENTABLE[r]:
        return False
    return (segment[idx // MODULUS] & _BIT_MASK[r]) != 0


@njit
def set_on(segment: np.ndarray, idx: int) -> None:
    """Set the bit for idx. No-op if idx is not representable."""
    r = idx % MODULUS
    if _REPRESENTABLE[r]:
        segment[idx // MODULUS] |= _BIT_MASK[r]


@njit
def set_off(segment: np.ndarray, idx: int) -> None:
    """Clear the bit for idx. No-op if idx is not representable."""
    r = idx % MODULUS
    if _REPRESENTABLE[r]:
        segment[idx // MODULUS] &= ~_BIT_MASK[r]


def new_segment(num_words: int) -> np.ndarray:
    """Return num_words all-ones words (every candidate still possibly prime)."""
    return np.full(num_words, ALL_ONES, dtype=np.uint64)
