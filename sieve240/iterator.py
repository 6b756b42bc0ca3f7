"""
Decoding packed segments back into integers.

Responsibility: turning uint64 words into the ascending numbers they encode.
"""

from typing import Iterator

import numpy as np

from .segment import MODULUS, OFFSETS

_OFFSETS = OFFSETS.tolist()


def decode_word(word: int, base: int = 0) -> Iterator[int]:
    """
    Yield base + residue for every set bit of a single word, lowest first.

    Parameters
    ----------
    word : int
        One packed word (anything convertible to int).
    base : int
        Value corresponding to residue 0 of the word (a multiple of 240).
    """
    word = int(word)
    while word:
        low = word & -word
        word ^= low
        yield base + _OFFSETS[low.bit_length() - 1]


class SieveIterator:
    """
    Single-pass iterator over the numbers encoded in a packed segment.

    The cursor keeps the bits of the current word not yet consumed, the value
    of residue 0 of that word, and its index. Once exhausted it stays
    exhausted; build a new one from the same segment for a second pass.

    The backing array must not be modified while an iterator over it is alive.

    Parameters
    ----------
    segment : np.ndarray
        uint64 words to decode.
    start : int
        Index of the first word to decode (default 0).
    """

    def __init__(self, segment: np.ndarray, start: int = 0):
        self.segment = segment
        self.curr_idx = start
        self.base = MODULUS * start
        self.current = int(segment[start]) if start < len(segment) else 0

    def __iter__(self):
        return self

    def __next__(self) -> int:
        if self.current == 0:
            # Find the next word encoding something; zero words only move base.
            segment = self.segment
            for idx in range(self.curr_idx + 1, len(segment)):
                self.base += MODULUS
                self.curr_idx = idx
                if segment[idx]:
                    self.current = int(segment[idx])
                    break

        if self.current == 0:
            self.curr_idx = len(self.segment)
            raise StopIteration

        low = self.current & -self.current
        self.current ^= low
        return self.base + _OFFSETS[low.bit_length() - 1]
