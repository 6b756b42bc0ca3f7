"""
Modulo-30 wheel over the multiples of a number.

Responsibility: stepping from one multiple of num to the next multiple that
is coprime to 30. Nothing else.

For num = 7 starting at mult = 11 (i.e. 77), successive multipliers are
11, 13, 17, 19, 23, 29, 31, 37, 41, ... so the gaps are
14, 28, 14, 28, 42, 14, 42, 28, 14, ...
"""

import numpy as np
from numba import njit

NUM_DIFFS = 8

# WHEEL_GAPS[i] is the gap into the i-th residue of 7, 11, 13, 17, 19, 23, 29, 31
# from the residue before it (31 = 1 mod 30).
WHEEL_GAPS = np.array([6, 4, 2, 4, 2, 4, 6, 2], dtype=np.int64)

# mult % 30 -> position of that residue in the cycle above; -1 if mult shares
# a factor with 30.
_START_INDEX = np.full(30, -1, dtype=np.int64)
for _residue, _ix in ((1, 7), (7, 0), (11, 1), (13, 2), (17, 3), (19, 4), (23, 5), (29, 6)):
    _START_INDEX[_residue] = _ix
del _residue, _ix


def start_index(mult: int) -> int:
    """Convert a multiplier coprime to 30 into its cyclic wheel index."""
    ix = int(_START_INDEX[mult % 30])
    if ix < 0:
        raise ValueError(f"{mult} is not coprime to 30")
    return ix


@njit
def advance(num: int, ix: int):
    """Advance wheel index ix by one step; return (new index, gap scaled by num)."""
    ix += 1
    if ix == NUM_DIFFS:
        ix = 0
    return ix, WHEEL_GAPS[ix] * num


class Wheel30:
    """
    Cyclic gap source for the multiples of num that are coprime to 30.

    Parameters
    ----------
    num : int
        Base number whose multiples are generated.
    mult : int
        Starting multiplier (must be coprime to 30). The first multiple is
        num * mult; gaps returned by next_diff lead to the following ones.

    Notes
    -----
    The wheel never terminates; callers stop pulling when past their bound.
    """

    def __init__(self, num: int, mult: int):
        self.num = num
        self.index = start_index(mult)
        # The 8 gaps scaled by num, in cyclic order.
        self.diffs = WHEEL_GAPS * num

    def next_diff(self) -> int:
        """Return the gap to the next multiple and advance the wheel."""
        self.index += 1
        if self.index == NUM_DIFFS:
            self.index = 0
        return int(self.diffs[self.index])

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next_diff()

    def __repr__(self):
        return f"Wheel30(num={self.num}, index={self.index})"
