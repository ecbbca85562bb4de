"""
Seeded pseudo-random number generation.

A 32-bit xorshift generator gives the scheduler a reproducible stream of
numbers for tie-breaking, so the same seed always yields the same schedule.
"""
import math
import random
from typing import List, Sequence, TypeVar

T = TypeVar('T')

_MASK_32 = 0xFFFFFFFF
_TWO_POW_32 = 0x100000000


class SeededRandom:
    """
    Deterministic xorshift32 generator.

    Two instances built from the same seed produce identical sequences for
    the same sequence of calls.
    """

    def __init__(self, seed: int):
        """
        Initialize the generator.

        Args:
            seed: Integer seed, folded to 32 bits. Zero is remapped to 1
                since xorshift never leaves the all-zero state.
        """
        self.state = (int(seed) & _MASK_32) or 1

    def next(self) -> float:
        """Generate the next float in [0, 1)."""
        x = self.state
        x ^= (x << 13) & _MASK_32
        x ^= x >> 17
        x ^= (x << 5) & _MASK_32
        self.state = x
        return x / _TWO_POW_32

    def next_int(self, min_value: int, max_value: int) -> int:
        """Generate an integer in [min_value, max_value)."""
        return math.floor(self.next() * (max_value - min_value)) + min_value

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """
        Return a shuffled copy of a sequence (Fisher-Yates).

        The input is left untouched.
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return result


def generate_seed() -> int:
    """Generate a fresh random global seed."""
    return random.randrange(0x7FFFFFFF)


def hash_string(value: str) -> int:
    """
    Hash a string to a non-negative integer (``h = h * 31 + code``).

    Folds over UTF-16 code units with 32-bit signed wraparound, then takes the
    absolute value. Used to mint stable identifiers; not cryptographic.
    """
    h = 0
    units = value.encode('utf-16-le', 'surrogatepass')
    for i in range(0, len(units), 2):
        code = units[i] | (units[i + 1] << 8)
        h = (h * 31 + code) & _MASK_32
    if h >= 0x80000000:
        h -= _TWO_POW_32
    return abs(h)
