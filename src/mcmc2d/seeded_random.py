"""
Seeded pseudo-random number generator for reproducible sampling.

Uses the Mulberry32 algorithm: a 32-bit state advanced by a Weyl increment
and scrambled with two integer multiplies. All arithmetic is done on Python
ints masked to 32 bits, so a given seed reproduces the same sequence on
every platform.

Reference: https://github.com/bryc/code/blob/master/jshash/PRNGs.md
"""

import math
import time

_MASK32 = 0xFFFFFFFF
_WEYL_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a, b):
    """Low 32 bits of a 32x32-bit integer product."""
    return (a * b) & _MASK32


class SeededRandom:
    """
    Mulberry32 generator with uniform, Gaussian and exponential variates.

    Args:
        seed: Integer seed. Values outside [0, 2^32) are reduced modulo 2^32.
              If None, a seed is taken from the wall clock in milliseconds.
    """

    def __init__(self, seed=None):
        self.set_seed(seed)

    def set_seed(self, seed):
        """Set a new seed and reset the generator state."""
        if seed is None:
            seed = time.time_ns() // 1_000_000
        self._seed = int(seed)
        self._state = self._seed & _MASK32

    def get_seed(self):
        """Return the seed the generator was last reset with."""
        return self._seed

    @property
    def state(self):
        """Current 32-bit internal state."""
        return self._state

    def random(self):
        """Return a float uniformly distributed on [0, 1)."""
        self._state = (self._state + _WEYL_INCREMENT) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def randn(self):
        """Standard normal variate via the Box-Muller transform."""
        u1 = self.random()
        u2 = self.random()
        if u1 == 0.0:
            # Smallest non-zero Mulberry32 output; keeps log() finite
            u1 = 1.0 / _TWO_POW_32
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

    def uniform(self, low, high):
        """Float uniformly distributed on [low, high)."""
        return low + self.random() * (high - low)

    def exponential(self):
        """Exponential(1) variate, -log(1 - U)."""
        return -math.log(1.0 - self.random())

    def __repr__(self):
        return f"SeededRandom(seed={self._seed}, state={self._state:#010x})"
