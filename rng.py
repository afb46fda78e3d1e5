# rng.py
"""
Deterministic pseudo-random source for the simulation.

Every consumer of randomness (particle initialization, cluster
perturbation, Brownian noise, brush sampling) draws from one shared
RandomSource that is threaded explicitly through each call site. The
sequence depends only on the seed and the order of draws.
"""
import math
import numpy as np

# --- Data Contracts ---
#
# class RandomSource:
#   - __init__(self, seed: int):
#     - Inputs: seed, reduced modulo 2**32.
#     - Side Effects: Initializes the 32-bit generator state.
#
#   - next(self) -> float:
#     - Outputs: uniform float in [0, 1).
#     - Side Effects: Advances the state by exactly one step.
#
#   - normal(self) -> float:
#     - Outputs: standard normal sample (Box-Muller, cosine branch).
#     - Side Effects: Advances the state by at least two steps. A draw of
#       exactly 0.0 is discarded and redrawn so log(0) never occurs.
#
#   - Invariants: identical seed and identical call sequence produce
#     identical outputs. The stream never ends; it restarts only when a
#     new RandomSource is created.

_MASK32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32x32-bit product."""
    return (a * b) & _MASK32


class RandomSource:
    """
    Mulberry32 generator with a Box-Muller normal sampler.
    """
    def __init__(self, seed: int):
        self.seed = int(seed) & _MASK32
        self.state = self.seed

    def next(self) -> float:
        self.state = (self.state + _GOLDEN_GAMMA) & _MASK32
        x = self.state
        x = _imul(x ^ (x >> 15), x | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & _MASK32
        return ((x ^ (x >> 14)) & _MASK32) / _TWO_POW_32

    def normal(self) -> float:
        u = 0.0
        while u == 0.0:
            u = self.next()
        v = 0.0
        while v == 0.0:
            v = self.next()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def uniform_array(self, count: int) -> np.ndarray:
        """Returns `count` successive next() draws."""
        return np.array([self.next() for _ in range(count)], dtype=np.float64)

    def normal_array(self, count: int) -> np.ndarray:
        """Returns `count` successive normal() draws, in draw order."""
        return np.array([self.normal() for _ in range(count)], dtype=np.float64)
