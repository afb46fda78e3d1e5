# workspace.py
"""
Scratch buffers for the drift kernel, reused across frames.

The buffers are a pure allocation cache: every element is written before it
is read inside a single velocity computation, so discarding them at any
time only costs a reallocation.
"""
import logging
import numpy as np
from typing import Optional, Tuple


class Workspace:
    """
    Size-keyed cache of the n x m kernel matrices and per-particle sums.
    """
    def __init__(self):
        self.shape: Optional[Tuple[int, int]] = None
        self.logits = np.empty((0, 0), dtype=np.float64)
        self.row_weights = np.empty((0, 0), dtype=np.float64)
        self.col_weights = np.empty((0, 0), dtype=np.float64)
        self.pos_mass = np.empty(0, dtype=np.float64)
        self.neg_mass = np.empty(0, dtype=np.float64)
        self.allocations = 0

    def ensure(self, n: int, m: int) -> bool:
        """
        Resizes the buffers to (n, m) if they are not already that size.

        Returns:
            bool: True if the buffers were reallocated.
        """
        if self.shape == (n, m):
            return False
        self.logits = np.empty((n, m), dtype=np.float64)
        self.row_weights = np.empty((n, m), dtype=np.float64)
        self.col_weights = np.empty((n, m), dtype=np.float64)
        self.pos_mass = np.empty(n, dtype=np.float64)
        self.neg_mass = np.empty(n, dtype=np.float64)
        self.shape = (n, m)
        self.allocations += 1
        logging.debug(f"Workspace reallocated for {n}x{m} affinity matrix.")
        return True

    def invalidate(self) -> None:
        self.shape = None
