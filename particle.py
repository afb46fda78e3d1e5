# particle.py
"""
Manages the state of all particles and attractors in the simulation.

This module defines the ParticleSystem class, which owns the particle
positions, velocities, and the shared random stream, and the AttractorSet
class, a growable buffer of attractor points with a live count. All
coordinate data is stored in NumPy arrays of shape (count, 2).
"""
import logging
import numpy as np
from typing import Sequence, Tuple
from constants import CLUSTER_STD, INIT_SPAN, MIN_ATTRACTOR_CAPACITY
from rng import RandomSource

# --- Data Contracts ---
#
# class ParticleSystem:
#   - reset(self, particle_count: int, seed: int) -> None:
#     - Inputs:
#       - particle_count: number of particles, floored to 1.
#       - seed: master seed for the shared random stream.
#     - Side Effects: Replaces the random stream with a fresh one seeded
#       from `seed`, redraws every position, zeroes every velocity.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#
# class AttractorSet:
#   - ensure_capacity(self, needed: int) -> None:
#     - Side Effects: May replace self.buffer with a larger one. Live points
#       keep their order and values.
#     - Invariants: capacity is 0 or MIN_ATTRACTOR_CAPACITY * 2**k.
#
#   - reset_to_clusters(self, count, centers, rng) -> None
#   - clear(self) -> None
#   - append(self, points: np.ndarray) -> None
#   - Invariants: 0 <= self.count <= self.capacity. Rows at index >= count
#     are stale and must never be read.


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, particle_count: int, seed: int):
        self.particle_count = 0
        self.seed = 0
        self.rng = RandomSource(0)
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.velocities = np.zeros((0, 2), dtype=np.float64)
        self.reset(particle_count, seed)

    def reset(self, particle_count: int, seed: int) -> None:
        """
        Reseeds the random stream and scatters particles over the domain.

        Args:
            particle_count (int): Number of particles. Values below 1 are
                raised to 1.
            seed (int): Seed for the shared random stream.
        """
        if particle_count < 1:
            logging.warning(f"particle_count {particle_count} is invalid, using 1.")
            particle_count = 1
        self.particle_count = int(particle_count)
        self.seed = int(seed)

        # Rule 12: All randomness is controlled by a single master seed.
        self.rng = RandomSource(self.seed)

        # Draw order is x then y for each particle in turn.
        draws = self.rng.uniform_array(2 * self.particle_count)
        self.positions = ((draws - 0.5) * INIT_SPAN).reshape(self.particle_count, 2)
        self.velocities = np.zeros((self.particle_count, 2), dtype=np.float64)

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles (seed {self.seed})."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )


class AttractorSet:
    """
    Growable set of attractor points with amortized doubling growth.
    """
    def __init__(self):
        self.buffer = np.zeros((0, 2), dtype=np.float64)
        self.count = 0

    @property
    def capacity(self) -> int:
        return self.buffer.shape[0]

    @property
    def points(self) -> np.ndarray:
        """Read-only view of the live attractor rows."""
        view = self.buffer[:self.count]
        view.flags.writeable = False
        return view

    def ensure_capacity(self, needed: int) -> None:
        if self.capacity >= needed:
            return
        new_capacity = max(MIN_ATTRACTOR_CAPACITY, self.capacity)
        while new_capacity < needed:
            new_capacity *= 2
        grown = np.zeros((new_capacity, 2), dtype=np.float64)
        grown[:self.count] = self.buffer[:self.count]
        logging.debug(f"Attractor capacity grown {self.capacity} -> {new_capacity}.")
        self.buffer = grown

    def append(self, points: np.ndarray) -> None:
        added = points.shape[0]
        self.ensure_capacity(self.count + added)
        self.buffer[self.count:self.count + added] = points
        self.count += added

    def clear(self) -> None:
        # Stale rows stay in the buffer; only the live count changes.
        self.count = 0

    def reset_to_clusters(
        self, count: int, centers: Sequence[Tuple[float, float]], rng: RandomSource
    ) -> None:
        """
        Replaces the set with Gaussian blobs around `centers`.

        Points are split evenly across the centers; the last center also
        receives the remainder of the integer division.
        """
        count = max(0, int(count))
        num_centers = len(centers)
        self.ensure_capacity(count)
        per_center = count // num_centers
        k = 0
        for c, (cx, cy) in enumerate(centers):
            group = count - per_center * (num_centers - 1) if c == num_centers - 1 else per_center
            for _ in range(group):
                self.buffer[k, 0] = cx + CLUSTER_STD * rng.normal()
                self.buffer[k, 1] = cy + CLUSTER_STD * rng.normal()
                k += 1
        self.count = count
        logging.info(f"Attractors reset to {count} points around {num_centers} clusters.")
