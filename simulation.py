# simulation.py
"""
Handles the core simulation logic and the integration step.

This module defines the Simulation class, which owns the particle system,
the attractor set, the kernel workspace and the brush editor, and advances
particle positions by one time step using the drift velocity field.

Concurrency: the Simulation object is the single owner of all mutable
state (particle buffer, attractor buffer, random stream). Steps and brush
edits are expected to run on one thread, one operation at a time. A port
that runs the kernel on a worker must hold one lock around every public
method of this class so an edit never observes a half-written buffer.
"""
import logging
import numpy as np
from typing import Any, Dict
from brush import BrushEditor, erase_in_radius, spray_add
from constants import (
    CLUSTER_CENTERS, DEFAULT_SIMULATION_PARAMS, MIN_BRUSH_RADIUS, TEMPERATURE_FLOOR
)
from coords import DEFAULT_BOUNDS, DomainBounds, Point
from drift import compute_velocity
from particle import AttractorSet, ParticleSystem
from rng import RandomSource
from workspace import Workspace

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, params: Dict[str, Any], bounds: DomainBounds = DEFAULT_BOUNDS):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int
#         - "particle_count": int
#         - "temperature": float
#         - "step_size": float
#         - "noise_scale": float
#         - "brush_radius": float
#         - "cluster_count": int
#         - "base_attractor_count": int
#         Missing keys fall back to DEFAULT_SIMULATION_PARAMS.
#     - Side Effects: Creates particles, then attractors, from the seed.
#
#   - step(self) -> None:
#     - Inputs: None (operates on internal state).
#     - Side Effects: Recomputes velocities, moves every particle, draws
#       2 * N normals from the shared stream, increments step_count.
#     - Invariants: Particle count remains constant. Particle positions
#       are clamped within the domain bounds.
#
#   - set_params(self, **params) -> None:
#     - Side Effects: Clamps and stores each value. particle_count and seed
#       trigger a particle reset; cluster_count and base_attractor_count
#       trigger an attractor reset. Other values apply on the next step.

_INT_PARAMS = ("seed", "particle_count", "cluster_count", "base_attractor_count")
_PARTICLE_RESET_KEYS = {"seed", "particle_count"}
_ATTRACTOR_RESET_KEYS = {"cluster_count", "base_attractor_count"}


def _sanitize(key: str, value: Any) -> Any:
    """
    Coerces a parameter to its type and clamps it to its valid range.

    Raises:
        KeyError: if `key` is not a simulation parameter.
    """
    if key not in DEFAULT_SIMULATION_PARAMS:
        raise KeyError(f"Unknown simulation parameter: {key}")

    value = int(value) if key in _INT_PARAMS else float(value)
    if key == "particle_count":
        clamped = max(1, value)
    elif key == "cluster_count":
        clamped = max(1, min(len(CLUSTER_CENTERS), value))
    elif key == "base_attractor_count":
        clamped = max(0, value)
    elif key == "temperature":
        clamped = max(TEMPERATURE_FLOOR, value)
    elif key == "brush_radius":
        clamped = max(MIN_BRUSH_RADIUS, value)
    elif key in ("step_size", "noise_scale"):
        clamped = max(0.0, value)
    else:
        clamped = value

    if clamped != value:
        logging.warning(f"Parameter {key}={value} out of range, clamped to {clamped}.")
    return clamped


class Simulation:
    """
    Owns the simulation state and advances it one frame at a time.
    """
    def __init__(self, params: Dict[str, Any], bounds: DomainBounds = DEFAULT_BOUNDS):
        """
        Initializes the simulation environment.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            bounds (DomainBounds): World rectangle for particles and attractors.
        """
        self.bounds = bounds
        self.params: Dict[str, Any] = {}
        for key, default in DEFAULT_SIMULATION_PARAMS.items():
            self.params[key] = _sanitize(key, params.get(key, default))

        self.step_count = 0
        self.mean_velocity = 0.0
        self.workspace = Workspace()
        self.attractors = AttractorSet()
        self.particles = ParticleSystem(self.params["particle_count"], self.params["seed"])
        self.brush = BrushEditor(self.attractors, self.params["brush_radius"], bounds)
        self.reset_attractors()

        logging.info("Simulation logic initialized and configuration validated.")

    # --- Configuration ---

    def get_params(self) -> Dict[str, Any]:
        return dict(self.params)

    def set_params(self, **params) -> None:
        updates = {key: _sanitize(key, value) for key, value in params.items()}
        changed = {key for key, value in updates.items() if self.params[key] != value}
        self.params.update(updates)
        self.brush.set_radius(self.params["brush_radius"])

        if changed:
            logging.info(f"Parameters updated: {', '.join(f'{k}={self.params[k]}' for k in sorted(changed))}")
        if changed & _PARTICLE_RESET_KEYS:
            self.reset_particles()
        # A new seed also regenerates the attractors from the fresh stream.
        if changed & (_ATTRACTOR_RESET_KEYS | {"seed"}):
            self.reset_attractors()

    @property
    def temperature(self) -> float:
        return self.params["temperature"]

    @property
    def step_size(self) -> float:
        return self.params["step_size"]

    @property
    def noise_scale(self) -> float:
        return self.params["noise_scale"]

    @property
    def rng(self) -> RandomSource:
        return self.particles.rng

    # --- Resets ---

    def reset_particles(self) -> None:
        self.particles.reset(self.params["particle_count"], self.params["seed"])
        self.step_count = 0
        self.mean_velocity = 0.0
        self.workspace.invalidate()

    def reset_attractors(self) -> None:
        centers = CLUSTER_CENTERS[:self.params["cluster_count"]]
        self.attractors.reset_to_clusters(self.params["base_attractor_count"], centers, self.rng)

    def reset(self) -> None:
        self.reset_particles()
        self.reset_attractors()

    def reset_seed(self, seed: int) -> None:
        """Reseeds the stream and regenerates particles and attractors, even for the current seed."""
        self.params["seed"] = _sanitize("seed", seed)
        logging.info(f"Resetting with seed {self.params['seed']}.")
        self.reset()

    def clear_attractors(self) -> None:
        self.attractors.clear()
        logging.info("Attractors cleared.")

    # --- Brush ---

    def spray_add(self, center: Point) -> int:
        return spray_add(self.attractors, center, self.params["brush_radius"], self.rng, self.bounds)

    def erase_in_radius(self, center: Point) -> int:
        return erase_in_radius(self.attractors, center, self.params["brush_radius"])

    # --- Dynamics ---

    def compute_velocity(self) -> float:
        """Fills particles.velocities with the drift field; returns mean |V|."""
        self.mean_velocity = compute_velocity(
            self.particles.positions, self.attractors.points, self.temperature,
            self.workspace, self.particles.velocities
        )
        return self.mean_velocity

    def step(self):
        """
        Executes one time step of the simulation.
        """
        # 1. Drift velocity from the current particles and attractors
        self.compute_velocity()

        # 2. Brownian noise, drawn x then y per particle. Drawn even when
        #    noise_scale is 0 so the stream position does not depend on it.
        n = self.particles.particle_count
        noise = self.rng.normal_array(2 * n).reshape(n, 2)

        # 3. Euler update
        pos = self.particles.positions
        pos += self.step_size * self.particles.velocities + self.noise_scale * noise

        # 4. Clamp to the domain
        np.clip(pos[:, 0], self.bounds.min_x, self.bounds.max_x, out=pos[:, 0])
        np.clip(pos[:, 1], self.bounds.min_y, self.bounds.max_y, out=pos[:, 1])

        self.step_count += 1

    @property
    def stats(self) -> Dict[str, Any]:
        """Return current simulation statistics."""
        return {
            "step": self.step_count,
            "mean_velocity": self.mean_velocity,
            "particle_count": self.particles.particle_count,
            "attractor_count": self.attractors.count,
            "attractor_capacity": self.attractors.capacity,
        }
