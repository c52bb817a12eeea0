# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which owns the live particle
population and stores it in NumPy arrays (one row per particle). It is the
only place particles are created or destroyed: bulk random creation on
initialization and growth, point insertion, and truncation on shrink.
"""
import logging
import math
from dataclasses import dataclass
from itertools import count as counter
from typing import Optional, Tuple

import numpy as np

from color import random_colors
from constants import DEFAULT_OPACITY, RADIUS_SCALE_RANGE, TRAIL_LENGTH
from settings import ColorMode, SimulationSettings

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, rng: Optional[np.random.Generator] = None):
#     - Inputs: A seedable random source. A fresh default_rng() is used if None.
#     - Side Effects: Creates an empty population.
#     - Invariants (hold after every public method):
#       - All arrays have the same first dimension N == len(self).
#       - self.ids is int64 (N,), unique, never reused.
#       - self.positions / self.velocities are float64 (N, 2).
#       - self.radii / self.masses / self.opacities are float64 (N,); masses > 0.
#       - self.colors is uint8 (N, 3).
#       - self.trails is float64 (N, TRAIL_LENGTH, 2); the valid samples of
#         particle i are the last self.trail_lengths[i] rows, oldest first.
#
#   - initialize(count, bounds, settings) -> None
#   - insert_at(x, y, count, settings, bounds) -> np.ndarray of new ids
#   - reconcile(target, bounds, settings) -> None
#     - Side Effects: All three are no-ops when bounds are missing or have
#       zero area. None of them raise.

Bounds = Optional[Tuple[int, int]]


@dataclass(frozen=True)
class Particle:
    """Read-only snapshot of one particle, for renderers and inspection."""
    id: int
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    mass: float
    color: Tuple[int, int, int]
    opacity: float
    trail: Tuple[Tuple[float, float], ...]


def bounds_ready(bounds: Bounds) -> bool:
    """True if bounds describe a drawable area."""
    if bounds is None:
        return False
    width, height = bounds
    return width > 0 and height > 0


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self._next_id = counter()

        self.ids = np.zeros(0, dtype=np.int64)
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.velocities = np.zeros((0, 2), dtype=np.float64)
        self.radii = np.zeros(0, dtype=np.float64)
        self.masses = np.zeros(0, dtype=np.float64)
        self.colors = np.zeros((0, 3), dtype=np.uint8)
        self.opacities = np.zeros(0, dtype=np.float64)
        self.trails = np.zeros((0, TRAIL_LENGTH, 2), dtype=np.float64)
        self.trail_lengths = np.zeros(0, dtype=np.int64)

    def __len__(self) -> int:
        return self.ids.shape[0]

    # --- Lifecycle ---

    def initialize(self, count: int, bounds: Bounds, settings: SimulationSettings) -> None:
        """
        Replaces the whole population with `count` randomly placed particles.

        Every existing particle is discarded, including ones added with
        insert_at.
        """
        if not bounds_ready(bounds):
            logging.debug("initialize skipped: simulation bounds not ready.")
            return

        count = max(int(count), 0)
        self._truncate(0)
        self._append(self._random_positions(count, bounds), settings)
        logging.info(
            f"ParticleSystem initialized with {count} particles "
            f"in a {bounds[0]}x{bounds[1]} area."
        )

    def insert_at(self, x: float, y: float, count: int, settings: SimulationSettings,
                  bounds: Bounds) -> np.ndarray:
        """
        Appends `count` particles positioned exactly at (x, y).

        The population may exceed settings.particle_count afterwards; the
        extras are kept until the next reconciliation drops them.

        Returns:
            np.ndarray: The ids of the new particles (empty if skipped).
        """
        if not bounds_ready(bounds) or count <= 0:
            return np.zeros(0, dtype=np.int64)

        positions = np.tile(np.array([x, y], dtype=np.float64), (count, 1))
        new_ids = self._append(positions, settings)
        logging.info(f"Inserted {count} particles at ({x:.1f}, {y:.1f}). Population: {len(self)}.")
        return new_ids

    def reconcile(self, target: int, bounds: Bounds, settings: SimulationSettings) -> None:
        """
        Grows or shrinks the population to exactly `target` particles.

        Growth uses random placement. Shrinking keeps the oldest particles
        and drops the newest first.
        """
        if not bounds_ready(bounds):
            logging.debug("reconcile skipped: simulation bounds not ready.")
            return

        current = len(self)
        target = max(int(target), 0)
        if current < target:
            self._append(self._random_positions(target - current, bounds), settings)
        elif current > target:
            self._truncate(target)
        else:
            return
        logging.info(f"Population reconciled from {current} to {target} particles.")

    # --- Trails ---

    def record_trails(self) -> None:
        """Pushes every particle's current position onto its trail."""
        if len(self) == 0:
            return
        self.trails[:, :-1] = self.trails[:, 1:]
        self.trails[:, -1] = self.positions
        np.minimum(self.trail_lengths + 1, TRAIL_LENGTH, out=self.trail_lengths)

    def clear_trails(self) -> None:
        self.trail_lengths.fill(0)

    def trail(self, index: int) -> np.ndarray:
        """Returns the (k, 2) trail of particle `index`, oldest sample first."""
        length = int(self.trail_lengths[index])
        return self.trails[index, TRAIL_LENGTH - length:]

    # --- Inspection ---

    def particle(self, index: int) -> Particle:
        x, y = self.positions[index]
        vx, vy = self.velocities[index]
        return Particle(
            id=int(self.ids[index]),
            x=float(x), y=float(y),
            vx=float(vx), vy=float(vy),
            radius=float(self.radii[index]),
            mass=float(self.masses[index]),
            color=tuple(int(c) for c in self.colors[index]),
            opacity=float(self.opacities[index]),
            trail=tuple((float(px), float(py)) for px, py in self.trail(index)),
        )

    def __iter__(self):
        for i in range(len(self)):
            yield self.particle(i)

    # --- Internals ---

    def _random_positions(self, count: int, bounds: Tuple[int, int]) -> np.ndarray:
        width, height = bounds
        return self.rng.uniform(low=[0, 0], high=[width, height], size=(count, 2))

    def _append(self, positions: np.ndarray, settings: SimulationSettings) -> np.ndarray:
        """Creates one particle per row of `positions` and appends them."""
        count = positions.shape[0]
        low, high = RADIUS_SCALE_RANGE
        radii = settings.particle_size * self.rng.uniform(low, high, size=count)
        velocities = (self.rng.random((count, 2)) - 0.5) * settings.max_speed

        if settings.color_mode is ColorMode.RANDOM:
            colors = random_colors(self.rng, count)
        else:
            # Velocity mode starts from the base color until the first frame.
            colors = np.tile(np.array(settings.base_color, dtype=np.uint8), (count, 1))

        new_ids = np.fromiter((next(self._next_id) for _ in range(count)), dtype=np.int64, count=count)

        self.ids = np.concatenate([self.ids, new_ids])
        self.positions = np.concatenate([self.positions, positions.astype(np.float64)])
        self.velocities = np.concatenate([self.velocities, velocities])
        self.radii = np.concatenate([self.radii, radii])
        self.masses = np.concatenate([self.masses, math.pi * radii * radii])
        self.colors = np.concatenate([self.colors, colors.reshape(count, 3)])
        self.opacities = np.concatenate([self.opacities, np.full(count, DEFAULT_OPACITY)])
        self.trails = np.concatenate([self.trails, np.zeros((count, TRAIL_LENGTH, 2))])
        self.trail_lengths = np.concatenate([self.trail_lengths, np.zeros(count, dtype=np.int64)])

        logging.debug(f"Created {count} particles. Population: {len(self)}.")
        return new_ids

    def _truncate(self, size: int) -> None:
        """Keeps only the first `size` particles."""
        self.ids = self.ids[:size].copy()
        self.positions = self.positions[:size].copy()
        self.velocities = self.velocities[:size].copy()
        self.radii = self.radii[:size].copy()
        self.masses = self.masses[:size].copy()
        self.colors = self.colors[:size].copy()
        self.opacities = self.opacities[:size].copy()
        self.trails = self.trails[:size].copy()
        self.trail_lengths = self.trail_lengths[:size].copy()
