# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Simulation class, which advances a ParticleSystem
by one time step: gravity, friction, motion, trails, wall reflection and
speed-based coloring for every particle, followed by pairwise collision
resolution.
"""
import logging
import numpy as np
from numba import jit
from typing import Tuple

from color import velocity_colors
from particle import Bounds, ParticleSystem, bounds_ready
from settings import ColorMode, SimulationSettings

# --- Data Contracts ---
#
# class Simulation:
#   - step(self, particles, settings, bounds, dt) -> int:
#     - Inputs:
#       - particles: The ParticleSystem to advance (mutated in place).
#       - settings: The SimulationSettings snapshot for this frame.
#       - bounds: (width, height) of the simulation area.
#       - dt: Elapsed time in seconds.
#     - Outputs: Number of colliding pairs resolved this step.
#     - Side Effects: Modifies positions, velocities, trails and (velocity
#       mode only) colors. A no-op when bounds are not ready.
#     - Invariants: Particle count remains constant. After the step every
#       particle satisfies radius <= x <= width - radius and likewise for y,
#       as far as the area is large enough to hold it.
#
# resolve_collisions(positions, velocities, radii, masses, elasticity) -> int:
#   - Exhaustive pairwise check over (i, j), i < j, in array order. Each
#     resolved pair is written back before the next pair is examined.


@jit(nopython=True)
def _resolve_collisions_numba(positions, velocities, radii, masses, elasticity):
    """
    Numba-jitted pairwise collision resolution.

    Every unordered pair is visited once in index order and resolved in
    place, so later pairs see the velocities and positions produced by
    earlier ones. Pairs that are already separating are left untouched.
    """
    particle_count = positions.shape[0]
    resolved = 0

    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            distance = np.sqrt(dx * dx + dy * dy)
            min_distance = radii[i] + radii[j]

            if distance >= min_distance:
                continue

            if distance == 0.0:
                # Coincident centres: the normal is undefined, push j along +x.
                nx = 1.0
                ny = 0.0
            else:
                nx = dx / distance
                ny = dy / distance

            # Relative velocity along the normal
            normal_velocity = (
                (velocities[j, 0] - velocities[i, 0]) * nx
                + (velocities[j, 1] - velocities[i, 1]) * ny
            )
            if normal_velocity > 0:
                continue

            impulse = -(1.0 + elasticity) * normal_velocity / (1.0 / masses[i] + 1.0 / masses[j])

            velocities[i, 0] -= impulse * nx / masses[i]
            velocities[i, 1] -= impulse * ny / masses[i]
            velocities[j, 0] += impulse * nx / masses[j]
            velocities[j, 1] += impulse * ny / masses[j]

            # Split the overlap evenly to stop the pair from sticking
            overlap = min_distance - distance
            separation_x = nx * overlap * 0.5
            separation_y = ny * overlap * 0.5
            positions[i, 0] -= separation_x
            positions[i, 1] -= separation_y
            positions[j, 0] += separation_x
            positions[j, 1] += separation_y

            resolved += 1

    return resolved


def resolve_collisions(positions: np.ndarray, velocities: np.ndarray, radii: np.ndarray,
                       masses: np.ndarray, elasticity: float) -> int:
    """Resolves all overlapping, approaching pairs in place."""
    if positions.shape[0] < 2:
        return 0
    return _resolve_collisions_numba(positions, velocities, radii, masses, float(elasticity))


def reflect_walls(positions: np.ndarray, velocities: np.ndarray, radii: np.ndarray,
                  bounds: Tuple[int, int], elasticity: float) -> None:
    """
    Clamps particles back inside the area and reflects their velocity.

    Each axis is handled independently, so a particle in a corner bounces
    off both walls in the same step. The left/top wall takes precedence
    over the right/bottom one.
    """
    for axis, limit in enumerate(bounds):
        coord = positions[:, axis]
        vel = velocities[:, axis]

        low = coord - radii < 0
        high = ~low & (coord + radii > limit)

        coord[low] = radii[low]
        vel[low] = np.abs(vel[low]) * elasticity
        coord[high] = limit - radii[high]
        vel[high] = -np.abs(vel[high]) * elasticity


class Simulation:
    """
    Advances the particle system using semi-implicit Euler integration and
    impulse-based collision response.
    """
    def __init__(self):
        self.last_collision_count = 0
        logging.info("Simulation logic initialized.")

    def step(self, particles: ParticleSystem, settings: SimulationSettings,
             bounds: Bounds, dt: float) -> int:
        """
        Executes one time step of the simulation.
        """
        if not bounds_ready(bounds):
            return 0

        if len(particles) > 0:
            self._integrate(particles, settings, bounds, dt)

        # Collisions run on the already integrated state
        self.last_collision_count = resolve_collisions(
            particles.positions, particles.velocities,
            particles.radii, particles.masses, settings.elasticity
        )
        return self.last_collision_count

    def _integrate(self, particles: ParticleSystem, settings: SimulationSettings,
                   bounds: Tuple[int, int], dt: float) -> None:
        velocities = particles.velocities

        # 1. Gravity acts on the vertical axis only
        velocities[:, 1] += settings.gravity * dt

        # 2. Exponential friction decay, independent of the frame rate
        decay = np.power(1.0 - settings.friction, dt)
        velocities *= decay

        # 3. Update positions with the new velocities
        particles.positions += velocities * dt

        # 4. Trails sample the integrated position, before wall clamping
        if settings.show_trails:
            particles.record_trails()
        else:
            particles.clear_trails()

        # 5. Reflect off the walls
        reflect_walls(particles.positions, velocities, particles.radii, bounds, settings.elasticity)

        # 6. Speed-based coloring is refreshed every frame
        if settings.color_mode is ColorMode.VELOCITY:
            particles.colors[:] = velocity_colors(velocities, settings.max_speed)
