import numpy as np


def place(system, settings, bounds, positions, velocities, radius=5.0):
    """Builds a population with exact positions, velocities and radii."""
    positions = np.asarray(positions, dtype=np.float64)
    system.initialize(len(positions), bounds, settings.with_changes(particle_size=radius))
    system.positions[:] = positions
    system.velocities[:] = np.asarray(velocities, dtype=np.float64)
    system.radii[:] = radius
    system.masses[:] = np.pi * radius * radius
    return system
