# engine.py
"""
The simulation engine facade and its frame driver.

ParticleEngine owns the current SimulationSettings, the ParticleSystem, the
simulation bounds and the FrameDriver. A host (the pygame loop in main.py,
or a test) pushes bounds and settings into it and calls tick() once per
display refresh. Nothing here spawns threads or blocks; every call runs to
completion before returning.
"""
import logging
import numpy as np
from typing import Optional, Tuple

from constants import DEFAULT_INSERT_COUNT, MAX_DELTA_TIME
from particle import Bounds, ParticleSystem, bounds_ready
from settings import SimulationSettings
from simulation import Simulation

# --- Data Contracts ---
#
# class FrameDriver:
#   - next_delta(self, timestamp_ms: float) -> Optional[float]:
#     - Inputs: A monotonic host timestamp in milliseconds.
#     - Outputs: dt in seconds, clamped to [0, MAX_DELTA_TIME]; 0 on the
#       first call after construction or restart(); None once cancelled.
#
# class ParticleEngine:
#   - __init__(self, settings=None, bounds=None, rng=None)
#   - set_bounds(width, height) -> None
#   - update_settings(settings) -> None: atomic replacement; reconciles the
#     population when particle_count changed, or on the next set_bounds
#     with a usable area if the current one has none.
#   - reset() -> None: re-initializes from the current settings and bounds.
#   - insert_at(x, y, count=DEFAULT_INSERT_COUNT) -> np.ndarray of new ids
#   - tick(timestamp_ms) -> bool: advances one frame; False once cancelled.
#   - cancel() -> None: permanent; later ticks do nothing.
#   - Invariants: No method raises for missing bounds or odd settings; they
#     degrade to no-ops instead.


class FrameDriver:
    """
    Turns host timestamps into clamped simulation time steps.
    """
    def __init__(self, max_delta: float = MAX_DELTA_TIME):
        self.max_delta = max_delta
        self.last_timestamp: Optional[float] = None
        self.cancelled = False

    @property
    def running(self) -> bool:
        return not self.cancelled

    def restart(self) -> None:
        """Forgets the previous timestamp so the next frame uses dt = 0."""
        self.last_timestamp = None

    def cancel(self) -> None:
        self.cancelled = True

    def next_delta(self, timestamp_ms: float) -> Optional[float]:
        if self.cancelled:
            return None
        if self.last_timestamp is None:
            self.last_timestamp = timestamp_ms

        elapsed = (timestamp_ms - self.last_timestamp) / 1000.0
        self.last_timestamp = timestamp_ms
        return min(max(elapsed, 0.0), self.max_delta)


class ParticleEngine:
    """
    Owns the simulation state and exposes the operations a host needs.
    """
    def __init__(self, settings: Optional[SimulationSettings] = None,
                 bounds: Bounds = None, rng: Optional[np.random.Generator] = None):
        self.settings = settings if settings is not None else SimulationSettings()
        self.bounds: Tuple[int, int] = (0, 0)
        self.particles = ParticleSystem(rng)
        self.simulation = Simulation()
        self.driver = FrameDriver()
        self.last_delta = 0.0
        self.initialized = False
        self.reconcile_pending = False

        if bounds is not None:
            self.set_bounds(*bounds)

    @property
    def running(self) -> bool:
        return self.driver.running

    @property
    def ready(self) -> bool:
        return bounds_ready(self.bounds)

    def set_bounds(self, width: int, height: int) -> None:
        """Updates the simulation area, e.g. after a window resize."""
        new_bounds = (max(int(width), 0), max(int(height), 0))
        if new_bounds == self.bounds:
            return
        self.bounds = new_bounds
        logging.info(f"Simulation bounds set to {new_bounds[0]}x{new_bounds[1]}.")

        # The first usable area triggers the initial population.
        if not self.initialized and self.ready:
            self.reset()
        elif self.reconcile_pending and self.ready:
            self.reconcile_pending = False
            self.particles.reconcile(self.settings.particle_count, self.bounds, self.settings)

    def update_settings(self, settings: SimulationSettings) -> None:
        """Replaces the settings wholesale; the next tick sees the new values."""
        previous = self.settings
        self.settings = settings
        if settings == previous:
            return

        logging.info(f"Settings updated: {self._describe_changes(previous, settings)}.")
        if settings.particle_count != previous.particle_count:
            if self.ready:
                self.particles.reconcile(settings.particle_count, self.bounds, settings)
            elif self.initialized:
                # Applied once the area becomes usable again
                self.reconcile_pending = True

    def reset(self) -> None:
        """Discards every particle and rebuilds the population from settings."""
        if not self.ready:
            logging.debug("Reset deferred: simulation bounds not ready.")
            return
        self.particles.initialize(self.settings.particle_count, self.bounds, self.settings)
        self.initialized = True
        self.reconcile_pending = False
        self.driver.restart()

    def insert_at(self, x: float, y: float, count: int = DEFAULT_INSERT_COUNT) -> np.ndarray:
        return self.particles.insert_at(x, y, count, self.settings, self.bounds)

    def tick(self, timestamp_ms: float) -> bool:
        """
        Advances the simulation by the time elapsed since the previous tick.

        Returns:
            bool: False if the engine has been cancelled, True otherwise.
        """
        dt = self.driver.next_delta(timestamp_ms)
        if dt is None:
            return False

        self.last_delta = dt
        self.simulation.step(self.particles, self.settings, self.bounds, dt)
        return True

    def cancel(self) -> None:
        if self.driver.cancelled:
            return
        self.driver.cancel()
        logging.info("Particle engine cancelled; no further frames will be simulated.")

    @staticmethod
    def _describe_changes(old: SimulationSettings, new: SimulationSettings) -> str:
        old_values = old.as_display_dict()
        new_values = new.as_display_dict()
        changes = [
            f"{key}={new_values[key]}"
            for key in new_values
            if new_values[key] != old_values[key]
        ]
        return ", ".join(changes)
