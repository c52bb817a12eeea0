# settings.py
"""
Tunable simulation parameters.

SimulationSettings is an immutable value object. The control surface never
edits it in place; every change produces a new instance which replaces the
old one wholesale between two frames.
"""
import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Tuple

from color import parse_color

# --- Data Contracts ---
#
# class SimulationSettings:
#   - Fields: particle_count, gravity, friction, elasticity, particle_size,
#     max_speed, show_trails, color_mode, base_color.
#   - Invariants: Frozen. color_mode is always a ColorMode and base_color an
#     RGB tuple after construction. Numeric ranges are NOT enforced; the
#     engine simulates whatever it is given.
#
#   - from_params(params: Dict[str, Any]) -> SimulationSettings:
#     - Inputs: The "simulation_parameters" section of config.json.
#     - Outputs: A new SimulationSettings; missing keys take the defaults.
#     - Side Effects: Logs a warning for unknown keys. Raises ValueError on
#       an invalid color_mode or base_color.


class ColorMode(str, Enum):
    SOLID = "solid"
    VELOCITY = "velocity"
    RANDOM = "random"


@dataclass(frozen=True)
class SimulationSettings:
    particle_count: int = 100
    gravity: float = 0.05
    friction: float = 0.01
    elasticity: float = 0.7
    particle_size: float = 5.0
    max_speed: float = 200.0
    show_trails: bool = True
    color_mode: ColorMode = ColorMode.VELOCITY
    base_color: Tuple[int, int, int] = (52, 152, 219)  # '#3498db'

    def __post_init__(self):
        # Normalize loosely typed inputs so the rest of the code can rely on them.
        object.__setattr__(self, 'color_mode', ColorMode(self.color_mode))
        object.__setattr__(self, 'base_color', parse_color(self.base_color))

    def with_changes(self, **changes: Any) -> "SimulationSettings":
        """Returns a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SimulationSettings":
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in params.items():
            if key in known:
                values[key] = value
            elif key != 'seed':
                logging.warning(f"Ignoring unknown simulation parameter '{key}'.")

        try:
            return cls(**values)
        except ValueError as e:
            msg = f"Configuration error: invalid simulation parameters ({e})."
            logging.critical(msg)
            raise ValueError(msg) from e

    def as_display_dict(self) -> Dict[str, Any]:
        """Flattens the settings for display in the control panel."""
        return {
            "particle_count": self.particle_count,
            "particle_size": self.particle_size,
            "max_speed": self.max_speed,
            "gravity": self.gravity,
            "friction": self.friction,
            "elasticity": self.elasticity,
            "color_mode": self.color_mode.value,
            "base_color": self.base_color,
            "show_trails": self.show_trails,
        }

