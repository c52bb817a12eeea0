# controls.py
"""
The control surface's editing rules, independent of any UI toolkit.

The visualizer maps keys to the functions below. Each edit takes the
current SimulationSettings and returns a new one, which the host hands to
ParticleEngine.update_settings as a wholesale replacement.
"""
from decimal import Decimal
from typing import List

from constants import BASE_COLOR_PALETTE, CONTROL_RANGES
from settings import ColorMode, SimulationSettings

# --- Data Contracts ---
#
# step_setting(settings, name, direction) -> SimulationSettings:
#   - Inputs: Current settings, a key of CONTROL_RANGES, +1 or -1.
#   - Outputs: New settings with the field moved one step, clamped to its
#     range and snapped to the step grid. Raises KeyError for unknown names.
#
# toggle_trails / cycle_color_mode / cycle_base_color(settings) -> SimulationSettings


ADJUSTABLE_SETTINGS: List[str] = list(CONTROL_RANGES)
COLOR_MODE_ORDER = [ColorMode.SOLID, ColorMode.VELOCITY, ColorMode.RANDOM]


def _snap(value: float, minimum: float, step: float) -> float:
    # Decimal keeps steps like 0.01 from accumulating binary error
    steps = round((Decimal(str(value)) - Decimal(str(minimum))) / Decimal(str(step)))
    return float(Decimal(str(minimum)) + steps * Decimal(str(step)))


def step_setting(settings: SimulationSettings, name: str, direction: int) -> SimulationSettings:
    """Moves one numeric setting up (+1) or down (-1) by its step."""
    minimum, maximum, step = CONTROL_RANGES[name]
    current = getattr(settings, name)
    value = _snap(current + direction * step, minimum, step)
    value = min(max(value, minimum), maximum)

    if isinstance(step, int) and isinstance(minimum, int):
        value = int(round(value))
    return settings.with_changes(**{name: value})


def toggle_trails(settings: SimulationSettings) -> SimulationSettings:
    return settings.with_changes(show_trails=not settings.show_trails)


def cycle_color_mode(settings: SimulationSettings) -> SimulationSettings:
    index = COLOR_MODE_ORDER.index(settings.color_mode)
    return settings.with_changes(color_mode=COLOR_MODE_ORDER[(index + 1) % len(COLOR_MODE_ORDER)])


def cycle_base_color(settings: SimulationSettings) -> SimulationSettings:
    """Advances base_color to the next palette entry (the first if it is not in the palette)."""
    try:
        index = BASE_COLOR_PALETTE.index(settings.base_color)
    except ValueError:
        return settings.with_changes(base_color=BASE_COLOR_PALETTE[0])
    return settings.with_changes(base_color=BASE_COLOR_PALETTE[(index + 1) % len(BASE_COLOR_PALETTE)])
