# color.py
"""
Maps particle state and simulation settings to display colors.

Colors are handled as RGB triples of integers in 0..255. Batches of colors
are NumPy arrays of shape (N, 3) and dtype uint8, matching the layout of
ParticleSystem.colors.
"""
import numpy as np
from typing import Sequence, Tuple, Union

# --- Data Contracts ---
#
# parse_color(value) -> Tuple[int, int, int]:
#   - Inputs: '#rrggbb', '#rgb' or a sequence of three ints in 0..255.
#   - Outputs: An RGB tuple.
#   - Side Effects: None. Raises ValueError on anything else.
#
# velocity_colors(velocities, max_speed) -> np.ndarray:
#   - Inputs: (N, 2) float array of velocities, the configured max speed.
#   - Outputs: (N, 3) uint8 array on the blue -> purple -> red gradient.
#   - Invariants: Pure. Saturates at max_speed.
#
# random_colors(rng, count) -> np.ndarray:
#   - Inputs: a numpy Generator and a count.
#   - Outputs: (count, 3) uint8 array of uniformly random 24-bit colors.

RGB = Tuple[int, int, int]
ColorValue = Union[str, Sequence[int]]


def parse_color(value: ColorValue) -> RGB:
    """Converts a hex string or an RGB sequence to an RGB tuple."""
    if isinstance(value, str):
        text = value.strip().lstrip('#')
        if len(text) == 3:
            text = ''.join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"Invalid color string: {value!r}")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            raise ValueError(f"Invalid color string: {value!r}") from None

    try:
        channels = tuple(int(c) for c in value)
    except TypeError:
        raise ValueError(f"Invalid color value: {value!r}") from None
    if len(channels) != 3 or any(not 0 <= c <= 255 for c in channels):
        raise ValueError(f"Invalid color value: {value!r}")
    return channels


def to_hex(color: Sequence[int]) -> str:
    r, g, b = (int(c) for c in color)
    return f"#{r:02x}{g:02x}{b:02x}"


def velocity_colors(velocities: np.ndarray, max_speed: float) -> np.ndarray:
    """
    Computes the speed-based color of every particle.

    The normalized speed n = min(|v| / max_speed, 1) drives each channel:
    red rises from 0 to 255, green falls from 100 to 0 and blue falls from
    255 to 55 (never below 50).
    """
    vx = velocities[:, 0]
    vy = velocities[:, 1]
    speed = np.sqrt(vx * vx + vy * vy)
    if max_speed > 0:
        normalized = np.minimum(speed / max_speed, 1.0)
    else:
        # Any motion at all is "full speed" when the cap is zero.
        normalized = (speed > 0).astype(np.float64)

    # Non-finite speeds (e.g. from friction > 1) count as standing still
    normalized = np.nan_to_num(normalized, nan=0.0, posinf=1.0, neginf=0.0)

    colors = np.empty((velocities.shape[0], 3), dtype=np.uint8)
    colors[:, 0] = np.clip(np.floor(255 * normalized), 0, 255)
    colors[:, 1] = np.clip(np.floor(100 - normalized * 100), 0, 100)
    colors[:, 2] = np.clip(np.floor(255 - normalized * 200), 50, 255)
    return colors


def random_colors(rng: np.random.Generator, count: int) -> np.ndarray:
    """Draws `count` uniformly random 24-bit colors."""
    packed = rng.integers(0, 0x1000000, size=count)
    colors = np.empty((count, 3), dtype=np.uint8)
    colors[:, 0] = (packed >> 16) & 0xFF
    colors[:, 1] = (packed >> 8) & 0xFF
    colors[:, 2] = packed & 0xFF
    return colors
