# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover the fixed rules of the engine (trail capacity, time step
clamp) and the presentation defaults of the pygame host. Everything a
user can tune at runtime lives in SimulationSettings instead.
"""

# --- Engine ---
# Maximum number of positions kept in a particle's trail.
TRAIL_LENGTH = 10
# Upper bound on a single time step, in seconds. Large gaps between frames
# (e.g. after the window was dragged) are clamped to this value.
MAX_DELTA_TIME = 0.1
# Opacity assigned to every new particle. The renderer reads it, the
# engine never changes it.
DEFAULT_OPACITY = 0.8
# Number of particles created by a pointer click.
DEFAULT_INSERT_COUNT = 10
# Radius of a new particle as a fraction of particle_size.
RADIUS_SCALE_RANGE = (0.5, 1.0)

# --- Control Surface Ranges ---
# (minimum, maximum, step) for each numeric setting exposed by the control panel.
CONTROL_RANGES = {
    "particle_count": (10, 500, 10),
    "particle_size": (1, 20, 1),
    "max_speed": (50, 500, 10),
    "gravity": (-0.5, 0.5, 0.01),
    "friction": (0.0, 0.10, 0.01),
    "elasticity": (0.0, 1.0, 0.01),
}

# Visualization settings
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1280, 720)
UI_PANEL_WIDTH = 300
FPS = 60
BACKGROUND_COLOR = (17, 24, 39)  # Dark slate

# --- Visual Appeal Enhancements ---
# Trail polyline opacity (0-1) and width as a fraction of the radius.
TRAIL_ALPHA = 0.25
TRAIL_WIDTH_RATIO = 0.5
# Ratio of the glow size to the particle radius.
PARTICLE_GLOW_RATIO = 2
# Opacity (0-1) of the glow at its inner edge.
PARTICLE_GLOW_ALPHA = 0.25
# Alpha for the UI panel background
UI_BACKGROUND_ALPHA = 160

HINT_TEXT = "Click anywhere to add particles!"

# A curated list of base colors the control panel cycles through.
BASE_COLOR_PALETTE = [
    (52, 152, 219),  # Blue
    (231, 76, 60),   # Red
    (46, 204, 113),  # Green
    (241, 196, 15),  # Yellow
    (155, 89, 182),  # Purple
    (236, 240, 241)  # Light Gray
]
