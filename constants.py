# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or core physics settings that are not
part of the experimental configuration.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
WINDOW_CAPTION = "Particle Simulation"
FPS = 60
BACKGROUND_COLOR = (0, 0, 0) # Black
SHOW_HUD = True
HUD_TEXT_COLOR = (200, 200, 200)

# --- Physics Defaults ---
# Used whenever config.json does not override them.
# Downward acceleration in simulation-space units/s^2.
GRAVITY = -1.0
# Suggested per-second velocity decay. Only applied if configured as the
# "damping" parameter; the default damping of 1.0 keeps bounces lossless.
DAMPING_FACTOR = 0.99
NO_DAMPING = 1.0
# Perfectly elastic collisions with walls and other particles.
RESTITUTION = 1.0
# Shared by every particle, in simulation-space units.
PARTICLE_RADIUS = 0.05
DEFAULT_MASS = 1.0
# Approximately 60 frames per second.
DELTA_TIME = 0.016
# Centers closer than this are treated as coincident.
COLLISION_EPSILON = 1e-9

# Default initial velocity range for every axis.
DEFAULT_VELOCITY_MIN = (-0.05, -0.05)
DEFAULT_VELOCITY_MAX = (0.05, 0.05)
