# constants.py

"""
Application Constants

This module defines static configuration values for the game's framework:
window, palette, HUD layout and on-screen text. Tunable physics values live
in the 'simulation' section of config.json instead.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
- Colors are 6-hex-digit strings where they feed color interpolation,
  RGB tuples where they go straight to pygame.
"""

# Screen dimensions (initial; the window is resizable)
WIDTH = 480  # Pixels
HEIGHT = 800  # Pixels

# Framerate
FPS = 60  # Frames per second
MAX_STEPS_PER_FRAME = 5  # Upper bound on catch-up ticks after a stall

# Colors (RGB)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
DANGER_RED = (255, 0, 0)
GAUGE_COLOR = (0, 210, 255)
OVERLAY = (11, 14, 20, 170)

# Window Title
TITLE = "Rocket Escape"

# Sky gradient stops (ground level -> space)
SKY_TOP_GROUND = "#87CEEB"
SKY_TOP_SPACE = "#0B0E14"
SKY_BOTTOM_GROUND = "#E0F6FF"
SKY_BOTTOM_SPACE = "#1a1c2c"

# Particle colors
EXHAUST_COLOR = "#FF5F1F"
EXHAUST_HOT_COLOR = "#ffaa00"
EXPLOSION_COLOR = "#FF5F1F"

# Rocket sprite
ROCKET_WIDTH = 30  # Pixels
ROCKET_HEIGHT = 60  # Pixels
ROCKET_BODY_COLOR = (240, 240, 240)
ROCKET_TIP_COLOR = (255, 95, 31)
ROCKET_WINDOW_COLOR = (51, 51, 51)
ROCKET_TILT_FACTOR = 0.05  # Radians of tilt per unit of vertical velocity

# End-of-run presentation
OVERHEAT_TITLE = "BOOM! OVERHEATED"
OVERHEAT_TITLE_COLOR = "#ff3333"

# HUD layout
HUD_MARGIN = 20  # Pixels
GAUGE_WIDTH = 200  # Pixels
GAUGE_HEIGHT = 14  # Pixels
FONT_SIZE_LARGE = 64
FONT_SIZE_MEDIUM = 36
FONT_SIZE_SMALL = 24

# Text
START_HINT = "Click or press ENTER to launch"
BOOST_HINT = "Hold SPACE or mouse to boost"
RESTART_HINT = "ENTER: retry   S: share   T: title"
SHARE_TEMPLATE = "I reached {km} km in Rocket Escape! How far can you go?"
