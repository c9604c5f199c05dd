# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework.
These are not expected to change between simulation runs. Per-run tunables
(particle count, radius, speeds) live in config.json instead.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
BACKGROUND = (255, 255, 255)

# Window Title
TITLE = "Elastic Gas Simulator"

# Particle palette. The config selects fill and stroke by index.
PALETTE = [
    (0, 79, 110),      # #004F6E
    (66, 166, 198),    # #42A6C6
    (240, 185, 73),    # #F0B949
    (245, 110, 71),    # #F56E47
]

# Outline drawn around every particle
STROKE_WIDTH = 2.0  # Pixels

# Explode button, drawn in the top-left corner of the window
BUTTON_RECT = (8, 8, 80, 24)  # x, y, width, height in pixels
BUTTON_COLOR = (0, 79, 110)
BUTTON_TEXT_COLOR = (255, 255, 255)
BUTTON_LABEL = "Explode"
