"""
Shared constants for the planar graph model.

The preset coordinates are in canvas pixels.
"""

# Distance in pixels below which a dragged vertex snaps onto another vertex
SNAP_DISTANCE = 10

# Default grid spacing in pixels for dragged positions
DEFAULT_GRID_SIZE = 50

# Smallest cycle that produces a fill polygon
MIN_CYCLE_LENGTH = 3

# Presets
LINE_PRESET = ((100, 100), (200, 200))
RECTANGLE_PRESET = ((150, 150), (350, 150), (350, 300), (150, 300))
POLYGON_SIDES = 5
POLYGON_RADIUS = 80
POLYGON_CENTER = (300, 200)
