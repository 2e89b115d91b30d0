"""
Shared constants for the modeler canvas editing layer.

Distances are in canvas pixels.
"""

# Distance in pixels to pick a vertex under the pointer
VERTEX_HIT_RADIUS = 10

# Distance in pixels to detect edge hover
EDGE_HOVER_TOLERANCE = 6

# Rendering
VERTEX_RADIUS = 6
VERTEX_COLOR = '#e74c3c'
VERTEX_SNAP_COLOR = '#2ecc71'
VERTEX_SELECTED_STROKE = '#f1c40f'
EDGE_COLOR = '#f1c40f'
EDGE_SELECTED_COLOR = '#ffffff'
EDGE_WIDTH = 4
FILL_COLOR = 'rgba(52, 152, 219, 0.3)'
GRID_COLOR = '#333'
BACKGROUND_COLOR = '#252526'
