"""
Canvas editing layer for the Shape Modeler.

This package provides:
- EditController: drag sessions, hit detection and snap preview
- build_scene: SVG rendering of the graph for the canvas
- setup_edit_handlers: NiceGUI mouse/keyboard bindings

Usage:
    from shape_modeler.edit import EditController, build_scene
    from shape_modeler.edit.handlers import setup_edit_handlers
"""

from shape_modeler.edit.constants import (
    VERTEX_HIT_RADIUS,
    EDGE_HOVER_TOLERANCE,
)
from shape_modeler.edit.controller import (
    DragSession,
    EditController,
    EditState,
    point_to_segment_distance,
)
from shape_modeler.edit.scene import build_scene

__all__ = [
    'DragSession',
    'EditController',
    'EditState',
    'point_to_segment_distance',
    'build_scene',
    'VERTEX_HIT_RADIUS',
    'EDGE_HOVER_TOLERANCE',
]
