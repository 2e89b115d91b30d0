"""
Planar graph model for the Shape Modeler.

This package provides:
- GraphStore: vertices, edges, merge, parametric edge edits and fill upkeep
- find_snap_target: merge candidate for a dragged vertex
- detect_fill / FillPolygon: first-cycle detection and its fill polygon
- presets: line, rectangle and regular polygon starters

Usage:
    from shape_modeler.graph import GraphStore, find_snap_target
"""

from shape_modeler.graph.constants import SNAP_DISTANCE, DEFAULT_GRID_SIZE, MIN_CYCLE_LENGTH
from shape_modeler.graph.errors import GraphError, InvalidReference
from shape_modeler.graph.cycles import FillPolygon, build_adjacency, detect_fill, find_first_cycle
from shape_modeler.graph.snap import find_nearest_within, find_snap_target
from shape_modeler.graph.store import GraphStore, Vertex, Edge, Selection
from shape_modeler.graph.presets import add_line, add_rectangle, add_polygon

__all__ = [
    'GraphStore',
    'Vertex',
    'Edge',
    'Selection',
    'FillPolygon',
    'GraphError',
    'InvalidReference',
    'build_adjacency',
    'detect_fill',
    'find_first_cycle',
    'find_nearest_within',
    'find_snap_target',
    'add_line',
    'add_rectangle',
    'add_polygon',
    'SNAP_DISTANCE',
    'DEFAULT_GRID_SIZE',
    'MIN_CYCLE_LENGTH',
]
