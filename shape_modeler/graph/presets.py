"""
Starter shapes dropped onto the modeler canvas from the sidebar.
"""

import math
from typing import List, Sequence, Tuple

from shape_modeler.graph.constants import (
    LINE_PRESET,
    RECTANGLE_PRESET,
    POLYGON_SIDES,
    POLYGON_RADIUS,
    POLYGON_CENTER,
)
from shape_modeler.graph.store import GraphStore


def add_chain(store: GraphStore, points: Sequence[Tuple[float, float]], closed: bool = False) -> List[int]:
    """Create a vertex per point and connect consecutive vertices."""
    vertex_ids = [store.create_vertex(p) for p in points]
    for a, b in zip(vertex_ids, vertex_ids[1:]):
        store.create_edge(a, b)
    if closed and len(vertex_ids) > 2:
        store.create_edge(vertex_ids[-1], vertex_ids[0])
    return vertex_ids


def add_line(store: GraphStore) -> List[int]:
    return add_chain(store, LINE_PRESET)


def add_rectangle(store: GraphStore) -> List[int]:
    return add_chain(store, RECTANGLE_PRESET, closed=True)


def add_polygon(store: GraphStore, sides: int = POLYGON_SIDES, radius: float = POLYGON_RADIUS,
                center: Tuple[float, float] = POLYGON_CENTER) -> List[int]:
    """Regular polygon with its first vertex straight up from the center."""
    if sides < 3:
        raise ValueError(f"A polygon needs at least 3 sides, got {sides}")
    cx, cy = center
    points = []
    for i in range(sides):
        angle = (i * 2 * math.pi / sides) - math.pi / 2
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return add_chain(store, points, closed=True)
