"""
Snap resolver: picks the vertex a dragged vertex would merge into on drop.
"""

from typing import Mapping, Optional, Tuple

from shape_modeler.graph.geometry import distance

Point = Tuple[float, float]


def find_nearest_within(positions: Mapping[int, Point], point: Point,
                        threshold: float, exclude: Optional[int] = None) -> Optional[int]:
    """
    Id of the vertex nearest to point with distance strictly below threshold.

    positions must iterate in creation order; on equal distances the first
    vertex encountered wins.
    """
    closest = None
    closest_dist = float('inf')

    for vertex_id, pos in positions.items():
        if vertex_id == exclude:
            continue
        dist = distance(point, pos)
        if dist < threshold and dist < closest_dist:
            closest_dist = dist
            closest = vertex_id
    return closest


def find_snap_target(store, vertex_id: int, threshold: float) -> Optional[int]:
    """Snap target for a vertex being dragged, or None when nothing is in range."""
    return find_nearest_within(store.positions(), store.position(vertex_id), threshold, exclude=vertex_id)
