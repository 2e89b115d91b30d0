"""
Edit Controller - translates pointer events into Graph Store mutations.

The controller owns the only transient editing state: the current drag
session. A session captures the dragged item's anchor positions when the
pointer goes down; each move applies anchor + pointer delta through the
store's grid-rounding drag entry points. Vertex drags also track a snap
target, which only changes what is displayed until the pointer is released,
when the dragged vertex is merged into it.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from shape_modeler.graph import GraphStore, SNAP_DISTANCE, find_nearest_within, find_snap_target
from shape_modeler.graph.geometry import translate
from shape_modeler.edit.constants import VERTEX_HIT_RADIUS, EDGE_HOVER_TOLERANCE

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

VERTEX = 'vertex'
EDGE = 'edge'


@dataclass
class DragSession:
    """Lives from pointer down to pointer up on one vertex or edge."""
    kind: str
    item_id: int
    start: Point
    anchors: Tuple[Point, ...]
    snap_target: Optional[int] = None


@dataclass(frozen=True)
class EditState:
    """Immutable snapshot of current edit state."""
    mouse_x: float = 0
    mouse_y: float = 0
    dragging_kind: Optional[str] = None
    dragging_id: Optional[int] = None
    snap_target: Optional[int] = None


def point_to_segment_distance(point: Point, line_start: Point, line_end: Point) -> Tuple[float, float]:
    """Distance from point to the segment and the clamped projection parameter t."""
    px, py = point
    x1, y1 = line_start
    x2, y2 = line_end
    dx, dy = x2 - x1, y2 - y1

    if dx == 0 and dy == 0:
        return math.hypot(px - x1, py - y1), 0.0

    t = max(0.0, min(1.0, ((px - x1) * dx + (py - y1) * dy) / (dx * dx + dy * dy)))
    closest_x, closest_y = x1 + t * dx, y1 + t * dy
    return math.hypot(px - closest_x, py - closest_y), t


class EditController:
    """Pointer-event front end for a GraphStore."""

    def __init__(self, store: GraphStore, snap_distance: float = SNAP_DISTANCE):
        self.store = store
        self._snap_distance = SNAP_DISTANCE
        self.snap_distance = snap_distance
        self._session: Optional[DragSession] = None
        self._state = EditState()
        self._on_state_change: Optional[Callable[[EditState], None]] = None

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def snap_distance(self) -> float:
        return self._snap_distance

    @snap_distance.setter
    def snap_distance(self, value: float) -> None:
        if value is None or not math.isfinite(value) or value < 0:
            raise ValueError(f"Snap distance must be a finite non-negative number, got {value!r}")
        self._snap_distance = float(value)

    def set_on_state_change(self, callback: Callable[[EditState], None]):
        self._on_state_change = callback

    # --- Hit detection ---

    def find_vertex_at(self, point: Point) -> Optional[int]:
        return find_nearest_within(self.store.positions(), point, VERTEX_HIT_RADIUS)

    def find_edge_at(self, point: Point) -> Optional[int]:
        closest = None
        closest_dist = float('inf')

        for edge in self.store.edges():
            p1, p2 = self.store.edge_endpoints(edge.id)
            dist, _ = point_to_segment_distance(point, p1, p2)
            if dist < EDGE_HOVER_TOLERANCE and dist < closest_dist:
                closest_dist = dist
                closest = edge.id
        return closest

    # --- Pointer events ---

    def pointer_down(self, x: float, y: float) -> EditState:
        if self._session:
            self.cancel_drag()

        point = (x, y)
        vertex_id = self.find_vertex_at(point)
        if vertex_id is not None:
            self.store.select_vertex(vertex_id)
            self._session = DragSession(VERTEX, vertex_id, point, (self.store.position(vertex_id),))
        else:
            edge_id = self.find_edge_at(point)
            if edge_id is not None:
                edge = self.store.edge(edge_id)
                self.store.select_edge(edge_id)
                self._session = DragSession(
                    EDGE, edge_id, point,
                    (self.store.position(edge.v1), self.store.position(edge.v2)),
                )
            else:
                self.store.clear_selection()

        if self._session:
            logger.debug(f"Drag started on {self._session.kind} {self._session.item_id}")
        self._update_state(x, y)
        return self._state

    def pointer_move(self, x: float, y: float) -> EditState:
        session = self._session
        if session is None:
            self._update_state(x, y)
            return self._state

        dx, dy = x - session.start[0], y - session.start[1]
        if session.kind == VERTEX:
            self.store.drag_vertex(session.item_id, translate(session.anchors[0], dx, dy))
            target = find_snap_target(self.store, session.item_id, self._snap_distance)
            if target != session.snap_target:
                logger.debug(f"Snap target for vertex {session.item_id}: {target}")
            session.snap_target = target
        else:
            self.store.drag_edge(
                session.item_id,
                translate(session.anchors[0], dx, dy),
                translate(session.anchors[1], dx, dy),
            )

        self._update_state(x, y)
        return self._state

    def pointer_up(self) -> EditState:
        session = self._session
        self._session = None
        if session is None:
            return self._state

        if (session.kind == VERTEX and session.snap_target is not None
                and session.snap_target in self.store and session.item_id in self.store):
            self.store.merge_vertices(session.item_id, session.snap_target)
        else:
            self.store.refresh_fill()

        self._update_state(self._state.mouse_x, self._state.mouse_y)
        return self._state

    def cancel_drag(self) -> EditState:
        """Drop the session; the graph keeps its last applied positions."""
        if self._session:
            logger.debug(f"Drag cancelled on {self._session.kind} {self._session.item_id}")
            self._session = None
            self._update_state(self._state.mouse_x, self._state.mouse_y)
        return self._state

    def remove_selected(self) -> bool:
        self.cancel_drag()
        return self.store.remove_selected()

    # --- Display ---

    @property
    def snapping_vertex(self) -> Optional[int]:
        """Vertex currently shown on top of its snap target, if any."""
        session = self._session
        if session and session.kind == VERTEX and session.snap_target is not None:
            return session.item_id
        return None

    def display_positions(self) -> Dict[int, Point]:
        """Stored positions with the snap preview applied."""
        positions = self.store.positions()
        vertex_id = self.snapping_vertex
        if vertex_id is not None and self._session.snap_target in positions:
            positions[vertex_id] = positions[self._session.snap_target]
        return positions

    def _update_state(self, x: float, y: float) -> None:
        session = self._session
        self._state = replace(
            self._state,
            mouse_x=x, mouse_y=y,
            dragging_kind=session.kind if session else None,
            dragging_id=session.item_id if session else None,
            snap_target=session.snap_target if session else None,
        )
        if self._on_state_change:
            self._on_state_change(self._state)
