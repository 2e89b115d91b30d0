"""
Graph Store - single owner of the modeler's vertices, edges and fill.

Vertices and edges live in dicts keyed by integer ids handed out by
per-store counters; edges refer to vertices by id only. Every public
mutation runs to completion before returning:

    position change -> sync_edges(vertex) -> fill reposition
    topology change -> sync_edges(...)    -> fill rebuild

and then fires the on_change callback once.

Dragged positions go through drag_vertex / drag_edge, which round to the
grid before storing. Direct edits (move_vertex, set_edge_length,
set_edge_angle) store exactly what they are given.
"""

import itertools
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from shape_modeler.graph import geometry
from shape_modeler.graph.constants import DEFAULT_GRID_SIZE
from shape_modeler.graph.cycles import FillPolygon, detect_fill
from shape_modeler.graph.errors import GraphError, InvalidReference

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

VERTEX = 'vertex'
EDGE = 'edge'


@dataclass(frozen=True)
class Vertex:
    id: int
    x: float
    y: float

    @property
    def position(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class Edge:
    id: int
    v1: int
    v2: int

    def touches(self, vertex_id: int) -> bool:
        return self.v1 == vertex_id or self.v2 == vertex_id


@dataclass(frozen=True)
class Selection:
    kind: str
    id: int


class GraphStore:
    """Owns the planar graph and keeps edge geometry and the fill current."""

    def __init__(self, grid_size: float = DEFAULT_GRID_SIZE, auto_fill: bool = True):
        self._vertices: Dict[int, Vertex] = {}
        self._edges: Dict[int, Edge] = {}
        # Rendered endpoint coordinates per edge, maintained by sync_edges
        self._endpoints: Dict[int, Tuple[Point, Point]] = {}
        self._vertex_ids = itertools.count(1)
        self._edge_ids = itertools.count(1)
        self._grid_size = DEFAULT_GRID_SIZE
        self.grid_size = grid_size
        self._auto_fill = auto_fill
        self._fill: Optional[FillPolygon] = None
        self._selection: Optional[Selection] = None
        self._on_change: Optional[Callable[['GraphStore'], None]] = None

    # --- Configuration ---

    @property
    def grid_size(self) -> float:
        return self._grid_size

    @grid_size.setter
    def grid_size(self, value: float) -> None:
        if value is None or not math.isfinite(value) or value <= 0:
            raise ValueError(f"Grid size must be a positive number, got {value!r}")
        self._grid_size = float(value)

    @property
    def auto_fill(self) -> bool:
        return self._auto_fill

    def set_auto_fill(self, enabled: bool) -> None:
        self._auto_fill = bool(enabled)
        self._rebuild_fill()
        self._notify()

    def set_on_change(self, callback: Optional[Callable[['GraphStore'], None]]) -> None:
        self._on_change = callback

    def quantize(self, point: Point) -> Point:
        """Round a point to the nearest grid intersection."""
        return geometry.quantize_point(point, self._grid_size)

    # --- Queries ---

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id) -> bool:
        return vertex_id in self._vertices

    def vertices(self) -> List[Vertex]:
        return list(self._vertices.values())

    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def has_edge(self, edge_id: int) -> bool:
        return edge_id in self._edges

    def vertex(self, vertex_id: int) -> Vertex:
        return self._require_vertex(vertex_id, 'vertex')

    def edge(self, edge_id: int) -> Edge:
        return self._require_edge(edge_id, 'edge')

    def position(self, vertex_id: int) -> Point:
        return self._require_vertex(vertex_id, 'position').position

    def positions(self) -> Dict[int, Point]:
        """Vertex id -> (x, y), in creation order."""
        return {vid: v.position for vid, v in self._vertices.items()}

    def edge_endpoints(self, edge_id: int) -> Tuple[Point, Point]:
        self._require_edge(edge_id, 'edge_endpoints')
        return self._endpoints[edge_id]

    def edges_of(self, vertex_id: int) -> List[Edge]:
        self._require_vertex(vertex_id, 'edges_of')
        return [e for e in self._edges.values() if e.touches(vertex_id)]

    @property
    def fill(self) -> Optional[FillPolygon]:
        return self._fill

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the graph for renderers and exporters."""
        edges = []
        for edge in self._edges.values():
            (x1, y1), (x2, y2) = self._endpoints[edge.id]
            edges.append({'id': edge.id, 'v1': edge.v1, 'v2': edge.v2,
                          'x1': x1, 'y1': y1, 'x2': x2, 'y2': y2})
        return {
            'vertices': [{'id': v.id, 'x': v.x, 'y': v.y} for v in self._vertices.values()],
            'edges': edges,
            'fill': [list(p) for p in self._fill.points] if self._fill else None,
        }

    # --- Vertex and edge lifecycle ---

    def create_vertex(self, position: Point) -> int:
        vertex_id = next(self._vertex_ids)
        self._vertices[vertex_id] = Vertex(vertex_id, float(position[0]), float(position[1]))
        logger.debug(f"Created vertex {vertex_id} at {position}")
        self._rebuild_fill()
        self._notify()
        return vertex_id

    def create_edge(self, v1: int, v2: int) -> int:
        self._require_vertex(v1, 'create_edge')
        self._require_vertex(v2, 'create_edge')
        if v1 == v2:
            raise GraphError(f"Edge would be a self-loop on vertex {v1}", 'create_edge')

        edge_id = next(self._edge_ids)
        self._edges[edge_id] = Edge(edge_id, v1, v2)
        self._endpoints[edge_id] = (self._vertices[v1].position, self._vertices[v2].position)
        logger.debug(f"Created edge {edge_id} ({v1} -> {v2})")
        self._rebuild_fill()
        self._notify()
        return edge_id

    def remove_vertex(self, vertex_id: int) -> None:
        self._require_vertex(vertex_id, 'remove_vertex')
        attached = [eid for eid, e in self._edges.items() if e.touches(vertex_id)]
        for edge_id in attached:
            self._drop_edge(edge_id)
        del self._vertices[vertex_id]
        if self._selection == Selection(VERTEX, vertex_id):
            self._selection = None
        logger.debug(f"Removed vertex {vertex_id} and {len(attached)} edges")
        self._rebuild_fill()
        self._notify()

    def remove_edge(self, edge_id: int) -> None:
        self._require_edge(edge_id, 'remove_edge')
        self._drop_edge(edge_id)
        logger.debug(f"Removed edge {edge_id}")
        self._rebuild_fill()
        self._notify()

    def remove_selected(self) -> bool:
        """Remove whatever is selected. Returns False when nothing was."""
        selection = self._selection
        if selection is None:
            return False
        if selection.kind == VERTEX:
            self.remove_vertex(selection.id)
        else:
            self.remove_edge(selection.id)
        return True

    def clear(self) -> None:
        """Remove every vertex and edge. Ids are not recycled."""
        self._vertices.clear()
        self._edges.clear()
        self._endpoints.clear()
        self._selection = None
        self._fill = None
        self._notify()

    # --- Position changes ---

    def move_vertex(self, vertex_id: int, position: Point) -> None:
        self._require_vertex(vertex_id, 'move_vertex')
        self._place(vertex_id, position)
        self.sync_edges(vertex_id)
        self._reposition_fill((vertex_id,))
        self._notify()

    def drag_vertex(self, vertex_id: int, raw_position: Point) -> Point:
        """Move a vertex to the grid point nearest raw_position; returns the stored position."""
        position = self.quantize(raw_position)
        self.move_vertex(vertex_id, position)
        return position

    def move_edge(self, edge_id: int, p1: Point, p2: Point) -> None:
        """Place both endpoints of an edge in one step."""
        edge = self._require_edge(edge_id, 'move_edge')
        self._place(edge.v1, p1)
        self._place(edge.v2, p2)
        self.sync_edges(edge.v1)
        self.sync_edges(edge.v2)
        self._reposition_fill((edge.v1, edge.v2))
        self._notify()

    def drag_edge(self, edge_id: int, raw_p1: Point, raw_p2: Point) -> Tuple[Point, Point]:
        p1, p2 = self.quantize(raw_p1), self.quantize(raw_p2)
        self.move_edge(edge_id, p1, p2)
        return p1, p2

    def sync_edges(self, vertex_id: int) -> None:
        """Copy the vertex position into the rendered endpoints of its edges."""
        position = self._require_vertex(vertex_id, 'sync_edges').position
        for edge in self._edges.values():
            if not edge.touches(vertex_id):
                continue
            p1, p2 = self._endpoints[edge.id]
            if edge.v1 == vertex_id:
                p1 = position
            if edge.v2 == vertex_id:
                p2 = position
            self._endpoints[edge.id] = (p1, p2)

    # --- Parametric edge edits ---

    def edge_length(self, edge_id: int) -> float:
        edge = self._require_edge(edge_id, 'edge_length')
        return geometry.segment_length(self._vertices[edge.v1].position, self._vertices[edge.v2].position)

    def edge_angle(self, edge_id: int) -> float:
        edge = self._require_edge(edge_id, 'edge_angle')
        return geometry.segment_angle(self._vertices[edge.v1].position, self._vertices[edge.v2].position)

    def set_edge_length(self, edge_id: int, length: float) -> Point:
        """Keep v1 and the current direction; move v2 to the given distance."""
        return self._place_far_end(edge_id, float(length), self.edge_angle(edge_id))

    def set_edge_angle(self, edge_id: int, angle_degrees: float) -> Point:
        """Keep v1 and the current length; rotate v2 to the given angle."""
        return self._place_far_end(edge_id, self.edge_length(edge_id), float(angle_degrees))

    def _place_far_end(self, edge_id: int, length: float, angle: float) -> Point:
        edge = self._edges[edge_id]
        position = geometry.polar_offset(self._vertices[edge.v1].position, length, angle)
        self._place(edge.v2, position)
        self.sync_edges(edge.v2)
        self._reposition_fill((edge.v2,))
        self._notify()
        return position

    # --- Merge ---

    def merge_vertices(self, source: int, target: int) -> None:
        """
        Collapse source into target.

        Edges are rewired to target, source is removed, edges that became
        self-loops are dropped, target's edges are resynced, a selection on
        source moves to target and the fill is rebuilt.
        """
        self._require_vertex(source, 'merge_vertices')
        self._require_vertex(target, 'merge_vertices')
        if source == target:
            raise GraphError(f"Cannot merge vertex {source} into itself", 'merge_vertices')

        for edge_id, edge in list(self._edges.items()):
            if edge.touches(source):
                self._edges[edge_id] = replace(
                    edge,
                    v1=target if edge.v1 == source else edge.v1,
                    v2=target if edge.v2 == source else edge.v2,
                )

        del self._vertices[source]

        loops = [eid for eid, e in self._edges.items() if e.v1 == e.v2]
        for edge_id in loops:
            self._drop_edge(edge_id)

        self.sync_edges(target)

        if self._selection == Selection(VERTEX, source):
            self._selection = Selection(VERTEX, target)

        logger.info(f"Merged vertex {source} into {target}, dropped {len(loops)} self-loops")
        self._rebuild_fill()
        self._notify()

    # --- Selection ---

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    @property
    def selected_vertex(self) -> Optional[int]:
        if self._selection and self._selection.kind == VERTEX:
            return self._selection.id
        return None

    @property
    def selected_edge(self) -> Optional[int]:
        if self._selection and self._selection.kind == EDGE:
            return self._selection.id
        return None

    def select_vertex(self, vertex_id: int) -> None:
        self._require_vertex(vertex_id, 'select_vertex')
        self._selection = Selection(VERTEX, vertex_id)
        self._notify()

    def select_edge(self, edge_id: int) -> None:
        self._require_edge(edge_id, 'select_edge')
        self._selection = Selection(EDGE, edge_id)
        self._notify()

    def clear_selection(self) -> None:
        if self._selection is not None:
            self._selection = None
            self._notify()

    def selected_edge_params(self) -> Optional[Dict[str, float]]:
        """Length (px) and angle (degrees) of the selected edge, if an edge is selected."""
        edge_id = self.selected_edge
        if edge_id is None:
            return None
        return {'length': self.edge_length(edge_id), 'angle': self.edge_angle(edge_id)}

    # --- Fill ---

    def refresh_fill(self) -> Optional[FillPolygon]:
        """Run cycle detection against the current graph and notify."""
        self._rebuild_fill()
        self._notify()
        return self._fill

    def _rebuild_fill(self) -> None:
        previous = self._fill
        self._fill = detect_fill(
            self.positions(),
            ((e.v1, e.v2) for e in self._edges.values()),
            auto_fill=self._auto_fill,
        )
        if self._fill and (previous is None or previous.cycle != self._fill.cycle):
            logger.info(f"Filled loop through vertices {list(self._fill.cycle)}")
        elif previous and self._fill is None:
            logger.info("Loop fill cleared")

    def _reposition_fill(self, moved: Iterable[int]) -> None:
        if self._fill is None:
            return
        if any(self._fill.contains_vertex(v) for v in moved):
            self._fill = self._fill.reposition(self.positions())

    # --- Internals ---

    def _place(self, vertex_id: int, position: Point) -> None:
        self._vertices[vertex_id] = Vertex(vertex_id, float(position[0]), float(position[1]))

    def _drop_edge(self, edge_id: int) -> None:
        del self._edges[edge_id]
        del self._endpoints[edge_id]
        if self._selection == Selection(EDGE, edge_id):
            self._selection = None

    def _require_vertex(self, vertex_id: int, operation: str) -> Vertex:
        vertex = self._vertices.get(vertex_id)
        if vertex is None:
            raise InvalidReference(VERTEX, vertex_id, operation)
        return vertex

    def _require_edge(self, edge_id: int, operation: str) -> Edge:
        edge = self._edges.get(edge_id)
        if edge is None:
            raise InvalidReference(EDGE, edge_id, operation)
        return edge

    def _notify(self) -> None:
        if self._on_change:
            self._on_change(self)
