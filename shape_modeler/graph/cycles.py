"""
Cycle detection and fill polygon construction.

The detector reports a single cycle: the first back edge met by a depth-first
search that starts from each unvisited vertex in store order and walks
neighbours in edge insertion order. NetworkX holds the undirected adjacency;
the search itself is hand-written so that the visiting order, and therefore
the reported cycle, is fully determined by the store contents.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from shape_modeler.graph.constants import MIN_CYCLE_LENGTH

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class FillPolygon:
    """Shaded region for one detected cycle."""
    cycle: Tuple[int, ...]
    points: Tuple[Point, ...]

    @classmethod
    def from_cycle(cls, cycle: Sequence[int], positions: Mapping[int, Point]) -> 'FillPolygon':
        return cls(cycle=tuple(cycle), points=tuple(tuple(positions[v]) for v in cycle))

    def reposition(self, positions: Mapping[int, Point]) -> 'FillPolygon':
        """Same cycle, points read again from the current positions."""
        return FillPolygon.from_cycle(self.cycle, positions)

    def contains_vertex(self, vertex_id: int) -> bool:
        return vertex_id in self.cycle


def build_adjacency(vertex_ids: Iterable[int], edge_pairs: Iterable[Tuple[int, int]]) -> nx.Graph:
    """
    Undirected adjacency for the current topology.

    Nodes keep store order and each node's neighbours keep the order of the
    first edge that connected them. Edges naming unknown vertices are ignored.
    """
    G = nx.Graph()
    G.add_nodes_from(vertex_ids)
    for v1, v2 in edge_pairs:
        if v1 in G and v2 in G:
            G.add_edge(v1, v2)
    return G


def find_first_cycle(adjacency: nx.Graph, order: Optional[Iterable[int]] = None) -> Optional[List[int]]:
    """
    Depth-first search with an explicit stack.

    Each frame is (vertex, parent, neighbour iterator). A neighbour equal to the
    parent is skipped; a visited neighbour still on the path closes a cycle,
    returned as the path slice from that neighbour to the top.
    """
    visited = set()
    for root in (order if order is not None else adjacency.nodes):
        if root in visited:
            continue
        visited.add(root)
        path = [root]
        on_path = {root: 0}
        stack = [(root, None, iter(adjacency.adj[root]))]

        while stack:
            current, parent, neighbors = stack[-1]
            descended = False
            for neighbor in neighbors:
                if neighbor == parent:
                    continue
                if neighbor in visited:
                    if neighbor in on_path:
                        return path[on_path[neighbor]:]
                    continue
                visited.add(neighbor)
                on_path[neighbor] = len(path)
                path.append(neighbor)
                stack.append((neighbor, current, iter(adjacency.adj[neighbor])))
                descended = True
                break
            if not descended:
                stack.pop()
                del on_path[path.pop()]
    return None


def detect_fill(positions: Mapping[int, Point],
                edge_pairs: Iterable[Tuple[int, int]],
                auto_fill: bool = True) -> Optional[FillPolygon]:
    """
    Find the fill polygon for the graph, or None.

    positions maps vertex id -> (x, y) in store order.
    """
    if not auto_fill or len(positions) < MIN_CYCLE_LENGTH:
        return None

    adjacency = build_adjacency(positions.keys(), edge_pairs)
    cycle = find_first_cycle(adjacency, positions.keys())
    if not cycle or len(cycle) < MIN_CYCLE_LENGTH:
        return None

    logger.debug(f"Cycle found through {len(cycle)} vertices: {cycle}")
    return FillPolygon.from_cycle(cycle, positions)
