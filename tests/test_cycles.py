"""
Tests for cycle detection and the fill polygon.
"""

import random

import networkx as nx
import pytest

from shape_modeler.graph import (
    GraphStore,
    FillPolygon,
    add_rectangle,
    add_polygon,
    build_adjacency,
    detect_fill,
    find_first_cycle,
)


def recursive_first_cycle(adjacency, order):
    """Straightforward recursive search used as the reference ordering."""
    visited = set()
    path = []
    found = []

    def visit(current, parent):
        visited.add(current)
        path.append(current)
        for neighbor in adjacency.adj[current]:
            if neighbor == parent:
                continue
            if neighbor in visited:
                if neighbor in path:
                    found.append(path[path.index(neighbor):])
                    return True
            elif visit(neighbor, current):
                return True
        path.pop()
        return False

    for v in order:
        if v not in visited and visit(v, None):
            return found[0]
    return None


@pytest.fixture
def square():
    store = GraphStore(grid_size=10)
    corners = [(0, 0), (100, 0), (100, 100), (0, 100)]
    ids = [store.create_vertex(p) for p in corners]
    edges = [store.create_edge(ids[i], ids[(i + 1) % 4]) for i in range(4)]
    return store, ids, edges, corners


class TestSquare:
    def test_square_is_filled(self, square):
        """Test a closed square produces a fill in store order."""
        store, ids, edges, corners = square
        fill = store.fill
        assert fill is not None
        assert len(fill.points) == 4
        assert set(fill.points) == set(corners)
        assert set(fill.cycle) == set(ids)

    def test_removing_an_edge_clears_fill(self, square):
        """Test breaking the loop removes the fill."""
        store, ids, edges, corners = square
        store.remove_edge(edges[2])
        assert store.fill is None

    def test_points_follow_discovery_order(self, square):
        """Test fill points are listed in the order the search found them."""
        store, ids, edges, corners = square
        fill = store.fill
        positions = store.positions()
        assert list(fill.points) == [positions[v] for v in fill.cycle]

    def test_refresh_is_idempotent(self, square):
        """Test refreshing an unchanged graph keeps the same fill."""
        store, ids, edges, corners = square
        first = store.refresh_fill()
        second = store.refresh_fill()
        assert first == second
        assert store.fill == first

    def test_moving_cycle_vertex_repositions_points(self, square):
        """Test moving a loop vertex moves the matching fill corner."""
        store, ids, edges, corners = square
        cycle = store.fill.cycle
        store.move_vertex(ids[2], (150, 120))
        assert store.fill.cycle == cycle
        assert (150, 120) in store.fill.points
        assert (100, 100) not in store.fill.points

    def test_moving_outside_vertex_leaves_fill_alone(self, square):
        """Test moving a vertex outside the loop keeps the fill as is."""
        store, ids, edges, corners = square
        extra = store.create_vertex((300, 300))
        store.create_edge(ids[0], extra)
        fill = store.fill
        store.move_vertex(extra, (400, 400))
        assert store.fill == fill

    def test_auto_fill_toggle(self, square):
        """Test turning auto-fill off clears the fill and on restores it."""
        store, ids, edges, corners = square
        store.set_auto_fill(False)
        assert store.fill is None
        store.move_vertex(ids[0], (10, 10))
        assert store.fill is None
        store.set_auto_fill(True)
        assert store.fill is not None
        assert (10, 10) in store.fill.points


class TestDetection:
    def test_fewer_than_three_vertices(self):
        """Test graphs with fewer than three vertices never fill."""
        assert detect_fill({1: (0, 0), 2: (1, 1)}, [(1, 2), (2, 1)]) is None

    def test_tree_has_no_fill(self):
        """Test an acyclic graph has no fill."""
        positions = {1: (0, 0), 2: (10, 0), 3: (20, 0), 4: (10, 10)}
        assert detect_fill(positions, [(1, 2), (2, 3), (2, 4)]) is None

    def test_parallel_edges_do_not_make_a_cycle(self):
        """Test a doubled edge between two vertices is not a loop."""
        positions = {1: (0, 0), 2: (10, 0), 3: (20, 0)}
        assert detect_fill(positions, [(1, 2), (2, 1), (2, 3)]) is None

    def test_triangle_with_parallel_edge(self):
        """Test a triangle still fills when one side is doubled."""
        positions = {1: (0, 0), 2: (10, 0), 3: (5, 8)}
        fill = detect_fill(positions, [(1, 2), (1, 2), (2, 3), (3, 1)])
        assert fill == FillPolygon(cycle=(1, 2, 3), points=((0, 0), (10, 0), (5, 8)))

    def test_disabled(self):
        """Test detect_fill returns nothing when auto-fill is off."""
        positions = {1: (0, 0), 2: (10, 0), 3: (5, 8)}
        assert detect_fill(positions, [(1, 2), (2, 3), (3, 1)], auto_fill=False) is None

    def test_only_first_of_several_cycles_is_filled(self):
        """Test only the first loop found is filled."""
        store = GraphStore()
        first = add_rectangle(store)
        add_polygon(store, center=(600, 400))
        assert store.fill.cycle == tuple(first)

    def test_cycle_in_later_component(self):
        """Test a loop in a later component is still found."""
        positions = {1: (0, 0), 2: (10, 0), 3: (0, 50), 4: (10, 50), 5: (5, 60)}
        fill = detect_fill(positions, [(1, 2), (3, 4), (4, 5), (5, 3)])
        assert fill.cycle == (3, 4, 5)

    def test_tail_is_not_part_of_cycle(self):
        """Test a dangling chain is left out of the loop."""
        # 1 - 2 - 3 - 4 - 2 : vertex 1 hangs off the triangle 2-3-4
        adjacency = build_adjacency([1, 2, 3, 4], [(1, 2), (2, 3), (3, 4), (4, 2)])
        assert find_first_cycle(adjacency) == [2, 3, 4]

    def test_found_cycle_is_a_real_cycle(self):
        """Test every found loop is a closed walk over real edges."""
        adjacency = build_adjacency(range(1, 7), [(1, 2), (2, 3), (3, 4), (4, 5), (5, 6), (6, 3), (2, 5)])
        cycle = find_first_cycle(adjacency)
        assert len(cycle) >= 3
        assert len(set(cycle)) == len(cycle)
        for u, v in zip(cycle, cycle[1:] + cycle[:1]):
            assert adjacency.has_edge(u, v)
        assert any(set(cycle) == set(c) for c in nx.simple_cycles(adjacency))

    @pytest.mark.parametrize('seed', range(25))
    def test_matches_recursive_search(self, seed):
        """Test the stack-based search agrees with the recursive one."""
        rng = random.Random(seed)
        n = rng.randint(3, 12)
        vertices = list(range(1, n + 1))
        edges = []
        for _ in range(rng.randint(0, 2 * n)):
            u, v = rng.sample(vertices, 2)
            edges.append((u, v))
        adjacency = build_adjacency(vertices, edges)
        assert find_first_cycle(adjacency, vertices) == recursive_first_cycle(adjacency, vertices)
        if find_first_cycle(adjacency, vertices) is None:
            assert nx.is_forest(adjacency)
