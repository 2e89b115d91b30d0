"""
Tests for derived edge parameters and length/angle edits.
"""

import pytest

from shape_modeler.graph import GraphStore, InvalidReference
from shape_modeler.graph.geometry import quantize, segment_angle


@pytest.fixture
def store():
    return GraphStore(grid_size=50)


@pytest.fixture
def horizontal(store):
    """Edge from (0, 0) to (10, 0)."""
    a = store.create_vertex((0, 0))
    b = store.create_vertex((10, 0))
    return a, b, store.create_edge(a, b)


class TestDerivedParameters:
    def test_length_and_angle(self, store):
        """Test length and angle are derived from the endpoints."""
        a = store.create_vertex((0, 0))
        b = store.create_vertex((0, -10))
        e = store.create_edge(a, b)
        assert store.edge_length(e) == pytest.approx(10)
        assert store.edge_angle(e) == pytest.approx(-90)

    def test_angle_range_excludes_minus_180(self):
        """Test a leftward edge reports 180, not -180."""
        assert segment_angle((0, 0), (-10, 0)) == 180
        assert segment_angle((0, 0), (-10, -0.0)) == 180

    def test_zero_length_edge_has_zero_angle(self, store):
        """Test coincident endpoints give angle 0."""
        a = store.create_vertex((5, 5))
        b = store.create_vertex((5, 5))
        e = store.create_edge(a, b)
        assert store.edge_length(e) == 0
        assert store.edge_angle(e) == 0

    def test_parameters_follow_vertex_moves(self, store, horizontal):
        """Test derived parameters track vertex moves."""
        a, b, e = horizontal
        store.move_vertex(b, (0, 25))
        assert store.edge_length(e) == pytest.approx(25)
        assert store.edge_angle(e) == pytest.approx(90)

    def test_quantize(self):
        """Test grid rounding of single values."""
        assert quantize(24.9, 50) == 0
        assert quantize(25, 50) == 50
        assert quantize(-25, 50) == 0
        assert quantize(-25.1, 50) == -50


class TestParametricEdits:
    def test_set_length_keeps_direction(self, store, horizontal):
        """Test a length edit keeps v1 and the current angle."""
        a, b, e = horizontal
        store.set_edge_length(e, 20)
        assert store.position(a) == (0, 0)
        assert store.position(b) == pytest.approx((20, 0))

    def test_set_angle_keeps_length(self, store, horizontal):
        """Test an angle edit keeps v1 and the current length."""
        a, b, e = horizontal
        store.set_edge_angle(e, 90)
        assert store.position(a) == (0, 0)
        assert store.position(b) == pytest.approx((0, 10), abs=1e-9)

    def test_edits_are_not_grid_rounded(self, store, horizontal):
        """Test parametric edits store exact positions."""
        a, b, e = horizontal
        store.set_edge_length(e, 23)
        assert store.position(b) == pytest.approx((23, 0))

    def test_zero_and_negative_lengths_are_accepted(self, store, horizontal):
        """Test zero and negative lengths are applied numerically."""
        a, b, e = horizontal
        store.set_edge_length(e, 0)
        assert store.position(b) == pytest.approx((0, 0))

        store.move_vertex(b, (10, 0))
        store.set_edge_length(e, -5)
        assert store.position(b) == pytest.approx((-5, 0))

    def test_edit_resyncs_endpoints(self, store, horizontal):
        """Test other edges on the moved vertex follow the edit."""
        a, b, e = horizontal
        c = store.create_vertex((10, 50))
        bc = store.create_edge(b, c)
        store.set_edge_angle(e, 90)
        assert store.edge_endpoints(e)[1] == store.position(b)
        assert store.edge_endpoints(bc)[0] == store.position(b)

    def test_edit_repositions_fill(self, store):
        """Test a parametric edit moves the fill corner."""
        a = store.create_vertex((0, 0))
        b = store.create_vertex((100, 0))
        c = store.create_vertex((0, 100))
        ab = store.create_edge(a, b)
        store.create_edge(b, c)
        store.create_edge(c, a)
        cycle_before = store.fill.cycle

        store.set_edge_length(ab, 200)

        assert store.fill.cycle == cycle_before
        assert store.fill.points[cycle_before.index(b)] == pytest.approx((200, 0))

    def test_unknown_edge(self, store):
        """Test edits on a missing edge raise InvalidReference."""
        with pytest.raises(InvalidReference):
            store.set_edge_length(7, 10)
        with pytest.raises(InvalidReference):
            store.set_edge_angle(7, 10)

    def test_sync_unknown_vertex(self, store):
        """Test syncing a missing vertex raises InvalidReference."""
        with pytest.raises(InvalidReference):
            store.sync_edges(3)
