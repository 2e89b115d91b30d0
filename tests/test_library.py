import pytest

from shape_modeler.graph import GraphStore, add_line, add_rectangle
from shape_modeler.library import ShapeLibrary, export_shape


@pytest.fixture
def library(tmp_path):
    return ShapeLibrary(data_dir=str(tmp_path / "shapes"))


class TestExportShape:
    def test_nothing_to_export_without_edges(self):
        """Test a graph without edges exports nothing."""
        store = GraphStore()
        store.create_vertex((10, 10))
        assert export_shape(store) is None

    def test_rectangle_export(self):
        """Test the rectangle preset exports fill, edges and bounds."""
        store = GraphStore()
        add_rectangle(store)
        shape = export_shape(store)
        assert shape['fill'] == [[150, 150], [350, 150], [350, 300], [150, 300]]
        assert len(shape['edges']) == 4
        assert shape['edges'][0] == [150, 150, 350, 150]
        assert len(shape['vertices']) == 4
        assert shape['bounds'] == [150, 150, 350, 300]

    def test_open_shape_has_no_fill(self):
        """Test an open shape exports without a fill."""
        store = GraphStore()
        add_line(store)
        shape = export_shape(store)
        assert shape['fill'] is None
        assert shape['bounds'] == [100, 100, 200, 200]


class TestShapeLibrary:
    def test_save_list_load_delete(self, library):
        """Test a saved shape can be listed, loaded and deleted."""
        store = GraphStore()
        add_rectangle(store)
        shape = export_shape(store)

        shape_id = library.save_shape("Room", shape)

        records = library.list_shapes()
        assert [r["id"] for r in records] == [shape_id]
        assert records[0]["name"] == "Room"

        loaded = library.load_shape(shape_id)
        assert loaded["shape"] == shape

        assert library.delete_shape(shape_id) is True
        assert library.list_shapes() == []
        assert library.load_shape(shape_id) is None
        assert library.delete_shape(shape_id) is False

    def test_empty_name_rejected(self, library):
        """Test blank names are refused."""
        with pytest.raises(ValueError):
            library.save_shape("   ", {"edges": []})

    def test_corrupt_files_are_skipped(self, library):
        """Test unparsable files are skipped when listing."""
        library.save_shape("Good", {"edges": []})
        (library.data_dir / "broken.json").write_text("{oops")
        names = [r["name"] for r in library.list_shapes()]
        assert names == ["Good"]

    @pytest.mark.parametrize("content", ['[1, 2]', '"just text"', '42', '{"name": "no id"}', '{"id": "abc"}'])
    def test_non_record_files_are_skipped(self, library, content):
        """Test valid JSON that is not a shape record is skipped when listing."""
        shape_id = library.save_shape("Good", {"edges": []})
        (library.data_dir / "odd.json").write_text(content)
        records = library.list_shapes()
        assert [r["id"] for r in records] == [shape_id]
