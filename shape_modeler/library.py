"""
Shape export and the on-disk shape library.

export_shape flattens a finished graph into plain lists; ShapeLibrary keeps
one JSON record per saved shape under db/shapes.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from shape_modeler.graph import GraphStore

logger = logging.getLogger(__name__)


def export_shape(store: GraphStore) -> Optional[Dict[str, Any]]:
    """
    Flatten the finished graph into a shape record for the host layout.

    Returns None when the graph has no edges (nothing worth inserting).
    """
    snapshot = store.snapshot()
    if not snapshot['edges']:
        return None

    xs = [v['x'] for v in snapshot['vertices']]
    ys = [v['y'] for v in snapshot['vertices']]
    return {
        'fill': snapshot['fill'],
        'edges': [[e['x1'], e['y1'], e['x2'], e['y2']] for e in snapshot['edges']],
        'vertices': [[v['x'], v['y']] for v in snapshot['vertices']],
        'bounds': [min(xs), min(ys), max(xs), max(ys)],
    }


class ShapeLibrary:
    """
    Saved shapes, one JSON file per shape.

    Structure:
    - db/shapes/{id}.json: {id, name, created_at, shape}
    """

    def __init__(self, data_dir: str = "db/shapes"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, shape_id: str) -> Path:
        return self.data_dir / f"{shape_id}.json"

    def save_shape(self, name: str, shape: Dict[str, Any]) -> str:
        """Store a shape record and return its new id."""
        name = (name or "").strip()
        if not name:
            raise ValueError("Shape name must not be empty")

        shape_id = str(uuid.uuid4())
        record = {
            "id": shape_id,
            "name": name,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "shape": shape,
        }
        with open(self._path(shape_id), "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2)
        logger.info(f"Saved shape '{name}' as {shape_id}")
        return shape_id

    def list_shapes(self) -> List[Dict[str, Any]]:
        """All readable records, oldest first."""
        records = []
        for shape_file in self.data_dir.glob("*.json"):
            try:
                with open(shape_file, "r", encoding="utf-8") as f:
                    record = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Failed to load shape file {shape_file}: {e}")
                continue
            if not isinstance(record, dict) or "id" not in record or "name" not in record:
                logger.warning(f"Skipping shape file {shape_file}: not a shape record")
                continue
            records.append(record)
        return sorted(records, key=lambda r: (str(r.get("created_at", "")), str(r["name"])))

    def load_shape(self, shape_id: str) -> Optional[Dict[str, Any]]:
        path = self._path(shape_id)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def delete_shape(self, shape_id: str) -> bool:
        path = self._path(shape_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted shape {shape_id}")
        return True
