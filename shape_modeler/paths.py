"""
Where the modeler keeps its files.

Everything lives under the project root (the directory holding app.py):
config.json for preferences and db/shapes/ for the shape library.
"""

from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_config_path(root: Optional[Path] = None) -> Path:
    return (root or PROJECT_ROOT) / "config.json"


def get_shapes_dir(root: Optional[Path] = None) -> Path:
    return (root or PROJECT_ROOT) / "db" / "shapes"


def ensure_shapes_dir(root: Optional[Path] = None) -> Path:
    """Create db/shapes/ if needed and return it."""
    shapes_dir = get_shapes_dir(root)
    shapes_dir.mkdir(parents=True, exist_ok=True)
    return shapes_dir
