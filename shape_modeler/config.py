"""
Configuration management for the Shape Modeler.

Handles persistent configuration including:
- Grid size and snap distance used by the modeler canvas
- Auto-fill preference and the active unit system
- Canvas dimensions

Config is stored in config.json next to the executable/project root.
Environment variables (optionally loaded from .env by app.py) take priority
over stored values.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from shape_modeler.paths import get_config_path
from shape_modeler.units import UNIT_SYSTEMS

logger = logging.getLogger(__name__)

ENV_PREFIX = "SHAPE_MODELER_"

# Environment variable name -> settings field
ENV_OVERRIDES = {
    "GRID_SIZE": "grid_size",
    "SNAP_DISTANCE": "snap_distance",
    "AUTO_FILL": "auto_fill",
    "UNITS": "unit_system",
}


@dataclass
class ModelerSettings:
    """User preferences for the modeler canvas."""
    grid_size: float = 50.0
    snap_distance: float = 10.0
    auto_fill: bool = True
    unit_system: str = "mks"
    canvas_width: int = 900
    canvas_height: int = 640

    def validate(self) -> None:
        """Raise ValueError if any value is out of range."""
        if not math.isfinite(self.grid_size) or self.grid_size <= 0:
            raise ValueError(f"grid_size must be a positive number, got {self.grid_size}")
        if not math.isfinite(self.snap_distance) or self.snap_distance < 0:
            raise ValueError(f"snap_distance must be a finite non-negative number, got {self.snap_distance}")
        if self.unit_system not in UNIT_SYSTEMS:
            raise ValueError(f"Unknown unit system '{self.unit_system}'")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError("Canvas dimensions must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(name: str, raw: Any) -> Any:
    """Convert a raw config/env value to the type of the matching field."""
    if name == "auto_fill":
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw)
    if name in ("canvas_width", "canvas_height"):
        return int(raw)
    if name == "unit_system":
        return str(raw).strip().lower()
    return float(raw)


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            return {}
    return {}


def save_config(config: dict, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = config_path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def get_settings(config_path: Optional[Path] = None) -> ModelerSettings:
    """
    Build the effective settings.

    Priority:
    1. Environment variables SHAPE_MODELER_*
    2. Stored in config.json
    3. ModelerSettings defaults

    Values that fail to parse or validate are logged and replaced by defaults.
    """
    values: Dict[str, Any] = {}
    stored = load_config(config_path)
    known = {f.name for f in fields(ModelerSettings)}

    for name, raw in stored.items():
        if name in known:
            values[name] = raw

    for suffix, name in ENV_OVERRIDES.items():
        env_value = os.environ.get(ENV_PREFIX + suffix)
        if env_value:
            values[name] = env_value

    settings = ModelerSettings()
    for name, raw in values.items():
        candidate = replace(settings)
        try:
            setattr(candidate, name, _coerce(name, raw))
            candidate.validate()
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid setting {name}={raw!r}, keeping {getattr(settings, name)!r}: {e}")
            continue
        settings = candidate
    return settings


def save_settings(settings: ModelerSettings, config_path: Optional[Path] = None) -> None:
    """Validate and persist settings, keeping unrelated keys in config.json."""
    settings.validate()
    config = load_config(config_path)
    config.update(settings.to_dict())
    save_config(config, config_path)
