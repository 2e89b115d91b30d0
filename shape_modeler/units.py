"""
Unit systems and conversion between canvas pixels and display units.

Vertex positions are always stored in pixels; these helpers only convert
values for display and for numbers typed into the sidebar.
"""

import math
from typing import Dict, Any, Optional

UNIT_SYSTEMS: Dict[str, Dict[str, Any]] = {
    'mks': {'name': 'MKS (Meters)', 'label': 'm', 'step': 0.1, 'pixels_per_unit': 100, 'default_grid': 0.5},
    'mmgs': {'name': 'MMGS (Millimeters)', 'label': 'mm', 'step': 10, 'pixels_per_unit': 1, 'default_grid': 500},
    'ips': {'name': 'IPS (Inches)', 'label': 'in', 'step': 1, 'pixels_per_unit': 96, 'default_grid': 20},
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_unit_system(key: str) -> Dict[str, Any]:
    """Look up a unit system, raising KeyError for unknown keys."""
    if key not in UNIT_SYSTEMS:
        raise KeyError(f"Unknown unit system '{key}'")
    return UNIT_SYSTEMS[key]


def to_unit(px: Optional[float], key: str = 'mks') -> float:
    """
    Convert a pixel value to the display unit.
    Millimeters are shown as whole numbers, other units with 3 decimals.
    """
    system = get_unit_system(key)
    if px is None:
        return 0
    value = px / system['pixels_per_unit']
    if key == 'mmgs':
        return _round_half_up(value)
    return round(value, 3)


def to_px(value: Optional[float], key: str = 'mks') -> int:
    """Convert a display-unit value to a whole number of pixels."""
    system = get_unit_system(key)
    if value is None:
        return 0
    return _round_half_up(float(value) * system['pixels_per_unit'])


def unit_options() -> Dict[str, str]:
    """Mapping of unit key -> display name for a select box."""
    return {key: system['name'] for key, system in UNIT_SYSTEMS.items()}
