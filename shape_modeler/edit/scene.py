"""
SVG scene builder for the modeler canvas.

Turns the Graph Store's query surface into SVG markup for
ui.interactive_image. Layers are emitted back to front:

    grid -> fill -> edges -> vertices

so the fill always sits behind the edges and vertices.
"""

from typing import Dict, List, Optional, Tuple

from shape_modeler.graph import GraphStore
from shape_modeler.edit.constants import (
    VERTEX_RADIUS,
    VERTEX_COLOR,
    VERTEX_SNAP_COLOR,
    VERTEX_SELECTED_STROKE,
    EDGE_COLOR,
    EDGE_SELECTED_COLOR,
    EDGE_WIDTH,
    FILL_COLOR,
    GRID_COLOR,
    BACKGROUND_COLOR,
)

Point = Tuple[float, float]


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip('0').rstrip('.')


def build_grid(width: int, height: int, grid_size: float) -> List[str]:
    """Grid lines every grid_size pixels across the canvas."""
    if not grid_size or grid_size <= 0:
        return []
    lines = []
    x = 0.0
    while x <= width:
        lines.append(f'<line x1="{_fmt(x)}" y1="0" x2="{_fmt(x)}" y2="{height}" '
                     f'stroke="{GRID_COLOR}" stroke-width="1" />')
        x += grid_size
    y = 0.0
    while y <= height:
        lines.append(f'<line x1="0" y1="{_fmt(y)}" x2="{width}" y2="{_fmt(y)}" '
                     f'stroke="{GRID_COLOR}" stroke-width="1" />')
        y += grid_size
    return lines


def build_scene(
    store: GraphStore,
    display_positions: Optional[Dict[int, Point]] = None,
    snap_vertex: Optional[int] = None,
    width: int = 900,
    height: int = 640,
    grid_size: Optional[float] = None,
) -> str:
    """
    Build the SVG content for the current graph.

    Args:
        store: Graph to draw
        display_positions: Vertex positions to draw (defaults to stored positions);
            the edit controller passes positions with the snap preview applied
        snap_vertex: Vertex drawn in the snap colour
        width, height: Canvas size in pixels
        grid_size: Grid spacing; defaults to the store's grid size

    Returns:
        SVG markup (without the outer <svg> element)
    """
    positions = display_positions if display_positions is not None else store.positions()
    grid = store.grid_size if grid_size is None else grid_size
    parts = [f'<rect x="0" y="0" width="{width}" height="{height}" fill="{BACKGROUND_COLOR}" />']
    parts.extend(build_grid(width, height, grid))

    fill = store.fill
    if fill:
        # follow the preview so a snapping cycle member keeps its corner
        if all(v in positions for v in fill.cycle):
            fill = fill.reposition(positions)
        points = ' '.join(f'{_fmt(x)},{_fmt(y)}' for x, y in fill.points)
        parts.append(f'<polygon class="fill" points="{points}" fill="{FILL_COLOR}" stroke="none" />')

    selected_edge = store.selected_edge
    for edge in store.edges():
        (x1, y1), (x2, y2) = store.edge_endpoints(edge.id)
        if edge.v1 == snap_vertex and snap_vertex in positions:
            x1, y1 = positions[snap_vertex]
        if edge.v2 == snap_vertex and snap_vertex in positions:
            x2, y2 = positions[snap_vertex]
        color = EDGE_SELECTED_COLOR if edge.id == selected_edge else EDGE_COLOR
        parts.append(
            f'<line class="edge" data-id="{edge.id}" x1="{_fmt(x1)}" y1="{_fmt(y1)}" '
            f'x2="{_fmt(x2)}" y2="{_fmt(y2)}" stroke="{color}" stroke-width="{EDGE_WIDTH}" '
            f'stroke-linecap="round" />'
        )

    selected_vertex = store.selected_vertex
    for vertex_id, (x, y) in positions.items():
        color = VERTEX_SNAP_COLOR if vertex_id == snap_vertex else VERTEX_COLOR
        stroke = VERTEX_SELECTED_STROKE if vertex_id == selected_vertex else 'white'
        parts.append(
            f'<circle class="vertex" data-id="{vertex_id}" cx="{_fmt(x)}" cy="{_fmt(y)}" '
            f'r="{VERTEX_RADIUS}" fill="{color}" stroke="{stroke}" stroke-width="2" />'
        )

    return '\n'.join(parts)
