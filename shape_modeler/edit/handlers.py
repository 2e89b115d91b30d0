"""
Edit Handlers - NiceGUI event handlers for the modeler canvas.

This module keeps the pointer and keyboard plumbing out of app.py.
The canvas is a ui.interactive_image subscribed to mousedown, mousemove
and mouseup; every event is forwarded to the EditController once, as it
arrives.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from nicegui import ui

from shape_modeler.graph import GraphError
from shape_modeler.edit.controller import EditController

logger = logging.getLogger(__name__)

MOUSE_EVENTS = ['mousedown', 'mousemove', 'mouseup']


def normalize_pointer_payload(event: Any) -> Optional[Tuple[str, float, float]]:
    """
    Extract (event type, x, y) in image coordinates.

    Accepts NiceGUI MouseEventArguments or a plain dict with
    type/image_x/image_y (offsetX/offsetY are accepted too).
    """
    if isinstance(event, dict):
        kind = event.get('type')
        x = event.get('image_x', event.get('offsetX'))
        y = event.get('image_y', event.get('offsetY'))
    else:
        kind = getattr(event, 'type', None)
        x = getattr(event, 'image_x', None)
        y = getattr(event, 'image_y', None)

    if kind is None or x is None or y is None:
        return None
    return kind, float(x), float(y)


def setup_edit_handlers(
    controller: EditController,
    refresh_scene: Callable[[], None],
    refresh_inspector: Callable[[], None],
) -> Dict[str, Callable]:
    """
    Set up the canvas event handlers.

    Args:
        controller: EditController wrapping the page's GraphStore
        refresh_scene: Redraws the canvas SVG
        refresh_inspector: Updates sidebar fields for the current selection

    Returns:
        Dict with handler functions for binding to UI events
    """

    def run_safely(action: Callable[[], Any]) -> None:
        try:
            action()
        except GraphError as e:
            logger.warning(f"Edit rejected: {e}")
            ui.notify(f'Edit failed: {e}', type='negative', position='bottom')
            controller.cancel_drag()

    def handle_mouse(event):
        """Route a canvas mouse event to the controller."""
        payload = normalize_pointer_payload(event)
        if payload is None:
            return
        kind, x, y = payload

        if kind == 'mousedown':
            run_safely(lambda: controller.pointer_down(x, y))
            refresh_inspector()
        elif kind == 'mousemove':
            if controller.session is None:
                return
            run_safely(lambda: controller.pointer_move(x, y))
        elif kind == 'mouseup':
            run_safely(controller.pointer_up)
            refresh_inspector()
        refresh_scene()

    def handle_keyboard(e):
        """Escape cancels a drag, Delete/Backspace removes the selection."""
        if not e.action.keydown:
            return
        if e.key == 'Escape':
            controller.cancel_drag()
            refresh_scene()
        elif e.key in ('Delete', 'Backspace'):
            if controller.remove_selected():
                ui.notify('Removed selection', position='bottom', timeout=500)
                refresh_inspector()
                refresh_scene()

    return {
        'handle_mouse': handle_mouse,
        'handle_keyboard': handle_keyboard,
    }
