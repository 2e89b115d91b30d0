"""
Main NiceGUI application for the Shape Modeler.

Hosts the planar graph modeler: the canvas is a ui.interactive_image whose
SVG content is rebuilt from the GraphStore after every event, with a sidebar
for canvas settings, presets, parametric edits and the shape library.
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import ui

from shape_modeler.config import get_settings, save_settings
from shape_modeler.paths import ensure_shapes_dir
from shape_modeler.units import UNIT_SYSTEMS, to_px, to_unit, unit_options
from shape_modeler.graph import GraphError, GraphStore, add_line, add_polygon, add_rectangle
from shape_modeler.edit import EditController, build_scene
from shape_modeler.edit.handlers import MOUSE_EVENTS, setup_edit_handlers
from shape_modeler.library import ShapeLibrary, export_shape

load_dotenv()

logger = logging.getLogger(__name__)


@ui.page('/')
def main_page():
    ui.dark_mode().enable()

    settings = get_settings()
    library = ShapeLibrary(data_dir=str(ensure_shapes_dir()))
    store = GraphStore(grid_size=settings.grid_size, auto_fill=settings.auto_fill)
    controller = EditController(store, snap_distance=settings.snap_distance)

    state = {
        'canvas': None,
        'unit': settings.unit_system,
    }

    def refresh_scene():
        if state['canvas'] is None:
            return
        state['canvas'].content = build_scene(
            store,
            display_positions=controller.display_positions(),
            snap_vertex=controller.snapping_vertex,
            width=settings.canvas_width,
            height=settings.canvas_height,
        )

    def persist_settings():
        try:
            save_settings(settings)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not save settings: {e}")

    # --- Inspector (selection-dependent fields) ---

    @ui.refreshable
    def inspector():
        unit_key = state['unit']
        unit_label = UNIT_SYSTEMS[unit_key]['label']

        vertex_id = store.selected_vertex
        edge_params = store.selected_edge_params()

        if vertex_id is not None:
            x, y = store.position(vertex_id)
            ui.label(f'Vertex {vertex_id}').classes('text-sm font-bold')

            def on_vertex_input(axis, value):
                if value is None or store.selected_vertex != vertex_id:
                    return
                cur_x, cur_y = store.position(vertex_id)
                px = to_px(value, unit_key)
                store.move_vertex(vertex_id, (px, cur_y) if axis == 'x' else (cur_x, px))
                refresh_scene()

            with ui.row().classes('gap-2'):
                ui.number(f'X ({unit_label})', value=to_unit(x, unit_key), step=UNIT_SYSTEMS[unit_key]['step'],
                          on_change=lambda e: on_vertex_input('x', e.value)).props('dense outlined').classes('w-28')
                ui.number(f'Y ({unit_label})', value=to_unit(y, unit_key), step=UNIT_SYSTEMS[unit_key]['step'],
                          on_change=lambda e: on_vertex_input('y', e.value)).props('dense outlined').classes('w-28')

        elif edge_params is not None:
            edge_id = store.selected_edge
            ui.label(f'Edge {edge_id}').classes('text-sm font-bold')

            def on_length(e):
                if e.value is None or store.selected_edge != edge_id:
                    return
                store.set_edge_length(edge_id, to_px(e.value, unit_key))
                refresh_scene()

            def on_angle(e):
                if e.value is None or store.selected_edge != edge_id:
                    return
                store.set_edge_angle(edge_id, float(e.value))
                refresh_scene()

            with ui.row().classes('gap-2'):
                ui.number(f'Length ({unit_label})', value=to_unit(edge_params['length'], unit_key),
                          step=UNIT_SYSTEMS[unit_key]['step'], on_change=on_length) \
                    .props('dense outlined').classes('w-28')
                ui.number('Angle (°)', value=round(edge_params['angle'], 2), step=1, on_change=on_angle) \
                    .props('dense outlined').classes('w-28')
        else:
            ui.label('Select a vertex or edge to edit it').classes('text-xs text-gray-400')

    # --- Library ---

    @ui.refreshable
    def library_list():
        shapes = library.list_shapes()
        if not shapes:
            ui.label('No saved shapes yet').classes('text-xs text-gray-400')
            return
        for record in shapes:
            shape = record.get('shape', {})
            with ui.row().classes('w-full items-center justify-between'):
                ui.label(record.get('name', 'Untitled')).classes('text-sm')
                ui.label(f"{len(shape.get('edges', []))} edges").classes('text-xs text-gray-400')

                def do_delete(shape_id=record['id']):
                    library.delete_shape(shape_id)
                    library_list.refresh()

                ui.button(icon='delete', on_click=do_delete).props('flat dense round size=sm color=negative')

    def save_to_library(name_input):
        shape = export_shape(store)
        if shape is None:
            ui.notify('Nothing to save: add at least one edge', type='warning')
            return
        try:
            library.save_shape(name_input.value, shape)
        except ValueError as e:
            ui.notify(str(e), type='negative')
            return
        ui.notify('Shape saved', type='positive', position='bottom', timeout=1000)
        name_input.value = ''
        library_list.refresh()

    # --- Handlers ---

    handlers = setup_edit_handlers(
        controller=controller,
        refresh_scene=refresh_scene,
        refresh_inspector=inspector.refresh,
    )
    ui.keyboard(on_key=handlers['handle_keyboard'])

    def run_preset(preset):
        try:
            preset(store)
        except GraphError as e:
            ui.notify(f'Preset failed: {e}', type='negative')
        refresh_scene()

    def set_grid(e):
        try:
            store.grid_size = e.value
        except (TypeError, ValueError):
            return
        settings.grid_size = store.grid_size
        persist_settings()
        refresh_scene()

    def set_auto_fill(e):
        store.set_auto_fill(e.value)
        settings.auto_fill = store.auto_fill
        persist_settings()
        refresh_scene()

    def set_unit(e):
        state['unit'] = e.value
        settings.unit_system = e.value
        persist_settings()
        inspector.refresh()

    def clear_all():
        controller.cancel_drag()
        store.clear()
        inspector.refresh()
        refresh_scene()

    # --- Layout Construction ---

    with ui.row().classes('w-full no-wrap gap-4 p-4'):
        state['canvas'] = ui.interactive_image(
            size=(settings.canvas_width, settings.canvas_height),
            on_mouse=handlers['handle_mouse'],
            events=MOUSE_EVENTS,
            cross=False,
        ).classes('border border-slate-700')

        with ui.column().classes('w-80 gap-3'):
            ui.label('Shape Modeler').classes('text-xl font-bold')

            with ui.card().classes('w-full'):
                ui.label('Canvas').classes('text-sm font-bold')
                ui.select(unit_options(), value=state['unit'], label='Units', on_change=set_unit) \
                    .props('dense outlined').classes('w-full')
                ui.number('Grid size (px)', value=store.grid_size, min=1, step=5, on_change=set_grid) \
                    .props('dense outlined').classes('w-full')
                ui.switch('Auto-fill loops', value=store.auto_fill, on_change=set_auto_fill)

            with ui.card().classes('w-full'):
                ui.label('Add').classes('text-sm font-bold')
                with ui.row().classes('gap-2'):
                    ui.button('Line', on_click=lambda: run_preset(add_line)).props('dense')
                    ui.button('Rectangle', on_click=lambda: run_preset(add_rectangle)).props('dense')
                    ui.button('Polygon', on_click=lambda: run_preset(add_polygon)).props('dense')
                ui.button('Clear', on_click=clear_all).props('flat dense color=negative')

            with ui.card().classes('w-full'):
                ui.label('Inspector').classes('text-sm font-bold')
                inspector()

            with ui.card().classes('w-full'):
                ui.label('Library').classes('text-sm font-bold')
                with ui.row().classes('w-full items-center no-wrap'):
                    name_input = ui.input('Shape name').props('dense outlined').classes('grow')
                    ui.button(icon='save', on_click=lambda: save_to_library(name_input)).props('flat dense round')
                library_list()

    refresh_scene()


if __name__ in {"__main__", "__mp_main__"}:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s: %(message)s')
    ui.run(
        title='Shape Modeler',
        port=8081,
        reload=not getattr(sys, 'frozen', False),
    )
