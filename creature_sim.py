#!/usr/bin/env python3
"""
Procedural Creature application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Shares a SimulationController that owns the live creature and its configuration;
  all access is guarded by a re-entrant lock for thread-safety.
- Draws each body as a filled outline built around its joints, children behind or in
  front of their parent, plus an optional debug overlay of joints and leg targets.
- Provides a Dear PyGui panel for editing the creature (body, shaping, legs) and for
  loading/saving JSON presets.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the viewport),
  stepping the solver, and drawing. It locks the SimulationController around short critical
  sections to read/update shared state.
- The UI class runs in the main thread via Dear PyGui. Its callbacks edit the configuration
  through SimulationController.edit_config, which rebuilds the creature under the lock.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python creature_sim.py`

Controls (viewport)
- Left click: toggle following the mouse / the idle figure-eight
- Wheel: zoom | Right/Middle-drag or arrow keys: pan | Space: pause | D: debug overlay
"""

import logging
import math
import threading
import time
from typing import List, Optional, Tuple

import pygame
import dearpygui.dearpygui as dpg

from creature.camera import Camera2D
from creature.configuration import BodyShape, LegConfiguration
from creature.constants import (
    BACKGROUND_COLOR,
    DEBUG_FAR_COLOR,
    DEBUG_JOINT_COLOR,
    DEBUG_LINE_THICKNESS,
    DEBUG_NEAR_COLOR,
    DEBUG_TARGET_RADIUS,
    OUTLINE_END_STEPS,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from creature.constraints import FabrikConstraint
from creature.data_models import Body, Joint, Side
from creature.kinematics import walk_debug
from creature.presets_loader import list_presets, load_preset, save_preset
from creature.simulation import SimulationController
from creature.utils import color_mix
from creature.vector_utils import Vec2, vec_add, vec_from_angle, vec_scale

logger = logging.getLogger("creature_sim")

SAFE_COORD_LIMIT = 30000

# ============================================================
# Outline geometry
# ============================================================

def _around(joint: Joint, angle: float) -> Vec2:
    return vec_add(joint.position, vec_scale(vec_from_angle(joint.angle + angle), joint.radius))


def outline_points(body: Body) -> List[Vec2]:
    """
    Zig-zag of points around a body: a rounded head cap, one right/left pair per joint,
    then a rounded tail cap. Consecutive triples form a triangle strip; even and odd
    indices trace the two sides of the silhouette.
    """
    if not body.joints:
        return []
    first, last = body.joints[0], body.joints[-1]
    points: List[Vec2] = []

    for i in range(OUTLINE_END_STEPS):
        angle = (i / OUTLINE_END_STEPS) * (math.pi * 0.45 + 0.25)
        points.append(_around(first, math.pi + angle))
        points.append(_around(first, math.pi - angle))

    for joint in body.joints:
        points.append(_around(joint, -math.pi / 2.0))
        points.append(_around(joint, math.pi / 2.0))

    for i in reversed(range(OUTLINE_END_STEPS)):
        angle = (i / OUTLINE_END_STEPS) * math.pi / 2.0
        points.append(_around(last, -angle))
        points.append(_around(last, angle))

    return points


# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the solver and draws the creature.
    Handles mouse-follow toggling, camera panning and zoom.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = Camera2D(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Procedural Creature - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running and self.sim.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            self.sim.set_mouse_world(self.camera.screen_to_world(pygame.mouse.get_pos()))
            self.sim.step(real_dt, self.camera.half_extent())
            self.draw()

            self.clock.tick(TARGET_FPS)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom_by(factor, pygame.mouse.get_pos())

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    with self.sim.lock:
                        self.sim.playing = not self.sim.playing
                elif event.key == pygame.K_d:
                    with self.sim.lock:
                        self.sim.debug = not self.sim.debug

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self.sim.toggle_mouse()
                elif event.button in (2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging_background:
                    mouse = pygame.mouse.get_pos()
                    dx = mouse[0] - self.drag_start_screen[0]
                    dy = mouse[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                    self.drag_start_screen = mouse

    def _screen_points(self, points: List[Vec2]) -> Optional[List[Tuple[int, int]]]:
        out = []
        for p in points:
            sp = _safe_point(self.camera.world_to_screen(p))
            if sp is None:
                return None
            out.append(sp)
        return out

    def draw_body(self, surf, body: Body):
        """Draw back children, then the body itself, then front children."""
        for joint in body.joints:
            for child in joint.children:
                if child.side is Side.BACK:
                    self.draw_body(surf, child)

        pts = self._screen_points(outline_points(body))
        if pts and len(pts) >= 3:
            for i in range(len(pts) - 2):
                pygame.draw.polygon(surf, body.fill_color, pts[i:i + 3])
            width = int(round(body.line_thickness * self.camera.zoom))
            if width > 0:
                pygame.draw.lines(surf, body.line_color, False, pts[0::2], width)
                pygame.draw.lines(surf, body.line_color, False, pts[1::2], width)

        for joint in body.joints:
            for child in joint.children:
                if child.side is Side.FRONT:
                    self.draw_body(surf, child)

    def draw_debug(self, surf, body: Body):
        zoom = self.camera.zoom

        def visit_joint(joint: Joint):
            sp = _safe_point(self.camera.world_to_screen(joint.position))
            r = max(1, int(joint.radius * zoom))
            if sp and r > DEBUG_LINE_THICKNESS:
                pygame.draw.circle(surf, DEBUG_JOINT_COLOR, sp, r, DEBUG_LINE_THICKNESS)

        def visit_fabrik(constraint: FabrikConstraint):
            color = color_mix(DEBUG_NEAR_COLOR, DEBUG_FAR_COLOR, constraint.drift_intensity())
            current = _safe_point(self.camera.world_to_screen(constraint.current_target_position))
            preferred = _safe_point(self.camera.world_to_screen(constraint.preferred_target_position))
            if current is None or preferred is None:
                return
            pygame.draw.line(surf, color, current, preferred, DEBUG_LINE_THICKNESS)
            pygame.draw.circle(surf, color, current, DEBUG_TARGET_RADIUS)
            pygame.draw.circle(surf, DEBUG_NEAR_COLOR, preferred, DEBUG_TARGET_RADIUS)

        walk_debug(body, visit_joint, visit_fabrik)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        with self.sim.lock:
            self.draw_body(surf, self.sim.body)
            if self.sim.debug:
                self.draw_debug(surf, self.sim.body)
            use_mouse = self.sim.use_mouse
            playing = self.sim.playing

        draw_text(surf, "Left click: follow mouse | Right/Middle-drag: pan | Wheel: zoom | Space: Pause | D: Debug", 10, 10, (90, 90, 90))
        draw_text(surf, f"Driver: {'mouse' if use_mouse else 'figure-eight'}  [{'Playing' if playing else 'Paused'}]", 10, 30, (90, 90, 90))

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt):
    x, y = int(pt[0]), int(pt[1])
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: creature body, shaping and legs editors, presets, controls.
    """
    def __init__(self, sim: SimulationController):
        self.sim = sim
        self.status_msg_id = None
        self.shapes_group_id = None
        self.legs_group_id = None
        self.preset_combo_id = None
        self.preset_name_id = None
        self._preset_map = {}

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Procedural Creature - Configuration', width=420, height=820)

        config = self.sim.config
        with dpg.window(label="Configuration", width=400, height=800, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_checkbox(label="Debug", default_value=self.sim.debug,
                                 callback=lambda s, a, u: self._set_debug(a), tag="debug_checkbox")
                dpg.add_checkbox(label="Follow mouse", default_value=self.sim.use_mouse,
                                 callback=lambda s, a, u: self._set_use_mouse(a), tag="mouse_checkbox")
            self.status_msg_id = dpg.add_text("")

            dpg.add_separator()

            dpg.add_text("Presets")
            with dpg.group(horizontal=True):
                self.preset_combo_id = dpg.add_combo([], width=200)
                dpg.add_button(label="Load", callback=self._on_load_preset)
                dpg.add_button(label="Refresh", callback=self._refresh_presets)
            with dpg.group(horizontal=True):
                self.preset_name_id = dpg.add_input_text(label="Name", default_value="My creature", width=200)
                dpg.add_button(label="Save", callback=self._on_save_preset)
            self._refresh_presets()

            dpg.add_separator()

            dpg.add_text("Body")
            dpg.add_color_edit(default_value=(*config.color, 255), label="Color", no_alpha=True, width=220,
                               callback=lambda s, a, u: self._set_body_color(s), tag="body_color")
            dpg.add_slider_float(label="Radius", min_value=1.0, max_value=50.0, default_value=config.radius,
                                 callback=lambda s, a, u: self._set_body_field("radius", a), tag="body_radius")
            dpg.add_slider_float(label="Max Angle", min_value=math.pi / 2.0, max_value=math.pi,
                                 default_value=config.angle_constraint,
                                 callback=lambda s, a, u: self._set_body_field("angle_constraint", a),
                                 tag="body_angle_constraint")
            dpg.add_slider_float(label="Joints", min_value=1.0, max_value=50.0, default_value=config.joints,
                                 callback=lambda s, a, u: self._set_body_field("joints", a), tag="body_joints")
            dpg.add_slider_float(label="Joint distance", min_value=1.0, max_value=50.0,
                                 default_value=config.joint_distance,
                                 callback=lambda s, a, u: self._set_body_field("joint_distance", a),
                                 tag="body_joint_distance")

            dpg.add_separator()

            with dpg.collapsing_header(label="Shaping", default_open=False):
                dpg.add_button(label="Add", callback=self._on_add_shape)
                self.shapes_group_id = dpg.add_group()

            with dpg.collapsing_header(label="Legs", default_open=True):
                dpg.add_button(label="Add", callback=self._on_add_leg)
                self.legs_group_id = dpg.add_group()

        self._rebuild_shape_widgets()
        self._rebuild_leg_widgets()

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _rebuild_shape_widgets(self):
        dpg.delete_item(self.shapes_group_id, children_only=True)
        with self.sim.lock:
            shapes = [(s.id, s.amplitude, s.constant_offset, s.frequency_multiplier) for s in self.sim.config.shapes]
        for shape_id, amplitude, offset, frequency in shapes:
            with dpg.group(parent=self.shapes_group_id):
                dpg.add_slider_float(label="Amplitude", min_value=0.0, max_value=30.0, default_value=amplitude,
                                     callback=self._on_shape_slider, user_data=(shape_id, "amplitude"))
                dpg.add_slider_float(label="Offset", min_value=0.0, max_value=2.0 * math.pi, default_value=offset,
                                     callback=self._on_shape_slider, user_data=(shape_id, "constant_offset"))
                dpg.add_slider_float(label="Frequency multiplier", min_value=-30.0, max_value=30.0,
                                     default_value=frequency,
                                     callback=self._on_shape_slider, user_data=(shape_id, "frequency_multiplier"))
                dpg.add_button(label="Delete", callback=lambda s, a, u: self._on_delete_shape(u), user_data=shape_id)
                dpg.add_separator()

    def _rebuild_leg_widgets(self):
        dpg.delete_item(self.legs_group_id, children_only=True)
        with self.sim.lock:
            legs = [(leg.id, leg.to_dict()) for leg in self.sim.config.legs]
        sliders = [
            ("thickness", "Thickness", 1.0, 30.0),
            ("angle", "Angle", 0.0, 2.0 * math.pi),
            ("joints", "Joints", 2.0, 10.0),
            ("joint_distance", "Joint distance", 1.0, 50.0),
            ("target_ratio", "Target ratio", 0.0, 1.0),
            ("target_max_distance", "Max target distance", 1.0, 200.0),
            ("body_ratio", "Body ratio", 0.0, 1.0),
        ]
        for leg_id, values in legs:
            with dpg.group(parent=self.legs_group_id):
                for name, label, lo, hi in sliders:
                    dpg.add_slider_float(label=label, min_value=lo, max_value=hi, default_value=values[name],
                                         callback=self._on_leg_slider, user_data=(leg_id, name))
                with dpg.group(horizontal=True):
                    dpg.add_button(label="Duplicate", callback=lambda s, a, u: self._on_duplicate_leg(u), user_data=leg_id)
                    dpg.add_button(label="Delete", callback=lambda s, a, u: self._on_delete_leg(u), user_data=leg_id)
                dpg.add_separator()

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _toggle_play(self):
        with self.sim.lock:
            self.sim.playing = not self.sim.playing
            state = "Playing" if self.sim.playing else "Paused"
        self._set_status(f"Simulation {state}.")

    def _set_debug(self, value):
        with self.sim.lock:
            self.sim.debug = bool(value)

    def _set_use_mouse(self, value):
        with self.sim.lock:
            self.sim.use_mouse = bool(value)

    def _set_body_field(self, name: str, value):
        self.sim.edit_config(lambda config: setattr(config, name, float(value)))

    def _set_body_color(self, sender):
        rgba = dpg.get_value(sender)  # RGBA 0-255
        color = (int(rgba[0]), int(rgba[1]), int(rgba[2]))
        self.sim.edit_config(lambda config: setattr(config, "color", color))

    def _on_shape_slider(self, sender, app_data, user_data):
        shape_id, name = user_data

        def edit(config):
            for shape in config.shapes:
                if shape.id == shape_id:
                    setattr(shape, name, float(app_data))

        self.sim.edit_config(edit)

    def _on_add_shape(self):
        self.sim.edit_config(lambda config: config.shapes.append(BodyShape.random()))
        self._rebuild_shape_widgets()

    def _on_delete_shape(self, shape_id: int):
        def edit(config):
            config.shapes = [s for s in config.shapes if s.id != shape_id]

        self.sim.edit_config(edit)
        self._rebuild_shape_widgets()

    def _on_leg_slider(self, sender, app_data, user_data):
        leg_id, name = user_data

        def edit(config):
            for leg in config.legs:
                if leg.id == leg_id:
                    setattr(leg, name, float(app_data))

        self.sim.edit_config(edit)

    def _on_add_leg(self):
        self.sim.edit_config(lambda config: config.legs.append(LegConfiguration.random()))
        self._rebuild_leg_widgets()

    def _on_duplicate_leg(self, leg_id: int):
        def edit(config):
            config.legs.extend([leg.duplicate() for leg in config.legs if leg.id == leg_id])

        self.sim.edit_config(edit)
        self._rebuild_leg_widgets()

    def _on_delete_leg(self, leg_id: int):
        def edit(config):
            config.legs = [leg for leg in config.legs if leg.id != leg_id]

        self.sim.edit_config(edit)
        self._rebuild_leg_widgets()

    def _refresh_presets(self):
        self._preset_map = {display: fn for fn, display in list_presets()}
        items = list(self._preset_map.keys()) or ["No presets found (add JSONs to presets/)"]
        dpg.configure_item(self.preset_combo_id, items=items)
        dpg.set_value(self.preset_combo_id, items[0])

    def _on_load_preset(self):
        choice = dpg.get_value(self.preset_combo_id)
        fn = self._preset_map.get(choice)
        if fn is None:
            self._set_error("No preset selected.")
            return
        loaded = load_preset(fn)
        if loaded is None:
            self._set_error(f"Failed to load preset '{choice}'.")
            return
        config, display_name = loaded
        self.sim.replace_config(config)
        self._sync_body_widgets()
        self._rebuild_shape_widgets()
        self._rebuild_leg_widgets()
        self._set_status(f"Loaded preset: {display_name}")

    def _on_save_preset(self):
        name = dpg.get_value(self.preset_name_id).strip()
        if not name:
            self._set_error("Preset name is empty.")
            return
        file_name = "".join(ch if ch.isalnum() else "_" for ch in name.lower())
        with self.sim.lock:
            config = self.sim.config.copy()
        try:
            save_preset(config, file_name, name)
        except OSError as e:
            logger.error(f"Saving preset '{name}' failed: {e}")
            self._set_error(f"Could not save preset: {e}")
            return
        self._refresh_presets()
        self._set_status(f"Saved preset: {name}")

    def _sync_body_widgets(self):
        with self.sim.lock:
            config = self.sim.config
            dpg.set_value("body_color", (*config.color, 255))
            dpg.set_value("body_radius", config.radius)
            dpg.set_value("body_angle_constraint", config.angle_constraint)
            dpg.set_value("body_joints", config.joints)
            dpg.set_value("body_joint_distance", config.joint_distance)

    def _sync_ui_with_sim(self):
        """
        Periodic UI update: mirror toggles changed from the viewport and surface solver errors.
        """
        with self.sim.lock:
            debug = self.sim.debug
            use_mouse = self.sim.use_mouse
            msg = self.sim.last_error
            self.sim.last_error = None
        dpg.set_value("debug_checkbox", debug)
        dpg.set_value("mouse_checkbox", use_mouse)
        if msg:
            self._set_error(f"Solver paused: {msg}")
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    sim = SimulationController()

    renderer = PygameRenderer(sim)

    # Start Pygame renderer thread
    renderer.start()

    UI(sim)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop simulation and renderer
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()

if __name__ == "__main__":
    main()
