#!/usr/bin/env python3
"""
Planet simulation application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Maintains a shared SimulationController that owns the Simulation and the
  CoordinateMapper; all access is guarded by a re-entrant lock.
- Draws each frame from the DrawCommands produced by planetsim.frame: bodies,
  orbit paths, names and distance-to-star readouts.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the viewport),
  stepping physics once per frame, and drawing. It locks the SimulationController around
  short critical sections to read/update shared state.
- The UI class runs in the main thread via Dear PyGui. It updates readouts on a periodic
  frame callback and invokes SimulationController methods as needed; these are lock-protected.

Units and conventions
- SI units throughout: meters [m], kilograms [kg], seconds [s]. The mapper stores pixels-per-meter.
- Colors are RGB tuples in 0..255.

Running
1) Install: `pip install -e .`
2) Run: `planet-sim` or `python planet_sim.py [--template sun_earth.json]`

Controls
- Space: Pause/Play, Right arrow: single step while paused, R: restart, Esc: quit.
"""

import argparse
import logging
import sys
import threading
from typing import List, Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from planetsim.camera import CoordinateMapper, scale_to_fit
from planetsim.constants import (
    BACKGROUND_COLOR,
    FPS,
    HEIGHT,
    HUD_COLOR,
    SAFE_COORD_LIMIT,
    SCALE,
    SECONDS_PER_DAY,
    WIDTH,
)
from planetsim.data_models import DrawCommand
from planetsim.errors import ConfigurationError, NumericDivergenceError
from planetsim.frame import render_pass
from planetsim.physics import Simulation
from planetsim.presets_loader import (
    build_inner_solar_system,
    list_templates,
    load_template,
)

logger = logging.getLogger(__name__)

BUILTIN_SCENE = "Inner solar system (built-in)"

# ============================================================
# Simulation Controller (Shared State)
# ============================================================

class SimulationController:
    """
    Shared state between UI thread (DearPyGui) and rendering thread (Pygame).
    Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, simulation: Simulation, mapper: CoordinateMapper, scene_name: str = BUILTIN_SCENE):
        self.lock = threading.RLock()
        self.simulation = simulation
        self.mapper = mapper
        self.scene_name = scene_name
        self.running = True  # app running
        self.playing = True  # simulation running
        self.show_orbits = True
        self.show_distances = True
        self.halted_reason: Optional[str] = None
        self.initial_energy = simulation.total_energy()

    def step_frame(self) -> bool:
        """
        Advance the simulation by one time step.
        On numeric divergence the loop is halted until restart; returns False then.
        """
        with self.lock:
            if self.halted_reason is not None:
                return False
            try:
                self.simulation.step()
            except NumericDivergenceError as e:
                self.playing = False
                self.halted_reason = str(e)
                logger.error("Simulation halted after %d steps: %s", self.simulation.steps, e)
                return False
            return True

    def frame_commands(self) -> List[DrawCommand]:
        with self.lock:
            return render_pass(self.simulation, self.mapper)

    def orbit_paths(self) -> List[tuple]:
        """Screen-space orbit polylines with their colors."""
        with self.lock:
            to_screen = self.mapper.to_screen
            return [
                (b.color, [to_screen(p) for p in b.orbit])
                for b in self.simulation.bodies
                if len(b.orbit) > 1
            ]

    def toggle_play(self) -> bool:
        with self.lock:
            if self.halted_reason is None:
                self.playing = not self.playing
            return self.playing

    def restart(self):
        with self.lock:
            self.simulation.reset()
            self.halted_reason = None
            self.initial_energy = self.simulation.total_energy()

    def replace_scene(self, simulation: Simulation, scale: Optional[float], name: str):
        with self.lock:
            self.simulation = simulation
            if scale is None:
                scale = scale_to_fit(simulation.bodies, (WIDTH, HEIGHT))
            self.mapper.configure(scale, self.mapper.origin)
            self.scene_name = name
            self.halted_reason = None
            self.initial_energy = simulation.total_energy()
        logger.info("Scene %s loaded (%d bodies)", name, len(simulation.bodies))

    def energy_drift(self) -> float:
        with self.lock:
            if self.initial_energy == 0:
                return 0.0
            return (self.simulation.total_energy() - self.initial_energy) / abs(self.initial_energy)

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the simulation once per frame, then draws orbits, bodies and labels.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.surface = None
        self.clock = None
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Planet Simulation")
        self.surface = pygame.display.set_mode((WIDTH, HEIGHT))
        self.clock = pygame.time.Clock()

        while self.running and self.sim.running:
            self.handle_events()

            with self.sim.lock:
                playing = self.sim.playing
            if playing:
                self.sim.step_frame()

            self.draw()
            self.clock.tick(FPS)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.sim.running = False
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.sim.toggle_play()
                elif event.key == pygame.K_RIGHT:
                    with self.sim.lock:
                        paused = not self.sim.playing
                    if paused:
                        self.sim.step_frame()
                elif event.key == pygame.K_r:
                    self.sim.restart()

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        with self.sim.lock:
            show_orbits = self.sim.show_orbits
            show_distances = self.sim.show_distances
        commands = self.sim.frame_commands()

        if show_orbits:
            for color, path in self.sim.orbit_paths():
                pts = [p for p in (_safe_point(sp) for sp in path) if p]
                if len(pts) > 1:
                    pygame.draw.lines(surf, color, False, pts, 1)

        for cmd in commands:
            pt = _safe_point((cmd.screen_x, cmd.screen_y))
            if pt is None:
                continue
            r = max(1, int(cmd.radius))
            gfxdraw.filled_circle(surf, pt[0], pt[1], r, cmd.color)
            gfxdraw.aacircle(surf, pt[0], pt[1], r, cmd.color)
            draw_text(surf, cmd.label, pt[0], pt[1] - r - 10, cmd.color, center=True)
            if show_distances and cmd.distance_text:
                draw_text(surf, cmd.distance_text, pt[0], pt[1], HUD_COLOR, center=True)

        with self.sim.lock:
            days = self.sim.simulation.elapsed_time / SECONDS_PER_DAY
            playing = self.sim.playing
            halted = self.sim.halted_reason
        status = "Halted" if halted else ("Playing" if playing else "Paused")
        draw_text(surf, f"Day {days:.0f}  [{status}]", 10, 10, HUD_COLOR)
        draw_text(surf, "Space: Pause/Play | Right: Step | R: Restart | Esc: Quit", 10, HEIGHT - 24, HUD_COLOR)
        if halted:
            draw_text(surf, halted, 10, 30, (255, 80, 80))

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color, center=False):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 14)
    img = _cached_font.render(text, True, color)
    if center:
        x -= img.get_width() // 2
        y -= img.get_height() // 2
    surface.blit(img, (x, y))

def _safe_point(pt):
    x, y = pt
    if not (-SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT):
        return None
    return (int(x), int(y))

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui control panel: play/pause, single step, restart, scene selection,
    display toggles and live readouts.
    """
    def __init__(self, sim: SimulationController):
        self.sim = sim
        self._template_map = {}
        self.status_msg_id = None
        self.elapsed_id = None
        self.energy_id = None
        self.distances_id = None

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="Planet Simulation - Controls", width=380, height=520)

        self._template_map = {display: fn for fn, display in list_templates()}
        scenes = [BUILTIN_SCENE] + list(self._template_map)

        with dpg.window(label="Controls", width=380, height=520, no_close=True):
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=lambda: self._toggle_play())
                dpg.add_button(label="Step", callback=lambda: self._step_once())
                dpg.add_button(label="Restart", callback=lambda: self._restart())
            dpg.add_separator()
            dpg.add_combo(scenes, default_value=self.sim.scene_name, label="Scene",
                          callback=lambda s, a: self.load_scene(a))
            dpg.add_checkbox(label="Show orbits", default_value=True,
                             callback=lambda s, a: self._set_flag("show_orbits", a))
            dpg.add_checkbox(label="Show distances", default_value=True,
                             callback=lambda s, a: self._set_flag("show_distances", a))
            dpg.add_separator()
            self.elapsed_id = dpg.add_text("Day 0")
            self.energy_id = dpg.add_text("Energy drift: 0")
            self.distances_id = dpg.add_text("")
            dpg.add_separator()
            self.status_msg_id = dpg.add_text("", wrap=360)

        dpg.setup_dearpygui()
        dpg.show_viewport()

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _set_flag(self, name: str, value):
        with self.sim.lock:
            setattr(self.sim, name, bool(value))

    def _toggle_play(self):
        playing = self.sim.toggle_play()
        self._set_status(f"Simulation {'Playing' if playing else 'Paused'}.")

    def _step_once(self):
        with self.sim.lock:
            self.sim.playing = False
        if self.sim.step_frame():
            self._set_status("Stepped one frame.")

    def _restart(self):
        self.sim.restart()
        self._set_status("Simulation restarted.")

    def load_scene(self, name: str):
        try:
            if name in self._template_map:
                simulation, scale, display_name = load_template(self._template_map[name])
            else:
                simulation, scale, display_name = build_inner_solar_system(), SCALE, BUILTIN_SCENE
        except ConfigurationError as e:
            logger.error("Cannot load scene %s: %s", name, e)
            self._set_error(f"Cannot load {name}: {e}")
            return
        self.sim.replace_scene(simulation, scale, display_name)
        self._set_status(f"Loaded scene: {display_name}")

    def _sync_ui_with_sim(self):
        """Periodic UI update of the clock, energy drift and distance readouts."""
        with self.sim.lock:
            simulation = self.sim.simulation
            days = simulation.elapsed_time / SECONDS_PER_DAY
            lines = [
                f"{b.name}: {b.distance_to_star / 1000.0:.1f} km"
                for b in simulation.bodies if not b.is_star
            ]
            halted = self.sim.halted_reason
        dpg.set_value(self.elapsed_id, f"Day {days:.0f}")
        dpg.set_value(self.energy_id, f"Energy drift: {self.sim.energy_drift():+.2e}")
        dpg.set_value(self.distances_id, "\n".join(lines))
        if halted:
            self._set_error(f"Halted: {halted}. Press Restart.")
        if not self.sim.running:
            dpg.stop_dearpygui()
            return
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def build_controller(template: Optional[str] = None) -> SimulationController:
    """Create the starting scene; raises ConfigurationError on bad setup."""
    if template:
        simulation, scale, name = load_template(template)
    else:
        simulation, scale, name = build_inner_solar_system(), SCALE, BUILTIN_SCENE
    if scale is None:
        scale = scale_to_fit(simulation.bodies, (WIDTH, HEIGHT))
    mapper = CoordinateMapper(scale, origin=(WIDTH / 2, HEIGHT / 2))
    return SimulationController(simulation, mapper, name)

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Real-time N-body planet simulation.")
    parser.add_argument("--template", help="JSON scene template (file in planetsim/templates or a path)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

    try:
        sim = build_controller(args.template)
    except ConfigurationError as e:
        logger.error("FATAL CONFIGURATION ERROR: %s", e)
        return 1

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
    return 0

if __name__ == "__main__":
    sys.exit(main())
