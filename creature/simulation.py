#!/usr/bin/env python3
"""
Simulation controller: shared state between the UI thread (Dear PyGui) and the
rendering thread (Pygame).

The controller owns the live creature, its configuration and the driver settings.
All access goes through a re-entrant lock. The render thread calls step() once per
frame; UI callbacks edit the configuration and call apply_configuration(), which
replaces the whole tree when the configuration actually changed.
"""
import logging
import threading
from typing import Callable, Optional

from .configuration import CreatureConfiguration, build_creature
from .constants import FOLLOW_RATE
from .constraints import ConstraintError
from .data_models import Body
from .kinematics import apply_constraints, drive_root, lissajous_target
from .vector_utils import Vec2

logger = logging.getLogger(__name__)


class SimulationController:
    """
    Shared state for the app. Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, config: Optional[CreatureConfiguration] = None):
        self.lock = threading.RLock()
        self.config = config or CreatureConfiguration()
        self.config.sanitize()
        self._last_config = self.config.copy()
        self.body: Body = build_creature(self.config)
        self.running = True  # app running
        self.playing = True  # creature moving
        self.debug = False
        self.use_mouse = False
        self.mouse_world: Vec2 = (0.0, 0.0)
        self.follow_rate = FOLLOW_RATE
        self.time = 0.0
        self.frame = 0
        self.last_error: Optional[str] = None

    def replace_config(self, config: CreatureConfiguration) -> None:
        """Swap in a whole new configuration (e.g. a loaded preset) and rebuild."""
        with self.lock:
            self.config = config
            self.apply_configuration(force=True)

    def edit_config(self, edit: Callable[[CreatureConfiguration], None]) -> bool:
        """Run `edit` on the configuration under the lock, then rebuild if it changed."""
        with self.lock:
            edit(self.config)
            return self.apply_configuration()

    def apply_configuration(self, force: bool = False) -> bool:
        """
        Rebuild the creature if the configuration differs from the last build.

        The new tree starts with every joint at the origin, so the head is moved to
        where the old head was to avoid the creature jumping across the screen.

        Returns:
            True if the tree was rebuilt.
        """
        with self.lock:
            self.config.sanitize()
            if not force and self.config == self._last_config:
                return False
            head = self.body.joints[0].position if self.body.joints else None
            self.body = build_creature(self.config)
            if head is not None and self.body.joints:
                self.body.joints[0].position = head
            self._last_config = self.config.copy()
            logger.info(
                f"Rebuilt creature: {len(self.body.joints)} body joints, "
                f"{self.body.joint_count()} joints total"
            )
            return True

    def toggle_mouse(self) -> None:
        with self.lock:
            self.use_mouse = not self.use_mouse

    def set_mouse_world(self, pos: Vec2) -> None:
        with self.lock:
            self.mouse_world = pos

    def driven_target(self, half_extent: Vec2) -> Vec2:
        """Where the head is heading this frame: the mouse, or the idle figure-eight."""
        with self.lock:
            if self.use_mouse:
                return self.mouse_world
            return lissajous_target(self.time, half_extent)

    def step(self, dt_real_seconds: float, half_extent: Vec2) -> None:
        """
        Advance the creature by one frame: ease the head toward the driven target,
        then run the solver over the whole tree.

        A ConstraintError means the tree is misconfigured; the simulation is paused
        and the error kept in last_error for the UI rather than killing the render thread.
        """
        with self.lock:
            if not self.playing:
                return
            self.time += dt_real_seconds
            drive_root(self.body, self.driven_target(half_extent), self.follow_rate)
            try:
                apply_constraints(self.body)
            except ConstraintError as e:
                self.playing = False
                self.last_error = str(e)
                logger.error(f"Solver stopped on frame {self.frame}: {e}")
                return
            self.frame += 1
