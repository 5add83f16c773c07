#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.

The world origin maps to the centre of the viewport at zero pan; zoom is screen
pixels per world unit.
"""
from typing import Optional, Tuple

from .constants import (
    DEFAULT_ZOOM,
    MAX_ZOOM,
    MIN_ZOOM,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import Vec2, clamp


class Camera2D:
    """
    Simple 2D camera that maps world coordinates to screen pixels.
    """

    def __init__(self, center=(0.0, 0.0), zoom=DEFAULT_ZOOM):
        self.center = [center[0], center[1]]
        self.zoom = zoom
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def half_extent(self) -> Vec2:
        """Half the visible area, in world units."""
        return (self.viewport_size[0] / 2 / self.zoom, self.viewport_size[1] / 2 / self.zoom)

    def world_to_screen(self, pos: Vec2) -> Tuple[int, int]:
        cx, cy = self.center
        px = (pos[0] - cx) * self.zoom + self.viewport_size[0] / 2
        py = (pos[1] - cy) * self.zoom + self.viewport_size[1] / 2
        return (int(px), int(py))

    def screen_to_world(self, screen: Tuple[int, int]) -> Vec2:
        cx, cy = self.center
        wx = (screen[0] - self.viewport_size[0] / 2) / self.zoom + cx
        wy = (screen[1] - self.viewport_size[1] / 2) / self.zoom + cy
        return (wx, wy)

    def zoom_by(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_world(pivot_screen)
        self.zoom = clamp(self.zoom * factor, MIN_ZOOM, MAX_ZOOM)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_world(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels / self.zoom
        self.center[1] -= dy_pixels / self.zoom
