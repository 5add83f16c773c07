"""Tests for the 2D camera transforms."""

import pytest

from creature.camera import Camera2D
from creature.constants import MAX_ZOOM, MIN_ZOOM


@pytest.fixture
def camera() -> Camera2D:
    cam = Camera2D()
    cam.set_viewport_size(1100, 800)
    return cam


class TestCamera2D:
    """Test world/screen mapping, zoom and pan."""

    def test_origin_at_viewport_centre(self, camera) -> None:
        """Should map the world origin to the middle of the screen."""
        assert camera.world_to_screen((0.0, 0.0)) == (550, 400)
        assert camera.screen_to_world((550, 400)) == (0.0, 0.0)

    def test_half_extent_scales_with_zoom(self, camera) -> None:
        """Should shrink the visible area as the zoom grows."""
        assert camera.half_extent() == (550.0, 400.0)
        camera.zoom = 2.0
        assert camera.half_extent() == (275.0, 200.0)

    def test_zoom_keeps_pivot_fixed(self, camera) -> None:
        """Should keep the world point under the cursor in place."""
        pivot = (100, 50)
        before = camera.screen_to_world(pivot)
        camera.zoom_by(2.0, pivot)
        assert camera.zoom == 2.0
        assert camera.world_to_screen(before) == pivot

    def test_zoom_is_clamped(self, camera) -> None:
        """Should stay within the zoom limits."""
        camera.zoom_by(1000.0)
        assert camera.zoom == MAX_ZOOM
        for _ in range(10):
            camera.zoom_by(0.01)
        assert camera.zoom == MIN_ZOOM

    def test_pan(self, camera) -> None:
        """Should move the centre opposite to the drag, in world units."""
        camera.zoom = 2.0
        camera.pan_pixels(100, -40)
        assert camera.center == [-50.0, 20.0]
