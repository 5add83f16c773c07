"""Tests for 2D vector helpers."""

import math

import pytest

from creature.vector_utils import (
    DEFAULT_DIRECTION,
    clamp,
    vec_angle_between,
    vec_distance,
    vec_from_angle,
    vec_lerp,
    vec_norm,
    vec_perp_dot,
    vec_to_angle,
)


class TestNormalize:
    """Test normalization, including the degenerate case."""

    def test_unit_length(self) -> None:
        """Should scale to length 1."""
        assert vec_norm((3.0, 4.0)) == pytest.approx((0.6, 0.8))

    def test_zero_vector_falls_back(self) -> None:
        """Should return the default direction instead of NaN."""
        assert vec_norm((0.0, 0.0)) == DEFAULT_DIRECTION
        assert vec_to_angle(vec_norm((0.0, 0.0))) == 0.0


class TestAngles:
    """Test angle helpers."""

    def test_from_to_angle(self) -> None:
        """Should round-trip through a direction vector."""
        assert vec_to_angle(vec_from_angle(1.2)) == pytest.approx(1.2)

    def test_signed_angle_between(self) -> None:
        """Should be positive counter-clockwise and negative clockwise."""
        assert vec_angle_between((1.0, 0.0), (0.0, 1.0)) == pytest.approx(math.pi / 2)
        assert vec_angle_between((1.0, 0.0), (0.0, -1.0)) == pytest.approx(-math.pi / 2)

    def test_opposite_vectors(self) -> None:
        """Should report pi for a straight line through the vertex."""
        assert abs(vec_angle_between((-1.0, 0.0), (1.0, 0.0))) == pytest.approx(math.pi)

    def test_perp_dot_sign(self) -> None:
        """Should be negative when the second vector turns clockwise."""
        assert vec_perp_dot((1.0, 0.0), (0.0, -1.0)) < 0
        assert vec_perp_dot((1.0, 0.0), (0.0, 1.0)) > 0


class TestMisc:
    """Test the remaining helpers."""

    def test_lerp_endpoints(self) -> None:
        """Should hit both endpoints and the midpoint."""
        assert vec_lerp((0.0, 0.0), (10.0, 4.0), 0.0) == (0.0, 0.0)
        assert vec_lerp((0.0, 0.0), (10.0, 4.0), 1.0) == (10.0, 4.0)
        assert vec_lerp((0.0, 0.0), (10.0, 4.0), 0.5) == (5.0, 2.0)

    def test_distance(self) -> None:
        """Should be Euclidean."""
        assert vec_distance((1.0, 1.0), (4.0, 5.0)) == 5.0

    def test_clamp(self) -> None:
        """Should clamp into the inclusive range."""
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2
