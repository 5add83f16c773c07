"""Tests for number parsing and colour helpers."""

from creature.utils import coerce_color, color_mix, color_mul, hex_to_rgb, try_float


def test_try_float() -> None:
    """Should parse numbers and strings, and return None otherwise."""
    assert try_float("2.5") == 2.5
    assert try_float(3) == 3.0
    assert try_float("abc") is None
    assert try_float(None) is None


def test_hex_to_rgb() -> None:
    """Should split 0xRRGGBB into channels."""
    assert hex_to_rgb(0x61A5B8) == (97, 165, 184)
    assert hex_to_rgb(0x000000) == (0, 0, 0)


def test_color_mul() -> None:
    """Should treat channels as fractions of 255."""
    assert color_mul((255, 255, 255), (221, 221, 221)) == (221, 221, 221)
    assert color_mul((0, 128, 255), (255, 255, 0)) == (0, 128, 0)


def test_color_mix() -> None:
    """Should blend linearly between the two colours."""
    assert color_mix((0, 0, 0), (200, 100, 50), 0.0) == (0, 0, 0)
    assert color_mix((0, 0, 0), (200, 100, 50), 1.0) == (200, 100, 50)
    assert color_mix((0, 0, 0), (200, 100, 50), 0.5) == (100, 50, 25)


class TestCoerceColor:
    """Test colour coercion from JSON and UI values."""

    def test_clamps_and_rounds(self) -> None:
        """Should clamp channels into 0..255 and round floats."""
        assert coerce_color([300, -5, 12.6], (1, 1, 1)) == (255, 0, 13)

    def test_ignores_alpha(self) -> None:
        """Should keep only the first three channels."""
        assert coerce_color((10, 20, 30, 255), (1, 1, 1)) == (10, 20, 30)

    def test_unreadable_gives_default(self) -> None:
        """Should fall back on short, missing or non-numeric input."""
        assert coerce_color(None, (1, 2, 3)) == (1, 2, 3)
        assert coerce_color([1, 2], (1, 2, 3)) == (1, 2, 3)
        assert coerce_color(["a", 2, 3], (1, 2, 3)) == (1, 2, 3)
        assert coerce_color(5, (1, 2, 3)) == (1, 2, 3)
