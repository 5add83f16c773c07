"""Pytest configuration and fixtures for Procedural Creature tests.

Provides reusable fixtures for:
- Joint chains laid out from point lists
- Creature configurations
- Temporary preset directories
"""

import math
from typing import Callable, List, Sequence, Tuple

import pytest

from creature.configuration import CreatureConfiguration, LegConfiguration
from creature.data_models import Joint


@pytest.fixture
def make_chain() -> Callable[..., List[Joint]]:
    """Factory building a joint chain from (x, y) points.

    Returns:
        make(points, radius=5.0) -> list of joints at those points
    """
    def make(points: Sequence[Tuple[float, float]], radius: float = 5.0) -> List[Joint]:
        return [Joint(radius=radius, position=(float(x), float(y))) for x, y in points]

    return make


@pytest.fixture
def default_config() -> CreatureConfiguration:
    """The stock creature: 20 joints, two pairs of legs."""
    return CreatureConfiguration()


@pytest.fixture
def small_config() -> CreatureConfiguration:
    """A short creature with a single pair of legs, no radius shaping."""
    return CreatureConfiguration(
        angle_constraint=0.8 * math.pi,
        radius=20.0,
        joints=6.0,
        joint_distance=15.0,
        shapes=[],
        legs=[LegConfiguration(joint_distance=20.0, body_ratio=0.5, thickness=8.0)],
    )


@pytest.fixture
def presets_dir(tmp_path):
    """Empty directory used in place of the bundled presets folder."""
    directory = tmp_path / "presets"
    directory.mkdir()
    return directory
