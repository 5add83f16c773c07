"""Tests for creature configuration and its expansion into a descriptor tree."""

import math
import random

import pytest

from creature.configuration import (
    BodyShape,
    CreatureConfiguration,
    LegConfiguration,
    body_radii,
    build_creature,
    build_creature_descriptor,
)
from creature.constants import LEG_SHADE
from creature.data_models import Side
from creature.descriptors import (
    AngleConstraintDescriptor,
    DistanceConstraintDescriptor,
    FabrikConstraintDescriptor,
)
from creature.utils import color_mul, hex_to_rgb


class TestCreatureLayout:
    """Test the descriptor tree built from the stock configuration."""

    @pytest.fixture
    def descriptor(self, default_config):
        return build_creature_descriptor(default_config)

    def test_main_body(self, descriptor, default_config) -> None:
        """Should chain 20 joints under a distance then an angle constraint."""
        assert len(descriptor.joints) == 20
        distance, angle = descriptor.constraints
        assert distance == DistanceConstraintDescriptor(distance=default_config.joint_distance)
        assert isinstance(angle, AngleConstraintDescriptor)
        assert angle.angle == default_config.angle_constraint
        assert angle.rate == 0.5
        assert descriptor.fill_color == tuple(default_config.color)

    def test_eyes_on_head(self, descriptor) -> None:
        """Should hang two mirrored eyes from the head, each with sclera and pupil."""
        eyes = descriptor.joints[0].bodies
        assert len(eyes) == 2
        assert eyes[0].attachment_angle == pytest.approx(-eyes[1].attachment_angle)
        for eye in eyes:
            assert len(eye.joints) == 1
            assert len(eye.joints[0].bodies) == 2
            assert eye.constraints == []

    def test_leg_pairs(self, descriptor, default_config) -> None:
        """Should hang a mirrored pair of legs at each leg's body ratio."""
        assert len(descriptor.joints[5].bodies) == 2
        assert len(descriptor.joints[12].bodies) == 2
        legged = [i for i, j in enumerate(descriptor.joints) if j.bodies]
        assert legged == [0, 5, 12]

        joint = descriptor.joints[5]
        left, right = joint.bodies
        for leg in (left, right):
            assert leg.side is Side.BACK
            assert [j.radius for j in leg.joints] == [12.0, 12.0, 12.0]
            assert leg.fill_color == color_mul(default_config.color, hex_to_rgb(LEG_SHADE))
            assert leg.attachment_offset == pytest.approx(max(joint.radius - 12.0, 0.0) / joint.radius)
            (fabrik,) = leg.constraints
            assert isinstance(fabrik, FabrikConstraintDescriptor)
            assert fabrik.joint_distance == 30.0
            assert fabrik.target_distance == pytest.approx(58.5)
            assert fabrik.max_distance == 100.0
        assert left.attachment_angle == pytest.approx(-math.pi / 2)
        assert right.attachment_angle == pytest.approx(math.pi / 2)
        assert left.constraints[0].target_angle == pytest.approx(-0.75 * math.pi)
        assert right.constraints[0].target_angle == pytest.approx(0.75 * math.pi)

    def test_out_of_range_legs_skipped(self, small_config) -> None:
        """Should drop legs whose body ratio falls off the body."""
        small_config.legs = [LegConfiguration(body_ratio=1.0), LegConfiguration(body_ratio=-0.2)]
        descriptor = build_creature_descriptor(small_config)
        assert all(not j.bodies for j in descriptor.joints[1:])

    def test_no_joints(self) -> None:
        """Should build an empty creature without eyes or legs."""
        body = build_creature(CreatureConfiguration(joints=0))
        assert body.joints == []
        assert body.joint_count() == 0

    def test_joint_count(self, small_config) -> None:
        """Should count body, eye and leg joints."""
        body = build_creature(small_config)
        # 6 body joints, 2 eyes of 3 one-joint bodies, 2 legs of 3 joints
        assert body.joint_count() == 6 + 6 + 6


class TestBodyRadii:
    """Test the radius profile along the body."""

    def test_flat_without_shapes(self, small_config) -> None:
        """Should use the base radius everywhere."""
        assert body_radii(small_config) == [20.0] * 6

    def test_minimum_radius(self) -> None:
        """Should never go below 1."""
        config = CreatureConfiguration(radius=0.0, joints=4, shapes=[])
        assert body_radii(config) == [1.0] * 4

    def test_shapes_add_up(self) -> None:
        """Should add each sine term at the joint's fraction along the body."""
        shape = BodyShape(amplitude=10.0, constant_offset=math.pi / 2, frequency_multiplier=0.0)
        config = CreatureConfiguration(radius=5.0, joints=2, shapes=[shape, shape])
        assert body_radii(config) == pytest.approx([25.0, 25.0])


class TestConfigurationState:
    """Test sanitizing, copying and dict conversion."""

    def test_sanitize_rounds_up(self) -> None:
        """Should round slider floats up to whole joints."""
        config = CreatureConfiguration(joints=5.2, legs=[LegConfiguration(joints=2.1)])
        config.sanitize()
        assert config.joints == 6.0
        assert config.legs[0].joints == 3.0

    def test_copy_is_equal_and_detached(self, default_config) -> None:
        """Should compare equal, keep ids and not share lists."""
        copy = default_config.copy()
        assert copy == default_config
        assert [l.id for l in copy.legs] == [l.id for l in default_config.legs]
        copy.legs[0].thickness = 1.0
        assert copy != default_config

    def test_duplicate_leg(self) -> None:
        """Should copy settings under a fresh id."""
        leg = LegConfiguration(angle=2.0)
        twin = leg.duplicate()
        assert twin == leg
        assert twin.id != leg.id

    def test_dict_round_trip(self, default_config) -> None:
        """Should restore an equal configuration from its dict."""
        assert CreatureConfiguration.from_dict(default_config.to_dict()) == default_config

    def test_from_dict_defaults(self) -> None:
        """Should keep defaults for missing keys and round joints up."""
        config = CreatureConfiguration.from_dict({"joints": 7.5, "legs": []})
        assert config.joints == 8.0
        assert config.legs == []
        assert config.radius == CreatureConfiguration().radius
        assert len(config.shapes) == len(CreatureConfiguration().shapes)

    def test_from_dict_bad_value(self) -> None:
        """Should raise on values that are not numbers."""
        with pytest.raises(ValueError):
            CreatureConfiguration.from_dict({"radius": "wide"})

    def test_random_parts_are_seedable(self) -> None:
        """Should produce the same random shape and leg for the same seed."""
        assert BodyShape.random(random.Random(3)) == BodyShape.random(random.Random(3))
        assert LegConfiguration.random(random.Random(3)) == LegConfiguration.random(random.Random(3))
