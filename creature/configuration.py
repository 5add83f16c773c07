#!/usr/bin/env python3
"""
Creature configuration: the knobs exposed in the UI and stored in presets.

A CreatureConfiguration describes a creature at a high level (how many joints, how thick,
which legs). build_creature_descriptor turns it into a BodyDescriptor tree:

- a main body whose joint radii follow a sum of sine "shapes" along its length,
  constrained by a forward distance pass and a minimum bend angle;
- two eyes on the head, each a one-joint body carrying a sclera and a pupil;
- a mirrored pair of Fabrik legs for every LegConfiguration, hung from the joint
  at `body_ratio` along the body.

Randomness lives here (BodyShape.random, LegConfiguration.random), never in the solver.
"""
import itertools
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .constants import (
    DEFAULT_ANGLE_CONSTRAINT,
    DEFAULT_ANGLE_RATE,
    DEFAULT_BODY_COLOR,
    DEFAULT_EYE_COLOR,
    EYE_LINE_COLOR,
    LEG_SHADE,
)
from .data_models import Body, Side
from .descriptors import (
    AngleConstraintDescriptor,
    BodyDescriptor,
    DistanceConstraintDescriptor,
    FabrikConstraintDescriptor,
    JointDescriptor,
    build_body,
)
from .utils import Color, coerce_color, color_mul, hex_to_rgb

_ui_ids = itertools.count(1)


def next_ui_id() -> int:
    """Process-wide id used to key UI widgets of shapes and legs."""
    return next(_ui_ids)


@dataclass
class BodyShape:
    """One sine term of the body's radius profile."""
    amplitude: float = 5.0
    constant_offset: float = 0.0
    frequency_multiplier: float = 1.0
    id: int = field(default_factory=next_ui_id, compare=False)

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "BodyShape":
        rng = rng or random.Random()
        return cls(
            amplitude=rng.uniform(0.0, 30.0),
            constant_offset=rng.uniform(0.0, 2.0 * math.pi),
            frequency_multiplier=rng.uniform(-12.0, 12.0),
        )

    def radius_at(self, fraction: float) -> float:
        return self.amplitude * math.sin(self.constant_offset + self.frequency_multiplier * fraction)


@dataclass
class LegConfiguration:
    """
    A mirrored pair of legs.

    Fields:
    - angle: Target direction relative to the body heading (mirrored for the left leg)
    - joints: Joints per leg (rounded up by sanitize)
    - joint_distance: Spacing between leg joints
    - body_ratio: Where along the body the pair hangs, 0 = head, 1 = tail
    - target_ratio: Target distance as a fraction of the leg's full length
    - target_max_distance: How far the foot may lag before it steps
    - thickness: Joint radius of the leg
    """
    angle: float = math.pi * 0.75
    joints: float = 3.0
    joint_distance: float = 25.0
    body_ratio: float = 0.4
    target_ratio: float = 0.65
    target_max_distance: float = 100.0
    thickness: float = 12.0
    id: int = field(default_factory=next_ui_id, compare=False)

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "LegConfiguration":
        rng = rng or random.Random()
        return cls(
            thickness=rng.uniform(5.0, 25.0),
            angle=math.pi * rng.uniform(0.5, 0.8),
            joints=3.0,
            joint_distance=rng.uniform(20.0, 30.0),
            body_ratio=rng.uniform(0.0, 1.0),
            target_ratio=rng.uniform(0.4, 0.8),
            target_max_distance=rng.uniform(60.0, 80.0),
        )

    def duplicate(self) -> "LegConfiguration":
        """Copy with a fresh UI id."""
        data = self.to_dict()
        return LegConfiguration(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angle": self.angle,
            "joints": self.joints,
            "joint_distance": self.joint_distance,
            "body_ratio": self.body_ratio,
            "target_ratio": self.target_ratio,
            "target_max_distance": self.target_max_distance,
            "thickness": self.thickness,
        }


def _default_shapes() -> List[BodyShape]:
    return [
        BodyShape(amplitude=10.0, constant_offset=0.0, frequency_multiplier=2.0 * math.pi),
        BodyShape(amplitude=12.0, constant_offset=1.8, frequency_multiplier=-1.2 * math.pi),
        BodyShape(amplitude=3.0, constant_offset=4.3, frequency_multiplier=math.pi),
    ]


def _default_legs() -> List[LegConfiguration]:
    return [
        LegConfiguration(joint_distance=30.0, body_ratio=0.25),
        LegConfiguration(joint_distance=25.0, body_ratio=0.6),
    ]


@dataclass
class CreatureConfiguration:
    angle_constraint: float = DEFAULT_ANGLE_CONSTRAINT
    radius: float = 30.0
    joints: float = 20.0
    joint_distance: float = 20.0
    color: Color = field(default_factory=lambda: hex_to_rgb(DEFAULT_BODY_COLOR))
    shapes: List[BodyShape] = field(default_factory=_default_shapes)
    legs: List[LegConfiguration] = field(default_factory=_default_legs)

    def sanitize(self) -> None:
        """Round joint counts up to whole joints, as the sliders produce floats."""
        self.joints = float(math.ceil(self.joints))
        for leg in self.legs:
            leg.joints = float(math.ceil(leg.joints))

    def copy(self) -> "CreatureConfiguration":
        """Deep copy that keeps shape and leg ids, for change detection."""
        return CreatureConfiguration(
            angle_constraint=self.angle_constraint,
            radius=self.radius,
            joints=self.joints,
            joint_distance=self.joint_distance,
            color=tuple(self.color),
            shapes=[BodyShape(s.amplitude, s.constant_offset, s.frequency_multiplier, s.id)
                    for s in self.shapes],
            legs=[LegConfiguration(id=l.id, **l.to_dict()) for l in self.legs],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angle_constraint": self.angle_constraint,
            "radius": self.radius,
            "joints": self.joints,
            "joint_distance": self.joint_distance,
            "color": list(self.color),
            "shapes": [
                {
                    "amplitude": s.amplitude,
                    "constant_offset": s.constant_offset,
                    "frequency_multiplier": s.frequency_multiplier,
                }
                for s in self.shapes
            ],
            "legs": [leg.to_dict() for leg in self.legs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreatureConfiguration":
        """
        Build a configuration from a JSON dict; missing keys keep their defaults.

        Raises:
            TypeError/ValueError: A present field has the wrong shape.
        """
        defaults = cls()
        config = cls(
            angle_constraint=float(data.get("angle_constraint", defaults.angle_constraint)),
            radius=float(data.get("radius", defaults.radius)),
            joints=float(data.get("joints", defaults.joints)),
            joint_distance=float(data.get("joint_distance", defaults.joint_distance)),
            color=coerce_color(data.get("color"), defaults.color),
        )
        if "shapes" in data:
            config.shapes = [BodyShape(**{k: float(v) for k, v in s.items()}) for s in data["shapes"]]
        if "legs" in data:
            config.legs = [LegConfiguration(**{k: float(v) for k, v in l.items()}) for l in data["legs"]]
        config.sanitize()
        return config


def body_radii(config: CreatureConfiguration) -> List[float]:
    """Radius of every main-body joint, never below 1."""
    total = int(config.joints)
    radii = []
    for i in range(total):
        fraction = i / total
        radius = config.radius + sum(s.radius_at(fraction) for s in config.shapes)
        radii.append(max(radius, 1.0))
    return radii


def _eye(mult: float) -> BodyDescriptor:
    sclera = BodyDescriptor(
        line_thickness=0.0,
        joints=[JointDescriptor(radius=5.0)],
        attachment_angle=mult * -math.pi * 0.45,
        attachment_offset=0.3,
    )
    pupil = BodyDescriptor(
        line_thickness=0.0,
        joints=[JointDescriptor(radius=3.5)],
        attachment_angle=mult * math.pi * 0.2,
        attachment_offset=0.5,
    )
    return BodyDescriptor(
        line_color=EYE_LINE_COLOR,
        line_thickness=5.0,
        fill_color=hex_to_rgb(DEFAULT_EYE_COLOR),
        joints=[JointDescriptor(radius=12.0, bodies=[sclera, pupil])],
        attachment_angle=mult * math.pi * 0.7,
        attachment_offset=0.7,
    )


def _legs(config: CreatureConfiguration, leg: LegConfiguration,
          joint: JointDescriptor) -> Tuple[BodyDescriptor, BodyDescriptor]:
    joint_count = int(leg.joints)
    offset = max(joint.radius - leg.thickness, 0.0) / joint.radius if joint.radius else 0.0
    pair = []
    for mult in (-1.0, 1.0):
        pair.append(BodyDescriptor(
            fill_color=color_mul(config.color, hex_to_rgb(LEG_SHADE)),
            joints=[JointDescriptor(radius=leg.thickness) for _ in range(joint_count)],
            attachment_angle=mult * math.pi / 2.0,
            attachment_offset=offset,
            side=Side.BACK,
            constraints=[FabrikConstraintDescriptor(
                joint_distance=leg.joint_distance,
                target_angle=mult * leg.angle,
                target_distance=leg.joint_distance * leg.joints * leg.target_ratio,
                max_distance=leg.target_max_distance,
            )],
        ))
    return pair[0], pair[1]


def build_creature_descriptor(config: CreatureConfiguration) -> BodyDescriptor:
    """Expand a configuration into the full descriptor tree of the creature."""
    body = BodyDescriptor(
        fill_color=tuple(config.color),
        joints=[JointDescriptor(radius=r) for r in body_radii(config)],
        constraints=[
            DistanceConstraintDescriptor(distance=config.joint_distance),
            AngleConstraintDescriptor(angle=config.angle_constraint, rate=DEFAULT_ANGLE_RATE),
        ],
    )

    if body.joints:
        head = body.joints[0]
        for mult in (-1.0, 1.0):
            head.add_body(_eye(mult))

    for leg in config.legs:
        joint_index = int(len(body.joints) * leg.body_ratio)
        if not 0 <= joint_index < len(body.joints):
            continue
        joint = body.joints[joint_index]
        for leg_body in _legs(config, leg, joint):
            joint.add_body(leg_body)

    return body


def build_creature(config: CreatureConfiguration) -> Body:
    return build_body(build_creature_descriptor(config))
