#!/usr/bin/env python3
"""
Descriptors: plain-data blueprints for a creature's body tree.

Descriptors are what configuration code builds, compares, copies and stores as JSON.
build_body converts a descriptor tree into a live Body tree once, at (re)build time;
nothing ever converts back. The mapping preserves order and does no validation beyond
shape, so odd values (a negative radius, a rate above 1) reach the solver unchanged.

JSON shape
==========
Body descriptor:
{
  "fill_color": [97, 165, 184],
  "line_color": [0, 0, 0],
  "line_thickness": 6.0,
  "attachment_angle": 0.0,
  "attachment_offset": 0.0,
  "side": "front",
  "joints": [{"radius": 30.0, "bodies": [...]}, ...],
  "constraints": [
    {"type": "distance", "distance": 20.0, "rate": 1.0, "direction": "forward"},
    {"type": "angle", "angle": 2.83, "rate": 0.5},
    {"type": "fabrik", "joint_distance": 25.0, "rate": 0.25, "target_angle": 2.36,
     "target_distance": 48.75, "max_distance": 100.0}
  ]
}
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Union

from .constants import (
    DEFAULT_ANGLE_CONSTRAINT,
    DEFAULT_ANGLE_RATE,
    DEFAULT_DISTANCE_RATE,
    DEFAULT_FABRIK_JOINT_DISTANCE,
    DEFAULT_FABRIK_MAX_DISTANCE,
    DEFAULT_FABRIK_RATE,
    DEFAULT_FABRIK_TARGET_DISTANCE,
    LINE_COLOR,
    LINE_THICKNESS,
)
from .constraints import (
    AngleConstraint,
    Constraint,
    Direction,
    DistanceConstraint,
    FabrikConstraint,
)
from .data_models import Body, Joint, Side
from .utils import Color, coerce_color


@dataclass
class DistanceConstraintDescriptor:
    distance: float = 20.0
    rate: float = DEFAULT_DISTANCE_RATE
    direction: Direction = Direction.FORWARD


@dataclass
class AngleConstraintDescriptor:
    angle: float = DEFAULT_ANGLE_CONSTRAINT
    rate: float = DEFAULT_ANGLE_RATE


@dataclass
class FabrikConstraintDescriptor:
    """
    Fields:
    - joint_distance: Distance between consecutive joints of the limb
    - rate: Rate of the pass pulling the limb toward its target
    - target_angle: Angle of the target relative to the attachment angle
    - target_distance: Distance of the target from the attachment point
    - max_distance: Max drift between the current and the preferred target
    """
    joint_distance: float = DEFAULT_FABRIK_JOINT_DISTANCE
    rate: float = DEFAULT_FABRIK_RATE
    target_angle: float = 0.0
    target_distance: float = DEFAULT_FABRIK_TARGET_DISTANCE
    max_distance: float = DEFAULT_FABRIK_MAX_DISTANCE


ConstraintDescriptor = Union[
    DistanceConstraintDescriptor,
    AngleConstraintDescriptor,
    FabrikConstraintDescriptor,
]

_CONSTRAINT_TYPES = {
    "distance": DistanceConstraintDescriptor,
    "angle": AngleConstraintDescriptor,
    "fabrik": FabrikConstraintDescriptor,
}


@dataclass
class JointDescriptor:
    radius: float = 10.0
    bodies: List["BodyDescriptor"] = field(default_factory=list)

    def add_body(self, body: "BodyDescriptor") -> None:
        self.bodies.append(body)


@dataclass
class BodyDescriptor:
    fill_color: Color = (255, 255, 255)
    line_color: Color = LINE_COLOR
    line_thickness: float = LINE_THICKNESS
    joints: List[JointDescriptor] = field(default_factory=list)
    constraints: List[ConstraintDescriptor] = field(default_factory=list)
    attachment_angle: float = 0.0
    attachment_offset: float = 0.0
    side: Side = Side.FRONT


# -----------------------
# Descriptor -> live tree
# -----------------------

def build_constraint(descriptor: ConstraintDescriptor) -> Constraint:
    if isinstance(descriptor, DistanceConstraintDescriptor):
        return DistanceConstraint(
            distance=descriptor.distance,
            rate=descriptor.rate,
            direction=descriptor.direction,
        )
    if isinstance(descriptor, AngleConstraintDescriptor):
        return AngleConstraint(angle=descriptor.angle, rate=descriptor.rate)
    if isinstance(descriptor, FabrikConstraintDescriptor):
        return FabrikConstraint.create(
            joint_distance=descriptor.joint_distance,
            rate=descriptor.rate,
            target_angle=descriptor.target_angle,
            target_distance=descriptor.target_distance,
            max_distance=descriptor.max_distance,
        )
    raise TypeError(f"Unsupported constraint descriptor: {type(descriptor).__name__}")


def build_joint(descriptor: JointDescriptor) -> Joint:
    """New joint at the origin; the first solver pass positions it."""
    return Joint(
        radius=descriptor.radius,
        children=[build_body(b) for b in descriptor.bodies],
    )


def build_body(descriptor: BodyDescriptor) -> Body:
    """Convert a descriptor tree into a fresh live Body tree."""
    return Body(
        joints=[build_joint(j) for j in descriptor.joints],
        constraints=[build_constraint(c) for c in descriptor.constraints],
        attachment_angle=descriptor.attachment_angle,
        attachment_offset=descriptor.attachment_offset,
        fill_color=tuple(descriptor.fill_color),
        line_color=tuple(descriptor.line_color),
        line_thickness=descriptor.line_thickness,
        side=descriptor.side,
    )


# -----------------------
# JSON dicts
# -----------------------

def constraint_to_dict(descriptor: ConstraintDescriptor) -> Dict[str, Any]:
    for name, cls in _CONSTRAINT_TYPES.items():
        if isinstance(descriptor, cls):
            data = {"type": name}
            data.update(asdict(descriptor))
            if "direction" in data:
                data["direction"] = data["direction"].value
            return data
    raise TypeError(f"Unsupported constraint descriptor: {type(descriptor).__name__}")


def constraint_from_dict(data: Dict[str, Any]) -> ConstraintDescriptor:
    """
    Build a constraint descriptor from its JSON dict.

    Raises:
        ValueError: Unknown "type" or "direction".
        KeyError: "type" is missing.
    """
    kind = data["type"]
    cls = _CONSTRAINT_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown constraint type: {kind!r}")
    fields = {k: v for k, v in data.items() if k != "type"}
    if "direction" in fields:
        fields["direction"] = Direction(fields["direction"])
    return cls(**fields)


def body_to_dict(descriptor: BodyDescriptor) -> Dict[str, Any]:
    return {
        "fill_color": list(descriptor.fill_color),
        "line_color": list(descriptor.line_color),
        "line_thickness": descriptor.line_thickness,
        "attachment_angle": descriptor.attachment_angle,
        "attachment_offset": descriptor.attachment_offset,
        "side": descriptor.side.value,
        "joints": [
            {"radius": j.radius, "bodies": [body_to_dict(b) for b in j.bodies]}
            for j in descriptor.joints
        ],
        "constraints": [constraint_to_dict(c) for c in descriptor.constraints],
    }


def body_from_dict(data: Dict[str, Any]) -> BodyDescriptor:
    """Inverse of body_to_dict; missing keys fall back to descriptor defaults."""
    defaults = BodyDescriptor()
    return BodyDescriptor(
        fill_color=coerce_color(data.get("fill_color"), defaults.fill_color),
        line_color=coerce_color(data.get("line_color"), defaults.line_color),
        line_thickness=float(data.get("line_thickness", defaults.line_thickness)),
        attachment_angle=float(data.get("attachment_angle", defaults.attachment_angle)),
        attachment_offset=float(data.get("attachment_offset", defaults.attachment_offset)),
        side=Side(data.get("side", defaults.side.value)),
        joints=[
            JointDescriptor(
                radius=float(j.get("radius", JointDescriptor.radius)),
                bodies=[body_from_dict(b) for b in j.get("bodies", [])],
            )
            for j in data.get("joints", [])
        ],
        constraints=[constraint_from_dict(c) for c in data.get("constraints", [])],
    )
