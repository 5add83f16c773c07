#!/usr/bin/env python3
"""
Data models for Procedural Creature.

This module defines the live skeleton shared between the solver, rendering, and UI.

Structure
- A Body is an ordered chain of Joints plus the constraints applied to that chain.
- Every Joint may own child Bodies (legs, eyes) anchored to its surface.
- The tree is strict: children are owned by value and never point back at their parent.
  The parent's pose reaches a child only as an AttachmentPoint passed down by the solver.

Units and usage
- position is in world units (pixels at zoom 1), radius in world units, angle in radians.
- position and angle are rewritten every frame by creature.kinematics.apply_constraints.
- Access to a live tree is coordinated by SimulationController using a lock.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Tuple

from .constants import LINE_COLOR, LINE_THICKNESS
from .vector_utils import Vec2, ZERO

if TYPE_CHECKING:
    from .constraints import Constraint


class Side(Enum):
    """Whether a child body is drawn behind or in front of its parent."""
    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True)
class AttachmentPoint:
    """Where a child body is pinned this frame, and the angle it inherits."""
    position: Vec2
    angle: float


@dataclass
class Joint:
    """
    A positioned, radius-bearing point of a body.

    Fields:
    - position: World-space location
    - radius: Silhouette half-width; also scales child attachment offsets
    - angle: Orientation derived from neighbouring joints each frame
    - children: Bodies anchored to this joint
    """
    radius: float
    position: Vec2 = ZERO
    angle: float = 0.0
    children: List["Body"] = field(default_factory=list)


@dataclass
class Body:
    """
    An ordered joint chain plus the constraints that shape it.

    Fields:
    - joints: Chain of joints, head first
    - constraints: Applied in list order every frame
    - attachment_angle: Angle on the parent joint's surface where this body is pinned
    - attachment_offset: Fraction of the parent joint's radius to offset the pin by
    - fill_color, line_color, line_thickness, side: Presentation only, read by the renderer
    """
    joints: List[Joint] = field(default_factory=list)
    constraints: List["Constraint"] = field(default_factory=list)
    attachment_angle: float = 0.0
    attachment_offset: float = 0.0
    fill_color: Tuple[int, int, int] = (200, 200, 200)
    line_color: Tuple[int, int, int] = LINE_COLOR
    line_thickness: float = LINE_THICKNESS
    side: Side = Side.FRONT

    def iter_bodies(self):
        """Yield this body and every descendant body, depth-first."""
        yield self
        for joint in self.joints:
            for child in joint.children:
                yield from child.iter_bodies()

    def joint_count(self) -> int:
        """Total number of joints in this body and all of its descendants."""
        return sum(len(body.joints) for body in self.iter_bodies())
