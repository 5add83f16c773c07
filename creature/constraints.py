#!/usr/bin/env python3
"""
Constraint primitives for the Procedural Creature solver.

Responsibilities
- DistanceConstraint: keeps consecutive joints at most a fixed distance apart.
- AngleConstraint: keeps the bend at every interior joint at or above a minimum angle.
- FabrikConstraint: drags a limb toward a target that trails its attachment point,
  using one backward and one forward distance pass per frame.
- apply_constraint: the single dispatch point used by the solver.

Conventions
- Constraints reposition the joints of one body in place; they never touch child bodies.
- Relaxation rates are interpolation factors: 1.0 snaps onto the boundary in one frame,
  0.0 leaves joints where they are.
- Chains shorter than a constraint needs are left untouched.
- Only FabrikConstraint holds state between frames (its current target).

Numerical notes
- The set of constraints is closed. apply_constraint dispatches on the concrete type and
  raises TypeError for anything else, so a misconfigured body fails on its first frame.
- Each pass is a single Gauss-Seidel style sweep: joint i+1 sees the already-corrected
  joint i. Convergence over several frames is what smooths the motion.
"""
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from .constants import (
    DEFAULT_DISTANCE_RATE,
    DEFAULT_FABRIK_MAX_DISTANCE,
    DEFAULT_FABRIK_TARGET_DISTANCE,
)
from .vector_utils import (
    Vec2,
    ZERO,
    vec_add,
    vec_angle_between,
    vec_distance,
    vec_from_angle,
    vec_len,
    vec_len_sq,
    vec_lerp,
    vec_norm,
    vec_perp_dot,
    vec_scale,
    vec_sub,
    vec_to_angle,
)

if TYPE_CHECKING:
    from .data_models import AttachmentPoint, Joint


class ConstraintError(RuntimeError):
    """Raised when a constraint is used outside its contract."""


class MissingAttachmentError(ConstraintError):
    """A constraint that follows its parent was applied to a body with no parent."""


class Direction(Enum):
    """Order in which a DistanceConstraint walks the chain."""
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass
class DistanceConstraint:
    """
    One-sided distance limit between consecutive joints.

    Pairs further apart than `distance` are pulled together; pairs already
    closer are left alone, so the chain may compress but never stretch.

    Forward walks head to tail and moves the later joint of each pair.
    Backward walks tail to head and moves the earlier joint.
    """
    distance: float
    rate: float = DEFAULT_DISTANCE_RATE
    direction: Direction = Direction.FORWARD

    def apply(self, joints: List["Joint"]) -> None:
        if len(joints) < 2:
            return

        if self.direction is Direction.FORWARD:
            for i in range(len(joints) - 1):
                self._relax(joints[i], joints[i + 1])
        else:
            for i in range(len(joints) - 2, -1, -1):
                self._relax(joints[i + 1], joints[i])

    def _relax(self, anchor: "Joint", moving: "Joint") -> None:
        delta = vec_sub(moving.position, anchor.position)
        if vec_len_sq(delta) <= self.distance * self.distance:
            return

        target = vec_add(anchor.position, vec_scale(vec_norm(delta), self.distance))
        moving.position = vec_lerp(moving.position, target, self.rate)


@dataclass
class AngleConstraint:
    """
    Minimum bend angle at every interior joint.

    For consecutive joints (a, b, c) the angle at b between b->a and b->c must be
    at least `angle`. A sharper corner is opened by swinging c around b, keeping
    |bc|, toward the boundary on the side it already bends to.
    """
    angle: float
    rate: float = 1.0

    def apply(self, joints: List["Joint"]) -> None:
        for i in range(len(joints) - 2):
            a, b, c = joints[i], joints[i + 1], joints[i + 2]
            ba = vec_sub(a.position, b.position)
            bc = vec_sub(c.position, b.position)

            if abs(vec_angle_between(ba, bc)) >= self.angle:
                continue

            direction = -1.0 if vec_perp_dot(ba, bc) < 0 else 1.0
            total_angle = vec_to_angle(ba) + self.angle * direction
            target = vec_add(b.position, vec_scale(vec_from_angle(total_angle), vec_len(bc)))

            c.position = vec_lerp(c.position, target, self.rate)


@dataclass
class FabrikConstraint:
    """
    Single-pass FABRIK limb that steps toward a target trailing its attachment point.

    The preferred target sits `target_distance` away from the attachment point at
    `target_angle` relative to the attachment angle. The tracked target only jumps
    to the preferred one when it has drifted more than `max_distance` away, or when
    the limb is stretched past `target_distance`. Between jumps the foot stays
    planted, which is what makes legs step instead of slide.

    Per frame: pin the tail to the target, pull the chain toward it (backward pass),
    pin the head back onto the attachment point, and restore spacing from the head
    (forward pass).
    """
    forward_distance_constraint: DistanceConstraint
    backward_distance_constraint: DistanceConstraint
    target_angle: float = 0.0
    target_distance: float = DEFAULT_FABRIK_TARGET_DISTANCE
    max_distance: float = DEFAULT_FABRIK_MAX_DISTANCE
    current_target_position: Vec2 = ZERO
    preferred_target_position: Vec2 = ZERO

    @classmethod
    def create(cls, joint_distance: float, rate: float, target_angle: float,
               target_distance: float, max_distance: float) -> "FabrikConstraint":
        """
        Build a limb constraint from its tunable parameters.

        Args:
            joint_distance: Maximum spacing between consecutive joints
            rate: Relaxation rate of the pass that pulls the limb toward its target
            target_angle: Target direction relative to the attachment angle (radians)
            target_distance: Distance of the preferred target from the attachment point
            max_distance: How far the tracked target may lag before it jumps

        Returns:
            A constraint whose target starts at the origin.
        """
        return cls(
            forward_distance_constraint=DistanceConstraint(
                distance=joint_distance, rate=1.0, direction=Direction.FORWARD
            ),
            backward_distance_constraint=DistanceConstraint(
                distance=joint_distance, rate=rate, direction=Direction.BACKWARD
            ),
            target_angle=target_angle,
            target_distance=target_distance,
            max_distance=max_distance,
        )

    def apply(self, joints: List["Joint"], attachment_point: Optional["AttachmentPoint"]) -> None:
        if not joints:
            return
        if attachment_point is None:
            raise MissingAttachmentError(
                "FabrikConstraint needs a parent attachment point; "
                "attach this body to a joint instead of using it as a root"
            )

        first, last = joints[0], joints[-1]

        self.preferred_target_position = vec_add(
            attachment_point.position,
            vec_scale(
                vec_from_angle(attachment_point.angle + self.target_angle),
                self.target_distance,
            ),
        )
        drift = vec_distance(self.current_target_position, self.preferred_target_position)
        span = vec_distance(first.position, last.position)
        if drift > self.max_distance or span > self.target_distance:
            self.current_target_position = self.preferred_target_position

        last.position = self.current_target_position
        self.backward_distance_constraint.apply(joints)

        first.position = attachment_point.position
        self.forward_distance_constraint.apply(joints)

    def drift_intensity(self) -> float:
        """
        How close the tracked target is to jumping, as a fraction in [0, 1].

        Squared drift over squared max_distance, clamped; used to tint the debug overlay.
        """
        if self.max_distance == 0:
            return 1.0
        delta = vec_sub(self.current_target_position, self.preferred_target_position)
        intensity = vec_len_sq(delta) / (self.max_distance * self.max_distance)
        return min(1.0, max(0.0, intensity))


Constraint = Union[DistanceConstraint, AngleConstraint, FabrikConstraint]


def apply_constraint(constraint: Constraint, joints: List["Joint"],
                     attachment_point: Optional["AttachmentPoint"] = None) -> None:
    """
    Apply one constraint of the closed set to a joint chain.

    Args:
        constraint: A DistanceConstraint, AngleConstraint or FabrikConstraint
        joints: The body's joint chain (modified in place)
        attachment_point: The body's attachment point this frame, None for a root body

    Raises:
        MissingAttachmentError: A FabrikConstraint on a non-empty root chain.
        TypeError: constraint is not one of the supported kinds.
    """
    if isinstance(constraint, DistanceConstraint):
        constraint.apply(joints)
    elif isinstance(constraint, AngleConstraint):
        constraint.apply(joints)
    elif isinstance(constraint, FabrikConstraint):
        constraint.apply(joints, attachment_point)
    else:
        raise TypeError(f"Unsupported constraint type: {type(constraint).__name__}")
