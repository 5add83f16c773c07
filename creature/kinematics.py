#!/usr/bin/env python3
"""
Kinematic solver for Procedural Creature.

Responsibilities
- Advance a body tree by one frame: run each body's constraints, re-derive joint
  angles, pin every child body to its parent joint and recurse.
- Ease the root body's head toward a driven target (mouse position or idle path).
- Walk the tree for debug overlays.

Ordering
- A body is fully resolved, angles included, before any of its children run. Child
  attachment points depend on the parent's updated joint angles, so a child never
  observes a half-updated parent.
- Recursion is depth-first in joint order, then child order. The tree is built from
  descriptors, which cannot express cycles, so recursion always terminates.

Threading
- This module is pure compute over the tree it is given. The interactive app calls it
  from the render thread while holding SimulationController.lock.
"""

import math
from typing import Callable, Optional

from .constraints import FabrikConstraint, apply_constraint
from .data_models import AttachmentPoint, Body, Joint
from .vector_utils import (
    Vec2,
    vec_add,
    vec_from_angle,
    vec_lerp,
    vec_norm,
    vec_scale,
    vec_sub,
    vec_to_angle,
)


def apply_constraints(body: Body, attachment_point: Optional[AttachmentPoint] = None) -> None:
    """
    Advance a body and all of its descendants by one frame.

    Steps:
    1) Apply the body's constraints in list order.
    2) Point every joint along the segment from its predecessor; the head copies the
       angle of the joint behind it.
    3) For each child body of each joint, compute its attachment point, pin the child's
       first joint there, and recurse.

    Args:
        body: Body to update in place.
        attachment_point: Where this body is pinned this frame; None for the root.

    Raises:
        MissingAttachmentError: A FabrikConstraint was found on a root body.
    """
    for constraint in body.constraints:
        apply_constraint(constraint, body.joints, attachment_point)

    update_joint_angles(body)

    inherited_angle = attachment_point.angle if attachment_point is not None else 0.0
    for joint in body.joints:
        for child in joint.children:
            child_point = child_attachment_point(body, joint, child, inherited_angle)
            if child.joints:
                child.joints[0].position = child_point.position
            apply_constraints(child, child_point)


def update_joint_angles(body: Body) -> None:
    """
    Recompute joint orientations from the current positions.

    Joint i+1 faces along the vector from joint i. The head has no predecessor and
    copies the angle of the second joint; single-joint bodies keep their angle.
    """
    joints = body.joints
    for i in range(len(joints) - 1):
        delta = vec_sub(joints[i + 1].position, joints[i].position)
        joints[i + 1].angle = vec_to_angle(vec_norm(delta))

    if len(joints) >= 2:
        joints[0].angle = joints[1].angle


def child_attachment_point(parent: Body, joint: Joint, child: Body,
                           inherited_angle: float = 0.0) -> AttachmentPoint:
    """
    Where `child` is pinned to `joint` of `parent` this frame.

    The position sits on a circle of radius attachment_offset * joint.radius around
    the joint, at the child's attachment angle relative to the joint's heading. The
    angle handed down accumulates the parent's own attachment angle and whatever the
    parent inherited, so single-joint bodies (which have no heading of their own)
    still rotate their children with the creature.

    Args:
        parent: Body that owns `joint`
        joint: Joint the child hangs from
        child: Child body being placed
        inherited_angle: Angle of the parent's own attachment point (0 for the root)

    Returns:
        The child's AttachmentPoint.
    """
    direction = vec_from_angle(joint.angle + child.attachment_angle + inherited_angle)
    position = vec_add(joint.position,
                       vec_scale(direction, child.attachment_offset * joint.radius))
    angle = parent.attachment_angle + joint.angle + inherited_angle
    return AttachmentPoint(position=position, angle=angle)


def drive_root(body: Body, target: Vec2, rate: float) -> None:
    """Ease the root body's head toward `target`; no-op for a body without joints."""
    if not body.joints:
        return
    head = body.joints[0]
    head.position = vec_lerp(head.position, target, rate)


def lissajous_target(t: float, half_extent: Vec2) -> Vec2:
    """Idle path for the head: a figure-eight spanning the visible area."""
    return (math.cos(t) * half_extent[0], math.sin(2.0 * t) * half_extent[1])


def walk_debug(body: Body,
               visit_joint: Callable[[Joint], None],
               visit_fabrik: Optional[Callable[[FabrikConstraint], None]] = None) -> None:
    """
    Visit every joint of the tree, and every FabrikConstraint's target state.

    Per body, constraints are visited before joints; children follow their joint.
    """
    if visit_fabrik is not None:
        for constraint in body.constraints:
            if isinstance(constraint, FabrikConstraint):
                visit_fabrik(constraint)
    for joint in body.joints:
        visit_joint(joint)
        for child in joint.children:
            walk_debug(child, visit_joint, visit_fabrik)
