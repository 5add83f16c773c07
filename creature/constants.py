#!/usr/bin/env python3
"""
Shared constants for Procedural Creature (world units are pixels at zoom 1).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""
import math

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
TARGET_FPS = 60
BACKGROUND_COLOR = (255, 255, 255)
LINE_COLOR = (0, 0, 0)
LINE_THICKNESS = 6.0
DEBUG_LINE_THICKNESS = 2
DEBUG_JOINT_COLOR = (0, 0, 255)
DEBUG_TARGET_RADIUS = 5
DEBUG_NEAR_COLOR = (0, 228, 48)
DEBUG_FAR_COLOR = (230, 41, 55)
EYE_LINE_COLOR = (255, 255, 255)

# Camera zoom bounds (screen pixels per world unit)
DEFAULT_ZOOM = 1.0
MIN_ZOOM = 0.1
MAX_ZOOM = 10.0

# Driven target: fraction of the remaining distance the head covers per frame
FOLLOW_RATE = 0.1

# Outline tessellation around the head and tail joints
OUTLINE_END_STEPS = 4

# Creature defaults
DEFAULT_BODY_COLOR = 0x61A5B8
DEFAULT_EYE_COLOR = 0x704E37
LEG_SHADE = 0xDDDDDD
DEFAULT_ANGLE_CONSTRAINT = 0.9 * math.pi
DEFAULT_ANGLE_RATE = 0.5
DEFAULT_DISTANCE_RATE = 1.0

# Fabrik defaults
DEFAULT_FABRIK_JOINT_DISTANCE = 10.0
DEFAULT_FABRIK_RATE = 0.25
DEFAULT_FABRIK_TARGET_DISTANCE = 20.0
DEFAULT_FABRIK_MAX_DISTANCE = 20.0
