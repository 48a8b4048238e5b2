"""Commanded-angle validation and limit clamping."""

import math
from typing import Optional

from armforge.core.math_utils import clamp
from armforge.kinematics.joint_chain import Joint, JointLimits


def clamp_angle(angle_deg: float, limits: Optional[JointLimits]) -> float:
    """Clamp *angle_deg* into ``[min_deg, max_deg]``; idempotent."""
    if limits is None:
        return angle_deg
    return clamp(angle_deg, limits.min_deg, limits.max_deg)


def try_clamp(joint: Joint, use_limits: bool = True) -> tuple[float, bool]:
    """Return ``(angle, ok)`` for the joint's commanded angle.

    ``ok`` is False only for NaN or infinite commands; the caller decides
    how to report it.  Out-of-range commands are clamped silently.
    """
    angle = joint.commanded_angle_deg
    if not math.isfinite(angle):
        return angle, False
    if not use_limits:
        return angle, True
    return clamp_angle(angle, joint.limits), True
