"""Joint axis normalization with a fallback for degenerate axes."""

import logging
import math
from typing import Callable, Optional

from armforge.constants import AXIS_EPSILON, DEFAULT_AXIS
from armforge.core.math_utils import Vec3, as_vec3, vector_length
from armforge.kinematics.joint_chain import Joint, WarningKind

logger = logging.getLogger(__name__)

FALLBACK_AXIS = as_vec3(DEFAULT_AXIS)

WarningCallback = Callable[[WarningKind, Joint, str], None]


def resolve_axis(joint: Joint, on_warning: Optional[WarningCallback] = None) -> Vec3:
    """Return the joint's rotation axis as a unit vector.

    An axis with squared length below ``AXIS_EPSILON``, or with a non-finite
    length, is replaced by ``FALLBACK_AXIS``.  That is reported once per joint
    until its latch is reset; *on_warning* receives the report, otherwise it
    is only logged.
    """
    axis = joint.local_axis
    length = vector_length(axis)
    if not math.isfinite(length) or length * length < AXIS_EPSILON:
        if not joint.degenerate_axis_warned:
            joint.degenerate_axis_warned = True
            message = f"Joint axis near zero: {joint.name}, using fallback {DEFAULT_AXIS}"
            if on_warning is not None:
                on_warning(WarningKind.DEGENERATE_AXIS, joint, message)
            else:
                logger.warning(message)
        return FALLBACK_AXIS.copy()

    return axis / length
