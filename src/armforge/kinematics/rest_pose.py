"""Rest-pose capture: snapshot each joint's live local rotation."""

import logging

from armforge.kinematics.joint_chain import JointChain

logger = logging.getLogger(__name__)


def capture_rest_pose(chain: JointChain, only_missing: bool = False) -> int:
    """Store every present joint's current local quaternion as its rest pose.

    Absent joints are skipped and keep whatever rest orientation they had.
    With *only_missing*, joints that already hold a rest orientation are
    left alone.  ``chain.has_rest_pose`` is set once the pass completes.

    Returns the number of joints captured.
    """
    chain.has_rest_pose = False
    captured = 0
    for joint in chain.joints:
        if joint.node is None:
            continue
        if only_missing and joint.rest_orientation is not None:
            continue
        joint.rest_orientation = joint.node.quaternion.copy()
        joint.rest_node = joint.node
        captured += 1

    chain.has_rest_pose = True
    logger.debug("Captured rest pose for %d/%d joints", captured, len(chain))
    return captured
