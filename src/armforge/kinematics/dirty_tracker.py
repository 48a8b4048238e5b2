"""Change detection between commanded and last-applied joint angles."""

from armforge.constants import DIRTY_EPSILON_DEG
from armforge.kinematics.joint_chain import Joint, JointChain


def joint_is_dirty(joint: Joint, epsilon: float = DIRTY_EPSILON_DEG) -> bool:
    delta = abs(joint.commanded_angle_deg - joint.last_applied_angle_deg)
    # NaN never compares <=, so non-finite commands always count as dirty
    return not delta <= epsilon


def is_dirty(chain: JointChain, epsilon: float = DIRTY_EPSILON_DEG) -> bool:
    """True if the whole chain needs recomposing this tick."""
    if chain.force_next_apply:
        return True
    return any(joint_is_dirty(joint, epsilon) for joint in chain.joints)
