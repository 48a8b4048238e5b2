"""Forward kinematics for a fixed-length serial joint chain."""

from armforge.kinematics.angle_validator import clamp_angle, try_clamp
from armforge.kinematics.axis_resolver import FALLBACK_AXIS, resolve_axis
from armforge.kinematics.chain_config import (
    ChainConfig, ChainConfigError, JointConfig, build_chain, load_chain_config,
)
from armforge.kinematics.controller import JointChainController
from armforge.kinematics.dirty_tracker import is_dirty
from armforge.kinematics.fk_composer import FKComposer, UpdateResult
from armforge.kinematics.joint_chain import (
    ChainState, Joint, JointChain, JointLimits, JointWarning, WarningKind,
)
from armforge.kinematics.link_geometry import ChainLinks, LinkSegment, joint_world_positions
from armforge.kinematics.rest_pose import capture_rest_pose
from armforge.kinematics.rig import ChainRig, build_rig

__all__ = [
    "ChainConfig",
    "ChainConfigError",
    "ChainLinks",
    "ChainRig",
    "ChainState",
    "FALLBACK_AXIS",
    "FKComposer",
    "Joint",
    "JointChain",
    "JointChainController",
    "JointConfig",
    "JointLimits",
    "JointWarning",
    "LinkSegment",
    "UpdateResult",
    "WarningKind",
    "build_chain",
    "build_rig",
    "capture_rest_pose",
    "clamp_angle",
    "is_dirty",
    "joint_world_positions",
    "load_chain_config",
    "resolve_axis",
    "try_clamp",
]
