"""Forward-kinematics composer: drives each joint node from its command.

Per tick, ``update()``:

  1. checks that every joint has a live node (else skips the tick),
  2. makes sure a rest pose has been captured,
  3. returns early when no command changed beyond ``DIRTY_EPSILON_DEG``,
  4. composes ``rest * axis_angle(axis, clamped)`` for each joint in order.

The commanded rotation is intrinsic: it is applied after the rest rotation,
so the axis is always expressed in the joint's own rest frame.  A non-finite
command stops the pass at that joint; joints before it keep their new pose,
joints after it keep their previous one.

Nothing here raises during a tick.  Problems are recorded on the chain as
``JointWarning`` entries, logged, and published on the event bus.
"""

import logging
from enum import Enum
from typing import Optional

from armforge.core.events import EventBus, EventType
from armforge.core.math_utils import (
    Vec3, deg_to_rad, quat_from_axis_angle, quat_multiply,
)
from armforge.kinematics.angle_validator import try_clamp
from armforge.kinematics.axis_resolver import resolve_axis
from armforge.kinematics.dirty_tracker import is_dirty
from armforge.kinematics.joint_chain import ChainState, Joint, JointChain, WarningKind
from armforge.kinematics.rest_pose import capture_rest_pose

logger = logging.getLogger(__name__)


class UpdateResult(Enum):
    INACTIVE = "inactive"      # chain deactivated
    NOT_READY = "not_ready"    # at least one joint node missing
    CLEAN = "clean"            # nothing changed; no work done
    APPLIED = "applied"        # every joint composed
    TRUNCATED = "truncated"    # stopped at an invalid command


class FKComposer:
    """Owns the per-tick FK pass over one ``JointChain``."""

    def __init__(self, chain: JointChain, event_bus: Optional[EventBus] = None):
        self.chain = chain
        self.event_bus = event_bus if event_bus is not None else EventBus()

    # ------------------------------------------------------------------
    # Activation hooks
    # ------------------------------------------------------------------

    def activate(self) -> None:
        """Start driving the chain: recapture rest pose and force one pass."""
        chain = self.chain
        chain.active = True
        chain.reset_warning_latches()
        capture_rest_pose(chain)
        chain.force_next_apply = True
        logger.info("FK chain activated (%d joints)", len(chain))
        self.event_bus.publish(EventType.CHAIN_ACTIVATED, joint_count=len(chain))

    def deactivate(self) -> None:
        """Stop driving the chain and drop any scheduled forced pass."""
        self.chain.active = False
        self.chain.force_next_apply = False
        logger.info("FK chain deactivated")
        self.event_bus.publish(EventType.CHAIN_DEACTIVATED)

    def recapture(self) -> None:
        """Take the current live pose as the new rest pose."""
        self.chain.reset_warning_latches()
        capture_rest_pose(self.chain)
        self.chain.force_next_apply = True

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self) -> UpdateResult:
        chain = self.chain
        if not chain.active:
            return UpdateResult.INACTIVE

        if not self._check_references():
            return UpdateResult.NOT_READY

        if not chain.has_rest_pose:
            capture_rest_pose(chain)
        elif any(j.rest_orientation is None for j in chain.joints):
            # Joints that were absent at capture time
            capture_rest_pose(chain, only_missing=True)

        if not is_dirty(chain):
            return UpdateResult.CLEAN

        for joint in chain.joints:
            clamped_deg, ok = try_clamp(joint, chain.use_limits)
            if not ok:
                self._warn(
                    WarningKind.INVALID_ANGLE, joint,
                    f"Invalid angle: {joint.name} ({joint.commanded_angle_deg!r})",
                )
                return UpdateResult.TRUNCATED

            axis = resolve_axis(joint, on_warning=self._warn)
            self._compose(joint, axis, clamped_deg)

        chain.force_next_apply = False
        self.event_bus.publish(EventType.CHAIN_UPDATED, chain=chain)
        return UpdateResult.APPLIED

    def _compose(self, joint: Joint, axis: Vec3, angle_deg: float) -> None:
        rotation = quat_from_axis_angle(axis, deg_to_rad(angle_deg))
        final = quat_multiply(joint.rest_orientation, rotation)
        joint.node.set_quaternion(final)
        joint.resolved_orientation = final
        joint.last_applied_angle_deg = angle_deg
        self.event_bus.publish(
            EventType.JOINT_COMPOSED,
            index=joint.index, angle_deg=angle_deg, orientation=final,
        )

    def _check_references(self) -> bool:
        """Latch a warning per absent joint and update the chain state."""
        chain = self.chain
        missing = chain.missing_joints()
        for index in missing:
            joint = chain.joints[index]
            if not joint.missing_reference_warned:
                joint.missing_reference_warned = True
                self._warn(WarningKind.MISSING_REFERENCE, joint,
                           f"Missing joint: {joint.name}")

        state = ChainState.PARTIALLY_MISSING if missing else ChainState.VALID
        if state is not chain.state:
            previous = chain.state
            chain.state = state
            if previous is ChainState.PARTIALLY_MISSING:
                # Reattached joints need their command applied even if unchanged
                chain.force_next_apply = True
            logger.info("FK chain state: %s -> %s (missing: %s)", previous.value, state.value,
                        [chain.joints[i].name for i in missing] or "none")
            self.event_bus.publish(EventType.CHAIN_STATE_CHANGED,
                                   previous=previous, state=state)
        return not missing

    def _warn(self, kind: WarningKind, joint: Joint, message: str) -> None:
        logger.warning(message)
        warning = self.chain.record_warning(kind, joint, message)
        self.event_bus.publish(EventType.JOINT_WARNING, warning=warning)
