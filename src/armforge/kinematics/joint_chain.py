"""Joint chain data model.

A ``JointChain`` is an ordered, fixed-length sequence of ``Joint`` records
indexed 0..N-1.  Each joint references the live ``SceneNode`` whose local
rotation the FK composer drives, and carries its own command, limits, axis
and one-shot warning latches.  Warnings raised while driving the chain are
kept on the chain itself so callers can inspect them directly.
"""

from __future__ import annotations

import math
from collections import Counter, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence

from armforge.constants import (
    DEFAULT_AXIS,
    DEFAULT_MAX_DEG,
    DEFAULT_MIN_DEG,
    DEFAULT_USE_LIMITS,
    WARNING_HISTORY,
)
from armforge.core.math_utils import Quat, Vec3, as_vec3
from armforge.core.scene_graph import SceneNode


class WarningKind(Enum):
    MISSING_REFERENCE = "MissingReference"
    INVALID_ANGLE = "InvalidAngle"
    DEGENERATE_AXIS = "DegenerateAxis"


class ChainState(Enum):
    UNINITIALIZED = "uninitialized"
    VALID = "valid"
    PARTIALLY_MISSING = "partially_missing"


@dataclass(frozen=True)
class JointLimits:
    """Inclusive angular range in degrees."""
    min_deg: float = DEFAULT_MIN_DEG
    max_deg: float = DEFAULT_MAX_DEG

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min_deg) and math.isfinite(self.max_deg)):
            raise ValueError(f"Joint limits must be finite: [{self.min_deg}, {self.max_deg}]")
        if self.min_deg > self.max_deg:
            raise ValueError(f"Joint limit min {self.min_deg} exceeds max {self.max_deg}")


@dataclass(frozen=True)
class JointWarning:
    """A diagnostic recorded against one joint."""
    kind: WarningKind
    joint_index: int
    joint_name: str
    message: str


@dataclass
class Joint:
    """One position in the chain."""
    index: int
    name: str = ""
    node: Optional[SceneNode] = None
    local_axis: Vec3 = field(default_factory=lambda: as_vec3(DEFAULT_AXIS))
    limits: Optional[JointLimits] = field(default_factory=JointLimits)

    # Written by the external controller
    commanded_angle_deg: float = 0.0

    # Written by the FK composer only
    last_applied_angle_deg: float = 0.0
    rest_orientation: Optional[Quat] = field(default=None, repr=False)
    rest_node: Optional[SceneNode] = field(default=None, repr=False)
    resolved_orientation: Optional[Quat] = field(default=None, repr=False)

    # One-shot warning latches, cleared on activation / recapture
    missing_reference_warned: bool = False
    degenerate_axis_warned: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"J{self.index + 1}"
        self.local_axis = as_vec3(self.local_axis)
        if not all(math.isfinite(c) for c in self.local_axis):
            raise ValueError(f"Joint {self.name!r} axis must be finite, got {self.local_axis}")

    @property
    def is_present(self) -> bool:
        return self.node is not None


class JointChain:
    """Fixed-length serial chain of joints plus chain-level flags."""

    def __init__(self, joints: Sequence[Joint], use_limits: bool = DEFAULT_USE_LIMITS):
        if not joints:
            raise ValueError("A joint chain needs at least one joint")
        for position, joint in enumerate(joints):
            if joint.index != position:
                raise ValueError(
                    f"Joint {joint.name!r} has index {joint.index}, expected {position}"
                )
        self.joints: list[Joint] = list(joints)
        self.use_limits = use_limits

        self.has_rest_pose: bool = False
        self.force_next_apply: bool = False
        self.active: bool = False
        self.state: ChainState = ChainState.UNINITIALIZED

        self._warnings: deque[JointWarning] = deque(maxlen=WARNING_HISTORY)
        self.warning_counts: Counter[WarningKind] = Counter()

    @classmethod
    def from_nodes(
        cls,
        nodes: Sequence[Optional[SceneNode]],
        axes: Optional[Sequence] = None,
        limits: Optional[Sequence[Optional[JointLimits]]] = None,
        use_limits: bool = DEFAULT_USE_LIMITS,
    ) -> "JointChain":
        """Build a chain over existing nodes; ``None`` marks an absent joint."""
        joints = []
        for i, node in enumerate(nodes):
            joint = Joint(
                index=i,
                node=node,
                name=node.name if node is not None else "",
                local_axis=axes[i] if axes is not None else DEFAULT_AXIS,
            )
            if limits is not None:
                joint.limits = limits[i]
            joints.append(joint)
        return cls(joints, use_limits=use_limits)

    def __len__(self) -> int:
        return len(self.joints)

    def __iter__(self) -> Iterator[Joint]:
        return iter(self.joints)

    def __getitem__(self, index: int) -> Joint:
        return self.joint(index)

    def joint(self, index: int) -> Joint:
        if not 0 <= index < len(self.joints):
            raise IndexError(f"Joint index {index} out of range for chain of {len(self.joints)}")
        return self.joints[index]

    # ------------------------------------------------------------------
    # Node references
    # ------------------------------------------------------------------

    def attach(self, index: int, node: SceneNode) -> None:
        """Bind a live node to a joint.

        A node other than the one the rest pose was captured from gets
        captured fresh on the next update.  Re-attaching the captured node
        keeps the cached rest, since its live pose may already hold a
        composed rotation.
        """
        joint = self.joint(index)
        if node is not joint.rest_node:
            joint.rest_orientation = None
            joint.rest_node = None
        joint.node = node

    def detach(self, index: int) -> None:
        self.joint(index).node = None

    def missing_joints(self) -> list[int]:
        return [j.index for j in self.joints if not j.is_present]

    def is_ready(self) -> bool:
        return all(j.is_present for j in self.joints)

    # ------------------------------------------------------------------
    # Commands and resolved output
    # ------------------------------------------------------------------

    def set_commanded_angle(self, index: int, angle_deg: float) -> None:
        self.joint(index).commanded_angle_deg = float(angle_deg)

    def set_commanded_angles(self, angles_deg: Sequence[float]) -> None:
        if len(angles_deg) != len(self.joints):
            raise ValueError(
                f"Expected {len(self.joints)} angles, got {len(angles_deg)}"
            )
        for joint, angle in zip(self.joints, angles_deg):
            joint.commanded_angle_deg = float(angle)

    def commanded_angles(self) -> list[float]:
        return [j.commanded_angle_deg for j in self.joints]

    def applied_angles(self) -> list[float]:
        return [j.last_applied_angle_deg for j in self.joints]

    def orientations(self) -> list[Optional[Quat]]:
        """Resolved local orientation per joint (``None`` until composed)."""
        return [
            None if j.resolved_orientation is None else j.resolved_orientation.copy()
            for j in self.joints
        ]

    # ------------------------------------------------------------------
    # Warnings
    # ------------------------------------------------------------------

    def record_warning(self, kind: WarningKind, joint: Joint, message: str) -> JointWarning:
        warning = JointWarning(kind=kind, joint_index=joint.index,
                               joint_name=joint.name, message=message)
        self._warnings.append(warning)
        self.warning_counts[kind] += 1
        return warning

    @property
    def warnings(self) -> list[JointWarning]:
        """Recorded warnings, oldest first (bounded history)."""
        return list(self._warnings)

    def warning_count(self, kind: Optional[WarningKind] = None) -> int:
        if kind is None:
            return sum(self.warning_counts.values())
        return self.warning_counts[kind]

    def latched_warnings(self) -> list[tuple[int, WarningKind]]:
        latched = []
        for j in self.joints:
            if j.missing_reference_warned:
                latched.append((j.index, WarningKind.MISSING_REFERENCE))
            if j.degenerate_axis_warned:
                latched.append((j.index, WarningKind.DEGENERATE_AXIS))
        return latched

    def reset_warning_latches(self) -> None:
        for j in self.joints:
            j.missing_reference_warned = False
            j.degenerate_axis_warned = False
