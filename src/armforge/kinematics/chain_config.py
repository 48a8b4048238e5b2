"""Chain configuration: per-joint axis, limits and rig geometry.

Config files are JSON under ``assets/config/``::

    {
      "name": "six_axis_arm",
      "useLimits": true,
      "tcpOffset": [0, 0, 0.1],
      "joints": [
        {"name": "J1", "axis": [0, 0, 1], "minDeg": -170, "maxDeg": 170,
         "offset": [0, 0, 0.15], "restEulerDeg": [0, 0, 0]},
        ...
      ]
    }

Both camelCase and snake_case keys are accepted.  Missing fields take the
chain defaults (axis +X, limits [-180, 180], limits enabled).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from armforge.constants import (
    DEFAULT_AXIS,
    DEFAULT_JOINT_COUNT,
    DEFAULT_MAX_DEG,
    DEFAULT_MIN_DEG,
    DEFAULT_USE_LIMITS,
)
from armforge.core.config_loader import load_json, resolve_config_path
from armforge.core.scene_graph import SceneNode
from armforge.kinematics.joint_chain import Joint, JointChain, JointLimits

logger = logging.getLogger(__name__)


class ChainConfigError(ValueError):
    """Raised when a chain configuration cannot be turned into a chain."""


Triple = tuple[float, float, float]


@dataclass
class JointConfig:
    name: str = ""
    axis: Triple = DEFAULT_AXIS
    min_deg: float = DEFAULT_MIN_DEG
    max_deg: float = DEFAULT_MAX_DEG
    offset: Triple = (0.0, 0.0, 0.0)         # position in parent frame
    rest_euler_deg: Triple = (0.0, 0.0, 0.0)  # XYZ rest rotation

    @property
    def limits(self) -> JointLimits:
        return JointLimits(self.min_deg, self.max_deg)


@dataclass
class ChainConfig:
    joints: list[JointConfig] = field(default_factory=list)
    use_limits: bool = DEFAULT_USE_LIMITS
    tcp_offset: Triple = (0.0, 0.0, 0.0)
    name: str = "chain"

    @property
    def joint_count(self) -> int:
        return len(self.joints)

    @classmethod
    def default(cls, joint_count: int = DEFAULT_JOINT_COUNT) -> "ChainConfig":
        joints = [JointConfig(name=f"J{i + 1}") for i in range(joint_count)]
        return cls(joints=joints)

    @classmethod
    def from_dict(cls, data: dict, expected_joint_count: Optional[int] = None) -> "ChainConfig":
        if not isinstance(data, dict):
            raise ChainConfigError(f"Chain config must be an object, got {type(data).__name__}")
        raw_joints = data.get("joints")
        if not isinstance(raw_joints, list) or not raw_joints:
            raise ChainConfigError("Chain config needs a non-empty 'joints' list")

        joints = [_parse_joint(i, raw) for i, raw in enumerate(raw_joints)]
        use_limits = _get(data, "useLimits", "use_limits", DEFAULT_USE_LIMITS)
        if not isinstance(use_limits, bool):
            raise ChainConfigError(f"useLimits must be true or false, got {use_limits!r}")
        config = cls(
            joints=joints,
            use_limits=use_limits,
            tcp_offset=_triple(_get(data, "tcpOffset", "tcp_offset", (0.0, 0.0, 0.0)), "tcpOffset"),
            name=str(data.get("name", "chain")),
        )
        config.validate(expected_joint_count)
        return config

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "useLimits": self.use_limits,
            "tcpOffset": list(self.tcp_offset),
            "joints": [
                {
                    "name": j.name,
                    "axis": list(j.axis),
                    "minDeg": j.min_deg,
                    "maxDeg": j.max_deg,
                    "offset": list(j.offset),
                    "restEulerDeg": list(j.rest_euler_deg),
                }
                for j in self.joints
            ],
        }

    def validate(self, expected_joint_count: Optional[int] = None) -> None:
        if not self.joints:
            raise ChainConfigError("Chain config has no joints")
        if expected_joint_count is not None and len(self.joints) != expected_joint_count:
            raise ChainConfigError(
                f"Chain config '{self.name}' has {len(self.joints)} joints, "
                f"expected {expected_joint_count}"
            )
        for i, joint in enumerate(self.joints):
            try:
                JointLimits(joint.min_deg, joint.max_deg)
            except ValueError as e:
                raise ChainConfigError(f"Joint {i} ({joint.name}): {e}") from e


def _get(data: dict, camel: str, snake: str, default: Any) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _triple(value: Any, what: str) -> Triple:
    try:
        x, y, z = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ChainConfigError(f"'{what}' must be three numbers, got {value!r}") from e
    if not all(math.isfinite(v) for v in (x, y, z)):
        raise ChainConfigError(f"'{what}' must be finite, got {value!r}")
    return (x, y, z)


def _parse_joint(index: int, raw: Any) -> JointConfig:
    if not isinstance(raw, dict):
        raise ChainConfigError(f"Joint {index} must be an object, got {type(raw).__name__}")
    try:
        min_deg = float(_get(raw, "minDeg", "min_deg", DEFAULT_MIN_DEG))
        max_deg = float(_get(raw, "maxDeg", "max_deg", DEFAULT_MAX_DEG))
    except (TypeError, ValueError) as e:
        raise ChainConfigError(f"Joint {index}: limits must be numbers") from e
    return JointConfig(
        name=str(raw.get("name") or f"J{index + 1}"),
        axis=_triple(raw.get("axis", DEFAULT_AXIS), f"joints[{index}].axis"),
        min_deg=min_deg,
        max_deg=max_deg,
        offset=_triple(raw.get("offset", (0.0, 0.0, 0.0)), f"joints[{index}].offset"),
        rest_euler_deg=_triple(
            _get(raw, "restEulerDeg", "rest_euler_deg", (0.0, 0.0, 0.0)),
            f"joints[{index}].restEulerDeg",
        ),
    )


def load_chain_config(
    name_or_path: Union[str, Path],
    expected_joint_count: Optional[int] = None,
) -> ChainConfig:
    """Load a chain config from a path or from a name in assets/config/."""
    path = resolve_config_path(name_or_path)
    data = load_json(path)
    config = ChainConfig.from_dict(data, expected_joint_count)
    logger.info("Loaded chain config '%s' from %s (%d joints)",
                config.name, path, config.joint_count)
    return config


def build_chain(
    config: ChainConfig,
    nodes: Sequence[Optional[SceneNode]],
) -> JointChain:
    """Create a ``JointChain`` over *nodes* using *config* for axes and limits."""
    config.validate()
    if len(nodes) != config.joint_count:
        raise ChainConfigError(
            f"Chain config '{config.name}' has {config.joint_count} joints "
            f"but {len(nodes)} nodes were given"
        )
    joints = [
        Joint(index=i, name=jc.name, node=node, local_axis=jc.axis, limits=jc.limits)
        for i, (jc, node) in enumerate(zip(config.joints, nodes))
    ]
    return JointChain(joints, use_limits=config.use_limits)
