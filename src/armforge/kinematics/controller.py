"""Owning application object for one FK-driven joint chain.

Builds (or adopts) the joint nodes, creates the chain and composer from a
``ChainConfig`` and activates it on construction.  The host loop writes
commands, then calls ``tick()`` once per frame before reading poses.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from armforge.constants import DEFAULT_CHAIN_CONFIG
from armforge.core.events import EventBus
from armforge.core.math_utils import Quat
from armforge.core.scene_graph import SceneNode
from armforge.kinematics.chain_config import (
    ChainConfig, build_chain, load_chain_config,
)
from armforge.kinematics.fk_composer import FKComposer, UpdateResult
from armforge.kinematics.joint_chain import ChainState, JointChain
from armforge.kinematics.link_geometry import ChainLinks, LinkSegment
from armforge.kinematics.rig import ChainRig, build_rig

logger = logging.getLogger(__name__)


class JointChainController:
    """Constructs, activates and ticks a single ``JointChain``.

    Parameters
    ----------
    config:
        Chain configuration; defaults to ``ChainConfig.default()``.
    nodes:
        Existing joint nodes to drive.  When omitted a rig is built from
        *config* and its nodes are used.
    tcp:
        Tool-tip node for the last link (only used with explicit *nodes*).
    event_bus:
        Shared bus for observers; a private one is created if omitted.
    """

    def __init__(
        self,
        config: Optional[ChainConfig] = None,
        nodes: Optional[Sequence[Optional[SceneNode]]] = None,
        tcp: Optional[SceneNode] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config if config is not None else ChainConfig.default()
        self.rig: Optional[ChainRig] = None
        if nodes is None:
            self.rig = build_rig(self.config)
            nodes = self.rig.joint_nodes
            tcp = self.rig.tcp

        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.chain: JointChain = build_chain(self.config, nodes)
        self.composer = FKComposer(self.chain, self.event_bus)
        self.links = ChainLinks(nodes, tcp)
        self.composer.activate()

    @classmethod
    def from_config_file(
        cls,
        name_or_path: Union[str, Path] = DEFAULT_CHAIN_CONFIG,
        expected_joint_count: Optional[int] = None,
        event_bus: Optional[EventBus] = None,
    ) -> "JointChainController":
        return cls(load_chain_config(name_or_path, expected_joint_count), event_bus=event_bus)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def enable(self) -> None:
        self.composer.activate()

    def disable(self) -> None:
        self.composer.deactivate()

    def recapture(self) -> None:
        self.composer.recapture()

    def tick(self) -> UpdateResult:
        result = self.composer.update()
        logger.debug("FK tick: %s", result.value)
        return result

    # ------------------------------------------------------------------
    # Commands and outputs
    # ------------------------------------------------------------------

    def set_angle(self, index: int, angle_deg: float) -> None:
        self.chain.set_commanded_angle(index, angle_deg)

    def set_angles(self, angles_deg: Sequence[float]) -> None:
        self.chain.set_commanded_angles(angles_deg)

    @property
    def state(self) -> ChainState:
        return self.chain.state

    def orientations(self) -> list[Optional[Quat]]:
        return self.chain.orientations()

    def link_segments(self) -> list[Optional[LinkSegment]]:
        return self.links.segments()
