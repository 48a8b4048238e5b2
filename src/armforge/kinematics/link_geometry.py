"""World-space joint positions and link segments for pose consumers.

Link ``i`` runs from joint ``i`` to joint ``i + 1``; the last link runs from
the last joint to the TCP.  A link with a missing endpoint has no segment,
and that is warned about once until the link is whole again.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from armforge.core.math_utils import Vec3
from armforge.core.scene_graph import SceneNode

logger = logging.getLogger(__name__)


@dataclass
class LinkSegment:
    index: int
    start_name: str
    end_name: str
    start: Vec3
    end: Vec3

    @property
    def length(self) -> float:
        return float(((self.end - self.start) ** 2).sum() ** 0.5)


def update_world_matrices(nodes: Sequence[Optional[SceneNode]]) -> None:
    """Refresh world matrices once per distinct hierarchy among *nodes*."""
    seen: set[int] = set()
    for node in nodes:
        if node is None:
            continue
        root = node.root()
        if id(root) in seen:
            continue
        seen.add(id(root))
        root.update_world_matrix()


def joint_world_positions(nodes: Sequence[Optional[SceneNode]]) -> list[Optional[Vec3]]:
    update_world_matrices(nodes)
    return [None if n is None else n.get_world_position() for n in nodes]


class ChainLinks:
    """Tracks the links between consecutive joint nodes and the TCP."""

    def __init__(self, joint_nodes: Sequence[Optional[SceneNode]], tcp: Optional[SceneNode]):
        self.joint_nodes = list(joint_nodes)
        self.tcp = tcp
        self._missing_warned = [False] * len(self.joint_nodes)

    @property
    def link_count(self) -> int:
        return len(self.joint_nodes)

    def endpoints(self, index: int) -> tuple[Optional[SceneNode], Optional[SceneNode]]:
        start = self.joint_nodes[index]
        if index + 1 < len(self.joint_nodes):
            return start, self.joint_nodes[index + 1]
        return start, self.tcp

    def segments(self) -> list[Optional[LinkSegment]]:
        update_world_matrices(self.joint_nodes + [self.tcp])
        return [self._segment(i) for i in range(self.link_count)]

    def _segment(self, index: int) -> Optional[LinkSegment]:
        start, end = self.endpoints(index)
        if start is None or end is None:
            if not self._missing_warned[index]:
                logger.warning(
                    "Missing link endpoint: %s -> %s",
                    start.name if start is not None else "(none)",
                    end.name if end is not None else "(none)",
                )
                self._missing_warned[index] = True
            return None

        self._missing_warned[index] = False
        return LinkSegment(
            index=index,
            start_name=start.name,
            end_name=end.name,
            start=start.get_world_position(),
            end=end.get_world_position(),
        )
