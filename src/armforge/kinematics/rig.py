"""Build a scene-node rig for a chain config.

The rig is a straight parent/child hierarchy::

    root -> J1 -> J2 -> ... -> JN -> TCP

Each joint node sits at its configured ``offset`` in its parent's frame
with its ``rest_euler_deg`` rotation; the TCP node marks the tool tip.
"""

from dataclasses import dataclass

from armforge.core.math_utils import deg_to_rad, quat_from_euler
from armforge.core.scene_graph import SceneNode
from armforge.kinematics.chain_config import ChainConfig


@dataclass
class ChainRig:
    root: SceneNode
    joint_nodes: list[SceneNode]
    tcp: SceneNode

    def update(self) -> None:
        self.root.update_world_matrix()


def build_rig(config: ChainConfig) -> ChainRig:
    config.validate()
    root = SceneNode(f"{config.name}_root")
    parent = root
    joint_nodes = []
    for jc in config.joints:
        node = SceneNode(jc.name)
        node.set_position(*jc.offset)
        node.set_quaternion(quat_from_euler(*(deg_to_rad(a) for a in jc.rest_euler_deg)))
        parent.add(node)
        joint_nodes.append(node)
        parent = node

    tcp = SceneNode("TCP")
    tcp.set_position(*config.tcp_offset)
    parent.add(tcp)

    root.update_world_matrix(force=True)
    return ChainRig(root=root, joint_nodes=joint_nodes, tcp=tcp)
