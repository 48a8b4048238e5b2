"""Tests for rest-pose capture."""

import numpy as np

from armforge.core.math_utils import quat_from_axis_angle, quat_identity, vec3
from armforge.core.scene_graph import SceneNode
from armforge.kinematics.joint_chain import JointChain
from armforge.kinematics.rest_pose import capture_rest_pose


def test_capture_copies_live_rotation():
    node = SceneNode("J1")
    q = quat_from_axis_angle(vec3(0, 0, 1), 0.3)
    node.set_quaternion(q)
    chain = JointChain.from_nodes([node])

    assert capture_rest_pose(chain) == 1
    assert chain.has_rest_pose
    np.testing.assert_array_almost_equal(chain[0].rest_orientation, q)

    # Snapshot, not an alias of the live node
    node.set_quaternion(quat_identity())
    np.testing.assert_array_almost_equal(chain[0].rest_orientation, q)


def test_capture_skips_absent_joints_and_keeps_previous():
    chain = JointChain.from_nodes([SceneNode("J1"), None])
    previous = quat_from_axis_angle(vec3(1, 0, 0), 1.0)
    chain[1].rest_orientation = previous.copy()

    assert capture_rest_pose(chain) == 1
    assert chain.has_rest_pose
    np.testing.assert_array_almost_equal(chain[1].rest_orientation, previous)


def test_capture_all_missing_still_marks_captured():
    chain = JointChain.from_nodes([None, None])
    assert capture_rest_pose(chain) == 0
    assert chain.has_rest_pose
    assert chain[0].rest_orientation is None


def test_capture_only_missing():
    a, b = SceneNode("J1"), SceneNode("J2")
    chain = JointChain.from_nodes([a, b])
    capture_rest_pose(chain)

    a.set_quaternion(quat_from_axis_angle(vec3(0, 1, 0), 0.5))
    chain.attach(1, SceneNode("J2b"))
    assert capture_rest_pose(chain, only_missing=True) == 1
    np.testing.assert_array_almost_equal(chain[0].rest_orientation, quat_identity())
    assert chain[1].rest_orientation is not None


def test_capture_does_not_touch_commands_or_latches():
    chain = JointChain.from_nodes([SceneNode("J1")], axes=[(0, 0, 0)])
    chain[0].commanded_angle_deg = 33.0
    chain[0].degenerate_axis_warned = True
    capture_rest_pose(chain)
    assert chain[0].commanded_angle_deg == 33.0
    assert chain[0].degenerate_axis_warned
