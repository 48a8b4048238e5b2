"""Tests for chain configuration parsing and chain construction."""

import json

import numpy as np
import pytest

from armforge.constants import DEFAULT_CHAIN_CONFIG
from armforge.core.scene_graph import SceneNode
from armforge.kinematics.chain_config import (
    ChainConfig, ChainConfigError, JointConfig, build_chain, load_chain_config,
)
from armforge.kinematics.joint_chain import JointLimits


def _raw(n=2, **extra):
    data = {"joints": [{"name": f"A{i}"} for i in range(n)]}
    data.update(extra)
    return data


def test_default_config():
    config = ChainConfig.default()
    assert config.joint_count == 6
    assert config.use_limits is True
    j = config.joints[0]
    assert j.name == "J1"
    assert j.axis == (1.0, 0.0, 0.0)
    assert (j.min_deg, j.max_deg) == (-180.0, 180.0)


def test_from_dict_defaults_fill_missing_fields():
    config = ChainConfig.from_dict({"joints": [{}, {}]})
    assert [j.name for j in config.joints] == ["J1", "J2"]
    assert config.joints[1].limits == JointLimits(-180.0, 180.0)
    assert config.use_limits is True


def test_from_dict_camel_and_snake_keys():
    config = ChainConfig.from_dict({
        "name": "arm",
        "use_limits": False,
        "tcpOffset": [0, 0, 0.5],
        "joints": [
            {"axis": [0, 0, 1], "minDeg": -10, "maxDeg": 10, "restEulerDeg": [0, 90, 0]},
            {"axis": [0, 1, 0], "min_deg": -20, "max_deg": 20, "offset": [0, 0, 1]},
        ],
    })
    assert config.name == "arm"
    assert config.use_limits is False
    assert config.tcp_offset == (0.0, 0.0, 0.5)
    assert config.joints[0].limits == JointLimits(-10, 10)
    assert config.joints[0].rest_euler_deg == (0.0, 90.0, 0.0)
    assert config.joints[1].limits == JointLimits(-20, 20)
    assert config.joints[1].offset == (0.0, 0.0, 1.0)


def test_zero_axis_is_accepted():
    config = ChainConfig.from_dict({"joints": [{"axis": [0, 0, 0]}]})
    assert config.joints[0].axis == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("data", [
    [],
    {"joints": []},
    {"joints": "J1"},
    {"joints": [5]},
    {"joints": [{"axis": [1, 0]}]},
    {"joints": [{"axis": ["x", 0, 0]}]},
    {"joints": [{"minDeg": 10, "maxDeg": -10}]},
    {"joints": [{"minDeg": "low"}]},
    {"joints": [{"offset": [0, float("nan"), 0]}]},
    {"joints": [{}], "tcpOffset": 3},
])
def test_from_dict_rejects_malformed(data):
    with pytest.raises(ChainConfigError):
        ChainConfig.from_dict(data)


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_use_limits_must_be_bool(value):
    with pytest.raises(ChainConfigError, match="useLimits"):
        ChainConfig.from_dict(_raw(2, useLimits=value))
    with pytest.raises(ChainConfigError, match="useLimits"):
        ChainConfig.from_dict(_raw(2, use_limits=value))


def test_expected_joint_count():
    ChainConfig.from_dict(_raw(6), expected_joint_count=6)
    with pytest.raises(ChainConfigError):
        ChainConfig.from_dict(_raw(5), expected_joint_count=6)


def test_config_error_is_value_error():
    assert issubclass(ChainConfigError, ValueError)


def test_to_dict_roundtrip():
    config = ChainConfig.from_dict(_raw(3, useLimits=False, name="arm"))
    again = ChainConfig.from_dict(config.to_dict())
    assert again == config


def test_load_bundled_config():
    config = load_chain_config(DEFAULT_CHAIN_CONFIG, expected_joint_count=6)
    assert config.name == "six_axis_arm"
    assert config.joints[0].axis == (0.0, 0.0, 1.0)


def test_load_config_from_path(tmp_path):
    path = tmp_path / "arm.json"
    path.write_text(json.dumps(_raw(2, name="tmp_arm")))
    assert load_chain_config(path).name == "tmp_arm"


def test_load_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_chain_config(tmp_path / "nope_does_not_exist.json")


def test_build_chain_from_config():
    config = ChainConfig(joints=[
        JointConfig(name="base", axis=(0, 0, 2), min_deg=-5, max_deg=5),
        JointConfig(name="elbow"),
    ], use_limits=False)
    nodes = [SceneNode("a"), None]
    chain = build_chain(config, nodes)
    assert len(chain) == 2
    assert chain[0].name == "base"
    assert chain[0].node is nodes[0]
    np.testing.assert_array_equal(chain[0].local_axis, [0, 0, 2])
    assert chain[0].limits == JointLimits(-5, 5)
    assert chain[1].node is None
    assert chain.use_limits is False


def test_build_chain_length_mismatch():
    with pytest.raises(ChainConfigError):
        build_chain(ChainConfig.default(3), [SceneNode(), SceneNode()])
