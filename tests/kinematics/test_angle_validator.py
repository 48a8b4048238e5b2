"""Tests for commanded-angle validation and clamping."""

import math

import pytest

from armforge.kinematics.angle_validator import clamp_angle, try_clamp
from armforge.kinematics.joint_chain import Joint, JointLimits


LIMITS = JointLimits(-45.0, 60.0)


@pytest.mark.parametrize("value", [-1000.0, -45.0, -45.0001, 0.0, 59.9, 60.0, 60.0001, 1e9])
def test_clamp_idempotent(value):
    once = clamp_angle(value, LIMITS)
    assert clamp_angle(once, LIMITS) == once
    assert LIMITS.min_deg <= once <= LIMITS.max_deg


def test_clamp_inclusive_bounds():
    assert clamp_angle(-45.0, LIMITS) == -45.0
    assert clamp_angle(60.0, LIMITS) == 60.0
    assert clamp_angle(75.0, LIMITS) == 60.0
    assert clamp_angle(-75.0, LIMITS) == -45.0


def test_clamp_without_limits_is_passthrough():
    assert clamp_angle(720.0, None) == 720.0


def test_try_clamp_in_range():
    joint = Joint(index=0, limits=LIMITS, commanded_angle_deg=12.5)
    assert try_clamp(joint) == (12.5, True)


def test_try_clamp_out_of_range_is_ok():
    joint = Joint(index=0, limits=LIMITS, commanded_angle_deg=200.0)
    assert try_clamp(joint, use_limits=True) == (60.0, True)


def test_try_clamp_limits_disabled():
    joint = Joint(index=0, limits=LIMITS, commanded_angle_deg=200.0)
    assert try_clamp(joint, use_limits=False) == (200.0, True)


def test_try_clamp_joint_without_limits():
    joint = Joint(index=0, limits=None, commanded_angle_deg=-500.0)
    assert try_clamp(joint, use_limits=True) == (-500.0, True)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_try_clamp_non_finite(value):
    joint = Joint(index=0, limits=LIMITS, commanded_angle_deg=value)
    _, ok = try_clamp(joint, use_limits=True)
    assert ok is False
    _, ok = try_clamp(joint, use_limits=False)
    assert ok is False
