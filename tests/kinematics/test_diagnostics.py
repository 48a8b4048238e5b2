"""Tests for the logging observer and chain report."""

import logging
import math

from armforge.core.events import EventBus
from armforge.core.scene_graph import SceneNode
from armforge.kinematics.chain_config import ChainConfig
from armforge.kinematics.controller import JointChainController
from armforge.kinematics.diagnostics import ChainDiagnostics, format_chain_report
from armforge.kinematics.joint_chain import WarningKind


def test_counts_updates_and_compositions():
    controller = JointChainController(ChainConfig.default(3))
    diag = ChainDiagnostics(controller.event_bus)
    controller.tick()
    controller.tick()
    assert diag.update_count == 1
    assert diag.composed_count == 3


def test_counts_warnings():
    controller = JointChainController(ChainConfig.default(2))
    diag = ChainDiagnostics(controller.event_bus)
    controller.set_angle(1, math.inf)
    controller.tick()
    assert diag.warning_counts[WarningKind.INVALID_ANGLE] == 1


def test_logs_first_link_once(caplog):
    controller = JointChainController(ChainConfig.default(2))
    ChainDiagnostics(controller.event_bus, links=controller.links, log_first_link_once=True)
    with caplog.at_level(logging.INFO, logger="armforge.kinematics.diagnostics"):
        controller.tick()
        controller.set_angles([10.0, 0.0])
        controller.tick()
    assert len([r for r in caplog.records if r.getMessage().startswith("Link0")]) == 1


def test_detach_stops_counting():
    bus = EventBus()
    controller = JointChainController(ChainConfig.default(1), event_bus=bus)
    diag = ChainDiagnostics(bus)
    diag.detach()
    controller.tick()
    assert diag.update_count == 0


def test_format_chain_report():
    nodes = [SceneNode("base"), None]
    controller = JointChainController(ChainConfig.default(2), nodes=nodes)
    controller.tick()
    report = format_chain_report(controller.chain, controller.link_segments())
    assert "partially_missing" in report
    assert "J1" in report
    assert "L1: (missing)" in report
    assert "MissingReference: 1" in report
