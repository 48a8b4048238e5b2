"""Optional logging observer for an FK chain.

Subscribes to the composer's event bus and stays outside the FK pass:

    diag = ChainDiagnostics(bus, links=links, log_first_link_once=True)
    ...
    print(format_chain_report(chain, links.segments()))
    diag.detach()
"""

import logging
from collections import Counter
from typing import Optional, Sequence

import numpy as np

from armforge.core.events import EventBus, EventType
from armforge.kinematics.joint_chain import ChainState, JointChain, JointWarning, WarningKind
from armforge.kinematics.link_geometry import ChainLinks, LinkSegment

logger = logging.getLogger(__name__)


class ChainDiagnostics:
    """Counts updates and warnings; optionally logs link 0 once."""

    def __init__(
        self,
        event_bus: EventBus,
        links: Optional[ChainLinks] = None,
        log_first_link_once: bool = False,
    ):
        self._bus = event_bus
        self._links = links
        self._log_first_link = log_first_link_once and links is not None

        self.update_count = 0
        self.composed_count = 0
        self.warning_counts: Counter[WarningKind] = Counter()

        self._subscriptions = [
            (EventType.CHAIN_UPDATED, self._on_chain_updated),
            (EventType.JOINT_COMPOSED, self._on_joint_composed),
            (EventType.JOINT_WARNING, self._on_joint_warning),
            (EventType.CHAIN_STATE_CHANGED, self._on_state_changed),
        ]
        for event_type, handler in self._subscriptions:
            event_bus.subscribe(event_type, handler)

    def detach(self) -> None:
        for event_type, handler in self._subscriptions:
            self._bus.unsubscribe(event_type, handler)

    def _on_chain_updated(self, chain: JointChain) -> None:
        self.update_count += 1
        logger.debug("FK applied: %s", ", ".join(
            f"{j.name}={j.last_applied_angle_deg:.3f}" for j in chain.joints))

        if self._log_first_link:
            segment = self._links.segments()[0]
            if segment is not None:
                logger.info("Link0 from=%s to=%s", _fmt(segment.start), _fmt(segment.end))
                self._log_first_link = False

    def _on_joint_composed(self, index: int, angle_deg: float, orientation) -> None:
        self.composed_count += 1

    def _on_joint_warning(self, warning: JointWarning) -> None:
        self.warning_counts[warning.kind] += 1

    def _on_state_changed(self, previous: ChainState, state: ChainState) -> None:
        if state is ChainState.PARTIALLY_MISSING:
            logger.info("FK chain paused until all joints are present")


def _fmt(v) -> str:
    return np.array2string(np.asarray(v), precision=4, suppress_small=True)


def format_chain_report(
    chain: JointChain,
    segments: Optional[Sequence[Optional[LinkSegment]]] = None,
) -> str:
    """Human-readable summary of chain state, joint poses and warnings."""
    lines = [
        f"Chain state: {chain.state.value}  active={chain.active}  "
        f"use_limits={chain.use_limits}",
        "Joints:",
    ]
    for joint in chain.joints:
        orient = "-" if joint.resolved_orientation is None else _fmt(joint.resolved_orientation)
        lines.append(
            f"  {joint.name:<6} cmd={joint.commanded_angle_deg:>10.4f}  "
            f"applied={joint.last_applied_angle_deg:>10.4f}  q={orient}"
        )

    if segments is not None:
        lines.append("Links:")
        for i, seg in enumerate(segments):
            if seg is None:
                lines.append(f"  L{i}: (missing)")
            else:
                lines.append(
                    f"  L{i}: {seg.start_name} -> {seg.end_name}  "
                    f"{_fmt(seg.start)} -> {_fmt(seg.end)}  len={seg.length:.4f}"
                )

    if chain.warning_counts:
        lines.append("Warnings:")
        for kind, count in sorted(chain.warning_counts.items(), key=lambda kv: kv[0].value):
            lines.append(f"  {kind.value}: {count}")
    return "\n".join(lines)
