"""CLI entry point for headless FK chain diagnostics.

Usage::

    # Default 6-axis arm, one tick at the given angles:
    python -m tools.fk_diagnostic --angles 10 -20 30 0 45 0

    # Custom config, limits disabled, JSON output:
    python -m tools.fk_diagnostic --config my_arm.json --no-limits --angles 200 0 0 0 0 0 --json

    # Several ticks (e.g. to check that unchanged commands are not recomposed):
    python -m tools.fk_diagnostic --angles 90 45 0 0 0 0 --ticks 3 -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from armforge.constants import DEFAULT_CHAIN_CONFIG
from armforge.kinematics.chain_config import ChainConfigError, load_chain_config
from armforge.kinematics.controller import JointChainController
from armforge.kinematics.diagnostics import ChainDiagnostics, format_chain_report

logger = logging.getLogger(__name__)


def run_diagnostic(
    config_name: str = DEFAULT_CHAIN_CONFIG,
    angles: list[float] | None = None,
    ticks: int = 1,
    use_limits: bool | None = None,
) -> dict:
    """Build a controller, apply *angles*, tick and return a summary dict."""
    config = load_chain_config(config_name)
    if use_limits is not None:
        config.use_limits = use_limits

    controller = JointChainController(config)
    diag = ChainDiagnostics(controller.event_bus, links=controller.links,
                            log_first_link_once=True)
    if angles is not None:
        controller.set_angles(angles)

    results = [controller.tick().value for _ in range(ticks)]
    segments = controller.link_segments()
    diag.detach()

    chain = controller.chain
    return {
        "config": config.name,
        "state": chain.state.value,
        "tick_results": results,
        "composed_joints": diag.composed_count,
        "joints": [
            {
                "name": j.name,
                "commanded_deg": j.commanded_angle_deg,
                "applied_deg": j.last_applied_angle_deg,
                "orientation": None if j.resolved_orientation is None
                else [float(v) for v in j.resolved_orientation],
            }
            for j in chain.joints
        ],
        "links": [
            None if s is None else {
                "from": s.start_name,
                "to": s.end_name,
                "start": [float(v) for v in s.start],
                "end": [float(v) for v in s.end],
            }
            for s in segments
        ],
        "warnings": {k.value: n for k, n in chain.warning_counts.items()},
        "report": format_chain_report(chain, segments),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Headless forward-kinematics chain diagnostic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config", default=DEFAULT_CHAIN_CONFIG, metavar="FILE",
        help=f"Chain config path or name in assets/config/ (default: {DEFAULT_CHAIN_CONFIG})",
    )
    parser.add_argument(
        "--angles", nargs="+", type=float, default=None, metavar="DEG",
        help="Commanded angle per joint, in degrees",
    )
    parser.add_argument(
        "--ticks", type=int, default=1,
        help="Number of update ticks to run (default: 1)",
    )
    parser.add_argument(
        "--no-limits", action="store_true",
        help="Disable joint limit clamping",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the summary as JSON instead of a text report",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if args.ticks < 1:
        parser.error("--ticks must be at least 1")

    try:
        summary = run_diagnostic(
            config_name=args.config,
            angles=args.angles,
            ticks=args.ticks,
            use_limits=False if args.no_limits else None,
        )
    except FileNotFoundError as e:
        logger.error("Chain config not found: %s", e)
        return 1
    except ChainConfigError as e:
        logger.error("Invalid chain config: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid command: %s", e)
        return 1

    if args.json:
        report = summary.pop("report")
        print(json.dumps(summary, indent=2))
        logger.debug("\n%s", report)
    else:
        print(summary["report"])
        print(f"\nTicks: {', '.join(summary['tick_results'])}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
