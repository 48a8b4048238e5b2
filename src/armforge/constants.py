"""Shared constants and paths for ArmForge."""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"

# Chain defaults
DEFAULT_JOINT_COUNT = 6
DEFAULT_CHAIN_CONFIG = "six_axis_arm.json"

# Primary reference axis; also the fallback for a degenerate joint axis
DEFAULT_AXIS = (1.0, 0.0, 0.0)

# Joint limits (degrees)
DEFAULT_MIN_DEG = -180.0
DEFAULT_MAX_DEG = 180.0
DEFAULT_USE_LIMITS = True

# Squared-length threshold below which a configured axis is degenerate
AXIS_EPSILON = 1e-6

# Commanded vs. applied angle difference that marks a joint dirty (degrees)
DIRTY_EPSILON_DEG = 1e-4

# Bounded history of recorded joint warnings
WARNING_HISTORY = 256
