"""JSON config file loading utilities."""

import json
from pathlib import Path
from typing import Any, Union

from armforge.constants import CONFIG_DIR


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def load_config(name: str) -> Any:
    """Load a config file from assets/config/."""
    return load_json(CONFIG_DIR / name)


def resolve_config_path(name_or_path: Union[str, Path]) -> Path:
    """Return *name_or_path* if it exists, else look it up in assets/config/."""
    path = Path(name_or_path)
    if path.is_file():
        return path
    return CONFIG_DIR / path.name
