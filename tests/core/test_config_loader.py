"""Tests for JSON config loading."""

import json

from armforge.constants import CONFIG_DIR, DEFAULT_CHAIN_CONFIG
from armforge.core.config_loader import load_config, load_json, resolve_config_path


def test_load_json(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"a": [1, 2]}))
    assert load_json(path) == {"a": [1, 2]}


def test_load_bundled_config():
    data = load_config(DEFAULT_CHAIN_CONFIG)
    assert len(data["joints"]) == 6


def test_resolve_config_path_prefers_existing_file(tmp_path):
    path = tmp_path / "arm.json"
    path.write_text("{}")
    assert resolve_config_path(path) == path
    assert resolve_config_path(str(path)) == path


def test_resolve_config_path_falls_back_to_config_dir():
    assert resolve_config_path(DEFAULT_CHAIN_CONFIG) == CONFIG_DIR / DEFAULT_CHAIN_CONFIG
