"""Tests for runtime configuration and index location."""

import json
import os

from csindex.config_runtime import DEFAULTS, load_runtime_config, locate_default_index_file


def test_defaults(monkeypatch):
    for var in [
        "CSINDEX_CONFIG",
        "CSINDEX_PATHS_INDEX",
        "CSINDEX_LIMITS_MAX_FILE_SIZE",
        "CSINDEX_LIMITS_MAX_LINE_LENGTH",
    ]:
        monkeypatch.delenv(var, raising=False)

    cfg = load_runtime_config()

    assert cfg == DEFAULTS
    assert cfg is not DEFAULTS


def test_config_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "limits": {"max_line_length": 500, "unknown": 1},
        "paths": {"index": 42},
    }))

    cfg = load_runtime_config(str(path))

    assert cfg["limits"]["max_line_length"] == 500
    assert "unknown" not in cfg["limits"]
    # Wrong type is ignored
    assert cfg["paths"]["index"] == DEFAULTS["paths"]["index"]


def test_environment_beats_config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"limits": {"max_file_size": 10}}))
    monkeypatch.setenv("CSINDEX_CONFIG", str(path))
    monkeypatch.setenv("CSINDEX_LIMITS_MAX_FILE_SIZE", "20")

    assert load_runtime_config()["limits"]["max_file_size"] == 20


def test_invalid_environment_value_keeps_default(monkeypatch, log_messages):
    monkeypatch.delenv("CSINDEX_CONFIG", raising=False)
    monkeypatch.setenv("CSINDEX_LIMITS_MAX_LINE_LENGTH", "lots")

    cfg = load_runtime_config()

    assert cfg["limits"]["max_line_length"] == DEFAULTS["limits"]["max_line_length"]
    assert any("CSINDEX_LIMITS_MAX_LINE_LENGTH" in m for m in log_messages)


def test_unreadable_config_file_falls_back(tmp_path, log_messages):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    assert load_runtime_config(str(path))["limits"] == DEFAULTS["limits"]
    assert any("Could not load config file" in m for m in log_messages)


def test_index_location_from_csearchindex(tmp_path, monkeypatch):
    monkeypatch.setenv("CSEARCHINDEX", str(tmp_path / "idx"))

    assert locate_default_index_file() == str(tmp_path / "idx")


def test_index_location_defaults_to_home(tmp_path, monkeypatch):
    monkeypatch.delenv("CSEARCHINDEX", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    location = locate_default_index_file({"paths": {"index": "~/.csearchindex"}})

    assert location == os.path.join(str(tmp_path), ".csearchindex")
