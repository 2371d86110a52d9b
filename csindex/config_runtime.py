"""Runtime configuration for csindex - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from csindex.indexer.config import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_LINE_LENGTH
from csindex.utils.logging import logger

# Environment variable the query tool also reads for the index location
INDEX_ENV_VAR = "CSEARCHINDEX"

# Optional JSON file overlaying DEFAULTS
CONFIG_ENV_VAR = "CSINDEX_CONFIG"

DEFAULTS = {
    "paths": {
        "index": "~/.csearchindex",
    },
    "limits": {
        "max_file_size": DEFAULT_MAX_FILE_SIZE,
        "max_line_length": DEFAULT_MAX_LINE_LENGTH,
    },
}


def load_runtime_config(config_path: str | None = None) -> dict[str, Any]:
    """
    Load runtime configuration from a JSON file and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (CSINDEX_<SECTION>_<KEY>)
    2. JSON file at ``config_path`` or $CSINDEX_CONFIG
    3. Built-in defaults

    Args:
        config_path: Explicit config file; falls back to $CSINDEX_CONFIG

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        try:
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load config file from {}: {}", path, e)
            logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"CSINDEX_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    if isinstance(cfg[section][key], int):
                        cfg[section][key] = int(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        "Invalid value for environment variable {}: '{}' - {}", env_var, value, e
                    )
                    logger.info("Using default value: {}", cfg[section][key])

    return cfg


def locate_default_index_file(config: dict[str, Any] | None = None) -> str:
    """Resolve the published index location.

    $CSEARCHINDEX wins, then the configured ``paths.index``. The result is
    absolute with ``~`` expanded.
    """
    env_value = os.environ.get(INDEX_ENV_VAR)
    if env_value:
        return str(Path(env_value).expanduser().absolute())
    if config is None:
        config = load_runtime_config()
    return str(Path(config["paths"]["index"]).expanduser().absolute())
