"""
Centralized configuration for Design Planner.

Layout constants are fixed by the 4-column slot model. Deployment values can
be set in ``config/planner.yaml`` under the app home and overridden via
environment variables where marked.
"""

import logging
import os
from typing import Any

import yaml

from planner import paths

logger = logging.getLogger(__name__)

# ============================================================
# Slot layout
# ============================================================

SLOT_COLUMNS: int = 4
"""Columns per half-day slot; one column is one hour."""

MIN_TASK_WIDTH: float = 1
"""Smallest width a task may shrink to during compression."""

MAX_TASKS_PER_SLOT: int = 4
"""A slot never holds more tasks than it has columns."""

# ============================================================
# Deployment
# ============================================================

CONFIG_FILENAME = "planner.yaml"

_DEFAULTS: dict[str, Any] = {
    "log_level": "INFO",
    "json_logs": None,
    "cors_origins": "*",
    "api_host": "127.0.0.1",
    "api_port": 8420,
}

_ENV_OVERRIDES = {
    "log_level": "LOG_LEVEL",
    "cors_origins": "CORS_ORIGINS",
    "api_host": "API_HOST",
    "api_port": "API_PORT",
}


def _load_file_config() -> dict:
    """Read config/planner.yaml if present."""
    config_file = paths.config_dir() / CONFIG_FILENAME
    if not config_file.exists():
        return {}
    with open(config_file) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top level is not a mapping", config_file)
        return {}
    return data


def load_settings() -> dict[str, Any]:
    """
    Resolve settings: defaults, then planner.yaml, then environment.
    """
    settings = dict(_DEFAULTS)
    settings.update({k: v for k, v in _load_file_config().items() if k in _DEFAULTS})

    for key, env_var in _ENV_OVERRIDES.items():
        if os.environ.get(env_var):
            settings[key] = os.environ[env_var]

    settings["api_port"] = int(settings["api_port"])
    return settings


def cors_origins(raw: str | list[str]) -> list[str]:
    """Parse a comma-separated origin list; ``*`` allows all."""
    if isinstance(raw, list):
        return [o.strip() for o in raw if o.strip()]
    if raw.strip() == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]
