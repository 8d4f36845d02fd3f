from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "DESIGN_PLANNER_HOME"
APP_ENV_DB = "DESIGN_PLANNER_DB"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains planner/, api/, cli/, tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for Design Planner.
    Override with DESIGN_PLANNER_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".design_planner").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    Canonical assignment DB path.

    Resolution order:
    1. DESIGN_PLANNER_DB env var (explicit override)
    2. ~/.design_planner/data/planner.db (default)
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "planner.db"
