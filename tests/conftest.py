"""
Test configuration - ensures repo root is in sys.path + DB isolation.

This allows tests to import from top-level packages (planner, api, cli).
Every test gets its own app home and database under tmp_path, so nothing
touches ~/.design_planner.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import planner.*, api.*, cli.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from planner import assignment_store  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the app home and DB at a per-test temp directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("DESIGN_PLANNER_HOME", str(home))
    monkeypatch.setenv("DESIGN_PLANNER_DB", str(home / "data" / "test.db"))
    for var in ("LOG_LEVEL", "CORS_ORIGINS", "API_HOST", "API_PORT"):
        monkeypatch.delenv(var, raising=False)
    assignment_store.reset_store()
    yield home
    assignment_store.reset_store()


@pytest.fixture
def store(isolated_home):
    """Fresh assignment store on the temp DB."""
    return assignment_store.get_store()
