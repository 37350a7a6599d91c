"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import src...' works, and keeps
a developer's own config service settings from leaking into tests that read
the real process environment.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


@pytest.fixture(autouse=True)
def no_config_service(monkeypatch):
    """Unset CONFIG_SERVICE_URL / CONFIG_ACCESS_TOKEN for every test."""
    monkeypatch.delenv("CONFIG_SERVICE_URL", raising=False)
    monkeypatch.delenv("CONFIG_ACCESS_TOKEN", raising=False)
