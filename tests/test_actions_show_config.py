"""
Tests for actions/show_config.py.

The script is imported as a module (actions/ is not a package, so it is
loaded by path) and main() is called with an explicit argv.
"""

import importlib.util
import json
from pathlib import Path

import pytest

from src.config.settings import AppConfig, LoadSource
from src.utils.logging_setup import LOG_FORMAT


SCRIPT_PATH = Path(__file__).parent.parent / "actions" / "show_config.py"


@pytest.fixture
def show_config():
    spec = importlib.util.spec_from_file_location("show_config", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def restore_root_logger():
    import logging

    root = logging.getLogger()
    original_level = root.level
    yield
    for handler in root.handlers[:]:
        if handler.formatter is not None and handler.formatter._fmt == LOG_FORMAT:
            root.removeHandler(handler)
    root.setLevel(original_level)


def test_render_config_masks_secrets_by_default(show_config):
    config = AppConfig(alpaca_api_key="PKABCDEFGHWXYZ", source=LoadSource.LOCAL)

    data = json.loads(show_config.render_config(config))

    assert data["alpaca_api_key"] == "****WXYZ"
    assert data["source"] == "local"


def test_render_config_show_secrets(show_config):
    config = AppConfig(alpaca_api_key="PKABCDEFGHWXYZ", source=LoadSource.REMOTE)

    data = json.loads(show_config.render_config(config, show_secrets=True))

    assert data["alpaca_api_key"] == "PKABCDEFGHWXYZ"
    assert data["source"] == "remote"


def test_main_prints_resolved_config(show_config, monkeypatch, tmp_path, capsys):
    env_file = tmp_path / "dev.env"
    env_file.write_text("PROPHET_SHOW_CONFIG_MARKER=1\n", encoding="utf-8")
    monkeypatch.delenv("CONFIG_SERVICE_URL", raising=False)
    monkeypatch.delenv("PROPHET_SHOW_CONFIG_MARKER", raising=False)
    monkeypatch.setenv("SERVER_PORT", "8123")

    exit_code = show_config.main(["--env-file", str(env_file)])
    monkeypatch.delenv("PROPHET_SHOW_CONFIG_MARKER", raising=False)

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["server_port"] == "8123"
    assert data["data_retention_days"] == 90
    assert data["source"] == "local"
