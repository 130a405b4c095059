"""Shared fixtures: isolated config directory and an HTTP test client"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from services.config_manager import ConfigManager
from services.registry import reset_registry


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config manager at a fresh directory for every test"""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("BLUEDEVIL_CONFIG_DIR", str(config_dir))
    ConfigManager.reset_instance()
    reset_registry()
    yield config_dir
    ConfigManager.reset_instance()
    reset_registry()


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_image():
    """Encode a solid-colour image in the given format"""

    def _make(size=(64, 64), fmt="PNG", color=(200, 30, 30)):
        buffer = io.BytesIO()
        Image.new("RGB", size, color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make
