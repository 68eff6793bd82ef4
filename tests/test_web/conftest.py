from __future__ import annotations

import pytest

from classmanager.config import ClassManagerConfig
from classmanager.web.app import create_app


@pytest.fixture
def config(tmp_path):
    return ClassManagerConfig(
        output_dir=str(tmp_path / "lza-css"),
        preferences_path=str(tmp_path / "prefs.json"),
    )


@pytest.fixture
def app(config):
    """Create a Flask app for testing."""
    application = create_app(config=config)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
