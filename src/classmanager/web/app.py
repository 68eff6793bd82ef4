from __future__ import annotations

from flask import Flask

from classmanager.config import ClassManagerConfig
from classmanager.pipeline import CSSProcessor
from classmanager.preferences import ThemePreferences


def create_app(
    config: ClassManagerConfig | None = None,
    processor: CSSProcessor | None = None,
    preferences: ThemePreferences | None = None,
    flask_config: dict | None = None,
) -> Flask:
    """Create and configure the Flask app."""
    app = Flask(__name__)
    app.config.update(flask_config or {})

    config = config or ClassManagerConfig()
    app.extensions["classmanager_config"] = config
    app.extensions["css_processor"] = processor or CSSProcessor(config)
    app.extensions["theme_preferences"] = preferences or ThemePreferences(
        config.preferences_path
    )

    from classmanager.web.routes.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    return app
