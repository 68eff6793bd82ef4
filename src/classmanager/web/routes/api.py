from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from classmanager.errors import UnknownThemeError
from classmanager.preferences import THEMES

api_bp = Blueprint("api", __name__)


@api_bp.after_request
def add_cors_headers(response):
    """Allow cross-origin requests to the API."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response


@api_bp.route("/css", methods=["GET"])
def get_css():
    """Return the stored author CSS."""
    processor = current_app.extensions["css_processor"]
    return jsonify({"css": processor.load_css()})


@api_bp.route("/css", methods=["POST"])
def save_css():
    """Save author CSS and regenerate the derived stylesheets."""
    data = request.get_json(silent=True)
    css = data.get("css") if isinstance(data, dict) else None
    if not isinstance(css, str) or not css.strip():
        return jsonify({"error": "css required"}), 400

    processor = current_app.extensions["css_processor"]
    if not processor.process_css(css):
        return jsonify({"saved": False, "error": "Failed to save CSS file"}), 500
    return jsonify({"saved": True, "classes": processor.available_classes()})


@api_bp.route("/classes")
def list_classes():
    """Return the class-name feed for the editor suggestion list."""
    processor = current_app.extensions["css_processor"]
    return jsonify({"classes": processor.available_classes()})


@api_bp.route("/files")
def file_info():
    """Return sizes of the stored stylesheets."""
    processor = current_app.extensions["css_processor"]
    info = processor.file_info()
    if info is None:
        return jsonify({"error": "not found"}), 404
    return jsonify(info.to_dict())


@api_bp.route("/theme")
def get_theme():
    """Return a user's editor theme and the available themes."""
    user = request.args.get("user", "")
    if not user:
        return jsonify({"error": "user required"}), 400
    preferences = current_app.extensions["theme_preferences"]
    return jsonify({"theme": preferences.get(user), "themes": THEMES})


@api_bp.route("/theme", methods=["POST"])
def save_theme():
    """Store a user's editor theme."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "user" not in data:
        return jsonify({"error": "user and theme required"}), 400

    preferences = current_app.extensions["theme_preferences"]
    try:
        theme = preferences.set(data["user"], data.get("theme", ""))
    except UnknownThemeError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"theme": theme, "stored_value": preferences.get(data["user"])})
