"""
project: Delve
module: __init__.py
License: MIT

Flask application factory.

Configuration comes from environment variables (a local .env is loaded
first) with development defaults; ``create_app(overrides)`` applies the
mapping last so tests can pin values. Generation and pathfinding live in
``delve.dungeon`` and ``delve.pathfinding`` and do not need the app.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .errors import InvalidConfigError

_VERSION_FILE = Path(__file__).resolve().parent.parent / "VERSION"


def load_version() -> str:
    try:
        return _VERSION_FILE.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.1.0"


__version__ = load_version()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigError(name, f"expected an integer, got {raw!r}") from None


def create_app(overrides=None):
    """Build the Flask app with the dungeon blueprints and JSON error handlers."""
    load_dotenv()
    app = Flask(__name__, instance_relative_config=True)
    # Rotating log file lives under instance/
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass

    app.config.update(
        DELVE_VERSION=__version__,
        DELVE_DEFAULT_WIDTH=_env_int("DELVE_DEFAULT_WIDTH", 60),
        DELVE_DEFAULT_HEIGHT=_env_int("DELVE_DEFAULT_HEIGHT", 60),
        DELVE_DEFAULT_MIN_ROOMS=_env_int("DELVE_DEFAULT_MIN_ROOMS", 6),
        DELVE_DEFAULT_MAX_ROOMS=_env_int("DELVE_DEFAULT_MAX_ROOMS", 10),
        DELVE_MAX_DIMENSION=_env_int("DELVE_MAX_DIMENSION", 200),
        DELVE_MAX_ROOMS=_env_int("DELVE_MAX_ROOMS", 50),
        DELVE_CACHE_SIZE=_env_int("DELVE_CACHE_SIZE", 8),
    )
    if overrides:
        app.config.update(overrides)

    from .routes.dungeon_api import bp_dungeon
    from .routes.seed_api import bp_seed

    app.register_blueprint(bp_dungeon)
    app.register_blueprint(bp_seed)
    _register_error_handlers(app)
    return app


def _register_error_handlers(app):
    @app.errorhandler(InvalidConfigError)
    def invalid_config(e):
        return jsonify({"error": str(e), "field": e.field}), 400

    @app.errorhandler(HTTPException)
    def http_error(e):
        if e.code == 500:
            return internal_error(e)
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        original = getattr(e, "original_exception", None) or e
        logging.getLogger("delve").error(
            "Unhandled exception (id=%s)", error_id, exc_info=(type(original), original, original.__traceback__)
        )
        return jsonify({"error": "internal", "error_id": error_id}), 500


__all__ = ["create_app", "load_version", "__version__"]
