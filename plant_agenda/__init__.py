"""
Application factory and global configuration.

Creates the Flask app, applies security headers, configures rate limiting,
wires the state store, the seen-tips tracker and the notification
dispatcher, and registers the JSON API. Startup concerns stay here; domain
logic lives in services/.
"""

from __future__ import annotations
import os
from flask import Flask, Response
from dotenv import load_dotenv  # <-- ensure .env is loaded for local dev
from .extensions import limiter
from .routes.api import api_bp
from .services.daily_tips import init_tip_trackers
from .services.notifications import init_notifications
from .services.storage import init_storage
from .services.weather import configure_weather_cache


def create_app() -> Flask:
    # override=False so production env vars are not overwritten by a stale .env file
    load_dotenv(override=False)

    app = Flask(__name__)

    # Allow APP_CONFIG to override (e.g., plant_agenda.config.DevConfig)
    cfg_path = os.getenv("APP_CONFIG", "plant_agenda.config.ProdConfig")
    try:
        app.config.from_object(cfg_path)
    except (ImportError, AttributeError) as e:
        app.logger.warning(f"Could not load config object {cfg_path}: {e}")

    limiter.init_app(app)

    if not app.config.get("RATELIMIT_ENABLED", True):
        limiter.enabled = False

    if not app.secret_key:
        app.secret_key = app.config.get("SECRET_KEY", "")

    configure_weather_cache(app.config.get("WEATHER_CACHE_TTL_SECONDS", 1800))
    init_storage(app)
    init_tip_trackers(app)

    @app.after_request
    def apply_security_headers(resp: Response) -> Response:
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        resp.headers["X-Frame-Options"] = "DENY"
        return resp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    # Skips the background scheduler in test mode or when notifications are off
    init_notifications(app)

    return app
