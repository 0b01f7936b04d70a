"""Application factory for NorskTax backend services."""

from __future__ import annotations

import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from .http import problem_for_exception, problem_response
from .routes import register_routes
from .routes.calculations import EVENTS_EXTENSION
from .routes.config import get_configuration_metadata
from .services.events import CalculationEvents, log_calculation_notice


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def create_app(events: CalculationEvents | None = None) -> Flask:
    """Create and configure the Flask application instance.

    ``events`` lets callers attach their own observers; by default a registry
    with an audit-logging observer is created.
    """

    app = Flask(__name__)

    allowed_origins = _parse_allowed_origins(os.getenv("NORSKTAX_ALLOWED_ORIGINS"))

    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type", "Accept-Language"],
    )

    if events is None:
        events = CalculationEvents()
        events.subscribe_all(log_calculation_notice)
    app.extensions[EVENTS_EXTENSION] = events

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Surface invalid arguments and configuration problems to clients."""

        return problem_for_exception(error).to_response()

    @app.errorhandler(FileNotFoundError)
    def handle_missing_year(error: FileNotFoundError):
        """Unknown tax years are reported as missing resources."""

        return problem_for_exception(error).to_response()

    return app
