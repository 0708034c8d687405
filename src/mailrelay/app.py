"""HTTP interface of the mail relay."""

import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from .config import Settings, load_settings
from .exceptions import MailRelayError, RateLimitError
from .sender import EmailSender

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many emails sent from this IP, please try again later."

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def _error_response(error, status: int):
    return jsonify({"success": False, "error": str(error)}), status


def create_app(settings: Optional[Settings] = None, sender: Optional[EmailSender] = None) -> Flask:
    """Factory function to create and configure the Flask app.

    Args:
        settings: Application settings, loaded from the environment if omitted
        sender: Pipeline used by the send endpoints, built from settings if omitted
    """
    settings = settings or load_settings()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.server.max_content_length
    app.settings = settings
    app.sender = sender or EmailSender.from_settings(settings)

    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri=settings.rate_limit.storage_uri,
        enabled=settings.rate_limit.enabled,
    )
    app.limiter = limiter
    # Both send endpoints draw from the same per-client bucket.
    send_limit = limiter.shared_limit(settings.rate_limit.limit, scope="send")

    @app.after_request
    def add_security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.route('/send-email', methods=['POST'])
    @send_limit
    def send_email():
        """Send a single email."""
        data = request.get_json(silent=True)
        try:
            result = app.sender.send_email(data)
        except MailRelayError as e:
            logger.warning(f"Rejected send request from {request.remote_addr}: {e}")
            return _error_response(e, 400)

        if not result.success:
            return jsonify(result.to_dict()), 400
        return jsonify(result.to_dict()), 200

    @app.route('/send-bulk', methods=['POST'])
    @send_limit
    def send_bulk():
        """Send up to the configured number of emails sequentially."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            data = {}
        try:
            results = app.sender.send_bulk(data.get('emails'), data.get('template'))
        except MailRelayError as e:
            logger.warning(f"Rejected bulk request from {request.remote_addr}: {e}")
            return _error_response(e, 400)

        return jsonify({"results": [r.to_dict() for r in results]}), 200

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), 200

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        logger.warning(f"Rate limit exceeded for {request.remote_addr}")
        return _error_response(RateLimitError(RATE_LIMIT_MESSAGE), 429)

    @app.errorhandler(HTTPException)
    def http_error(error):
        return _error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def internal_error(error):
        logger.exception(f"Server error: {error}")
        return _error_response("Internal server error", 500)

    return app
