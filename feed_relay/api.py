"""HTTP API server for the feed relay."""

import time
from typing import Optional

import structlog
from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.serving import BaseWSGIServer, WSGIRequestHandler, make_server

from .config import RelayConfig
from .metrics import render_metrics
from .webhook import MessageFormatter, MessageSender
from .webhook_handler import EVENT_TYPE_HEADER, WebhookHandler

logger = structlog.get_logger(__name__)


def build_handler(config: RelayConfig) -> WebhookHandler:
    """Wire a webhook handler and its sender from configuration."""
    sender = MessageSender(
        formatter=MessageFormatter(content_max_length=config.content_max_length),
        timeout=config.timeout,
        user_agent=config.user_agent,
    )
    return WebhookHandler(sender)


def create_app(
    config: Optional[RelayConfig] = None,
    handler: Optional[WebhookHandler] = None,
) -> Flask:
    """Create the Flask application.

    Args:
        config: Relay configuration, defaults are used when omitted
        handler: Webhook handler, built from ``config`` when omitted

    Returns:
        Configured Flask app
    """
    config = config or RelayConfig()
    handler = handler or build_handler(config)

    app = Flask(__name__)
    app.config["RELAY"] = config
    app.extensions["webhook_handler"] = handler

    @app.before_request
    def start_timer():
        g.start_time = time.time()

    @app.after_request
    def log_webhook_request(response):
        # Query strings carry the destination URL, so only the path is logged.
        if request.path.startswith("/webhook"):
            logger.info(
                "http_request",
                method=request.method,
                path=request.path,
                status=response.status_code,
                duration_ms=round((time.time() - g.get("start_time", time.time())) * 1000, 2),
            )
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        logger.exception("unhandled_request_error", path=request.path)
        return jsonify({"error": "Internal server error"}), 500

    @app.route("/health", methods=["GET"])
    def health():
        """Liveness probe."""
        return jsonify({"status": "healthy", "service": config.service_name}), 200

    @app.route("/metrics", methods=["GET"])
    def metrics():
        """Prometheus metrics."""
        payload, content_type = render_metrics()
        return Response(payload, content_type=content_type)

    @app.route("/webhook/miniflux", methods=["POST"])
    def miniflux_webhook():
        """Relay Miniflux new entries to the destination in ``webhook_url``."""
        body, status = handler.process_webhook(
            event_type=request.headers.get(EVENT_TYPE_HEADER),
            webhook_url=request.args.get("webhook_url"),
            body=request.get_data(),
        )
        return jsonify(body), status

    return app


class QuietRequestHandler(WSGIRequestHandler):
    """Request handler without werkzeug's access log, which prints query strings."""

    def log_request(self, code="-", size="-"):
        pass


def create_server(app: Flask, host: str, port: int) -> BaseWSGIServer:
    """Bind a threaded WSGI server for ``app``.

    Raises:
        OSError: If the address cannot be bound
    """
    return make_server(host, port, app, threaded=True, request_handler=QuietRequestHandler)
