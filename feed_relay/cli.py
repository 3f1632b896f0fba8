import json
import sys
from pathlib import Path

import click
import structlog
from dotenv import load_dotenv

from .api import build_handler, create_app, create_server
from .config import RelayConfig
from .exceptions import ConfigurationError, ValidationError
from .logging_config import configure_logging
from .models import NEW_ENTRIES_EVENT

logger = structlog.get_logger(__name__)


def load_config() -> RelayConfig:
    """Load configuration from a ``.env`` file and the environment."""
    load_dotenv()
    return RelayConfig.from_env()


@click.group()
def cli():
    """Feed Relay CLI"""
    pass


@cli.command()
@click.option("--host", default=None, help="Listen address (defaults to $HOST)")
@click.option(
    "--port",
    default=None,
    type=click.IntRange(1, 65535),
    help="Listen port (defaults to $PORT)",
)
def serve(host, port):
    """Start the webhook relay server."""
    try:
        cfg = load_config()
    except ConfigurationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    if host:
        cfg.host = host
    if port is not None:
        cfg.port = port

    configure_logging(cfg.log_level, cfg.log_format)
    logger.info("starting_feed_relay", service=cfg.service_name)

    app = create_app(cfg)
    try:
        server = create_server(app, cfg.host, cfg.port)
    except OSError as e:
        logger.error("server_bind_failed", host=cfg.host, port=cfg.port, error=str(e))
        sys.exit(1)

    logger.info(
        "server_started",
        host=cfg.host,
        port=cfg.port,
        webhook_endpoint="/webhook/miniflux?webhook_url=YOUR_WEBHOOK_URL",
        health_endpoint="/health",
    )

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        click.echo("\nShutting down...")
    finally:
        server.server_close()


@cli.command()
@click.argument("envelope_file", type=click.Path(exists=True, path_type=Path))
@click.option("--webhook-url", required=True, help="Destination webhook endpoint")
def relay(envelope_file, webhook_url):
    """Relay the entries of a saved webhook payload once."""
    try:
        cfg = load_config()
    except ConfigurationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    configure_logging(cfg.log_level, cfg.log_format)
    handler = build_handler(cfg)

    try:
        envelope = handler.parse_envelope(envelope_file.read_bytes(), NEW_ENTRIES_EVENT)
    except ValidationError as e:
        click.echo(f"Invalid payload: {e}", err=True)
        sys.exit(1)

    delivered = handler.relay_entries(envelope, webhook_url)
    click.echo(
        json.dumps(
            {
                "feed": envelope.feed.title,
                "entries": len(envelope.entries),
                "delivered": delivered,
                "failed": len(envelope.entries) - delivered,
            }
        )
    )


if __name__ == "__main__":
    cli()
