"""Main entry point for the feed relay package."""

from feed_relay.cli import cli

if __name__ == "__main__":
    cli()
