"""
Top-level CLI plumbing: logging setup and the serve command.
"""

import os

import typer


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from autoscuttle.logger import setup_logging

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level)

    if not verbose:
        os.environ["LOGURU_LEVEL"] = "WARNING"


def register_commands(app: typer.Typer):
    """Register top-level commands onto the app."""

    @app.command()
    def serve(
        host: str = typer.Option(None, "--host", help="Interface to bind"),
        port: int = typer.Option(None, "--port", help="Port to listen on"),
        debug: bool = typer.Option(False, "--debug", help="Log at DEBUG level"),
    ):
        """Run the autoscuttle control server."""
        if debug:
            os.environ["LOG_LEVEL"] = "DEBUG"
        else:
            os.environ.setdefault("LOG_LEVEL", "INFO")

        from autoscuttle.server import main as serve_main

        typer.echo("🚀 Starting autoscuttle server...")
        serve_main(host=host, port=port)
