"""
autoscuttle CLI.

This package splits CLI commands into focused modules:
- main:    serve
- scuttle: start, stop, status, events
"""

import typer

from autoscuttle.cli._http import _http_get, _http_post  # noqa: F401 (re-exported for test patching)
from autoscuttle.cli.main import configure_logging, register_commands
from autoscuttle.cli.scuttle import register_scuttle_commands

app = typer.Typer(help="autoscuttle - keep scuttling until the wanted server comes up")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    autoscuttle - keep scuttling until the wanted server comes up.
    """
    configure_logging(verbose)


register_commands(app)
register_scuttle_commands(app)

if __name__ == "__main__":
    app()
