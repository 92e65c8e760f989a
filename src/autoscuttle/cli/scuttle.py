"""
CLI commands for driving auto-scuttle on the running server.

Usage:
    autoscuttle start [target_server]
    autoscuttle stop
    autoscuttle status
    autoscuttle events
"""

import typer

from autoscuttle.cli._http import _http_get, _http_post


def register_scuttle_commands(app: typer.Typer):
    """Register the scuttle control commands onto the app."""

    @app.command("start")
    def scuttle_start(
        target_server: str = typer.Argument(
            None, help="Server to keep scuttling for (default: the last target)"
        ),
    ):
        """Start auto-scuttling until TARGET_SERVER is reached."""
        if not target_server:
            target_server = _http_get("/scuttle/status").get("last_target")
            if not target_server:
                typer.echo("❌ No target given and no previous target to reuse.")
                raise typer.Exit(code=1)
            typer.echo(f"Reusing last target: {target_server}")

        data = _http_post("/scuttle/start", data={"target_server": target_server})
        if data.get("success"):
            typer.echo(f"Auto-scuttle started, target: {target_server}")
        else:
            typer.echo(f"Failed: {data.get('error', 'unknown error')}")
            raise typer.Exit(code=1)

    @app.command("stop")
    def scuttle_stop():
        """Stop the active auto-scuttle run."""
        data = _http_post("/scuttle/stop")
        if data.get("success"):
            typer.echo("Auto-scuttle stopped.")
        else:
            typer.echo(f"Failed: {data.get('error', 'unknown error')}")
            raise typer.Exit(code=1)

    @app.command("status")
    def scuttle_status():
        """Show auto-scuttle status."""
        data = _http_get("/scuttle/status")

        running = data.get("running", False)
        attempts = data.get("attempts", 0)
        max_attempts = data.get("max_attempts", 0)

        typer.echo(f"  Auto-scuttle:  {'RUNNING' if running else 'IDLE'}")
        typer.echo(f"  Attempts:      {attempts}/{max_attempts}")
        if data.get("target_server"):
            typer.echo(f"  Target:        {data['target_server']}")
        if data.get("last_outcome"):
            typer.echo(f"  Last outcome:  {data['last_outcome']}")

    @app.command("events")
    def scuttle_events():
        """Print and clear pending scuttle events."""
        data = _http_get("/scuttle/notifications")
        notifications = data.get("notifications", [])
        if not notifications:
            typer.echo("No pending events.")
            return

        for note in notifications:
            typer.echo(f"  {note.get('timestamp', '')}  {note['event']}: {note.get('payload')}")
