"""
Exceptions raised by the scuttle core and its collaborators.
"""


class ScuttleError(Exception):
    """Base class for autoscuttle errors."""


class AlreadyRunningError(ScuttleError):
    """Raised by start() while another run owns the session."""

    code = "already_running"

    def __init__(self, message: str = "already_running"):
        super().__init__(message)


class ActionError(ScuttleError):
    """The action simulator failed to deliver a key event."""


class ObserverError(ScuttleError):
    """The status observer could not report the current server."""
