"""
Shared session state for the scuttle loop.

The control surface (start/stop/status) and the background loop both touch the
same three fields. Every read and write happens under one lock, and callers only
get compound operations, so nobody ever sees a half-updated session.

Each successful claim bumps a generation number. Loop-side calls pass the
generation they were started with; a stale generation reads as cancelled, so an
old loop can never pick up a run that was started after it was stopped.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from autoscuttle.config import MAX_ATTEMPTS


class AttemptDecision(str, Enum):
    PROCEED = "proceed"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class MatchResult(str, Enum):
    MATCHED = "matched"
    MISMATCH = "mismatch"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class AttemptTicket:
    decision: AttemptDecision
    attempt: int = 0


@dataclass(frozen=True)
class SessionSnapshot:
    running: bool
    target: Optional[str]
    attempts: int


class SessionState:
    """Lock-guarded record of the current scuttle run."""

    def __init__(self, max_attempts: int = MAX_ATTEMPTS):
        self.max_attempts = max_attempts
        self._lock = threading.Lock()
        self._running = False
        self._target: Optional[str] = None
        self._attempts = 0
        self._generation = 0

    def claim(self, target: str) -> Optional[int]:
        """Claim an idle session for a new run.

        Returns the run generation, or None if a run is already active.
        """
        with self._lock:
            if self._running:
                return None
            self._generation += 1
            self._running = True
            self._target = target
            self._attempts = 0
            return self._generation

    def reset(self):
        """Return the session to its empty state (the stop signal)."""
        with self._lock:
            self._clear()
            self._attempts = 0

    def next_attempt(self, generation: int) -> AttemptTicket:
        """Count the next attempt, or report that the run is over."""
        with self._lock:
            if not self._owns(generation):
                return AttemptTicket(AttemptDecision.CANCELLED)
            if self._attempts >= self.max_attempts:
                self._clear()
                return AttemptTicket(AttemptDecision.EXHAUSTED, self._attempts)
            self._attempts += 1
            return AttemptTicket(AttemptDecision.PROCEED, self._attempts)

    def current_target(self, generation: int) -> Optional[str]:
        with self._lock:
            return self._target if self._owns(generation) else None

    def finish_if_target(self, generation: int, observed: str) -> MatchResult:
        """Compare against the live target and end the run on a match."""
        with self._lock:
            if not self._owns(generation) or self._target is None:
                return MatchResult.CANCELLED
            if observed != self._target:
                return MatchResult.MISMATCH
            self._clear()
            return MatchResult.MATCHED

    def abandon(self, generation: int) -> bool:
        """End the run if this generation still owns it. Used on loop crashes."""
        with self._lock:
            if not self._owns(generation):
                return False
            self._clear()
            return True

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(self._running, self._target, self._attempts)

    # -- Internal (lock must be held) ----------------------------------------

    def _owns(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _clear(self):
        self._running = False
        self._target = None
