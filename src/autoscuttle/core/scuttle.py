"""
Scuttle Runner: the bounded retry loop behind auto-scuttle.

A run presses the scuttle key, waits for the game to move the player to a new
server, asks the observer where we landed, and repeats until the target server
comes up or MAX_ATTEMPTS is spent. Only one run exists at a time.

Cancellation is cooperative: stop() clears the session and the loop notices
at the top of its next iteration (or when it compares the observed server),
so a stop can take up to one settle-plus-observe cycle to land.
"""

import asyncio
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from autoscuttle.actions import ActionSimulator, KeyboardSimulator, tap
from autoscuttle.config import (
    EVENT_MAX_ATTEMPTS,
    EVENT_SUCCESS,
    PRESS_DURATION_SECONDS,
    RETRY_DELAY_SECONDS,
    SCUTTLE_KEY,
    SETTLE_SECONDS,
)
from autoscuttle.errors import AlreadyRunningError
from autoscuttle.logger import get_logger
from autoscuttle.observer import StatusObserver, build_observer
from autoscuttle.session import AttemptDecision, MatchResult, SessionState

logger = get_logger(__name__)

Listener = Callable[[str, Any], None]


class ScuttleOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class ScuttleRunner:
    """
    Owns the session and spawns the retry loop.
    Outbound events go to registered listeners and to a small deque that the
    frontend polls.
    """

    def __init__(
        self,
        simulator: Optional[ActionSimulator] = None,
        observer: Optional[StatusObserver] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.session = SessionState()
        self._simulator = simulator or KeyboardSimulator()
        self._observer = observer or build_observer()
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []
        self._pending_notifications: deque = deque(maxlen=20)
        self._last_outcome: Optional[ScuttleOutcome] = None
        self._generation = 0
        self._last_target: Optional[str] = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop):
        """Bind the event loop used when start() is called from another thread."""
        self._loop = loop

    # -- Control surface -----------------------------------------------------

    def start(self, target: str) -> None:
        """Claim the session and schedule the retry loop.

        Returns once the loop is scheduled, not when it finishes.

        Raises:
            AlreadyRunningError: A run is already active. Nothing changes.
            ValueError: The target is empty.
        """
        if not target or not target.strip():
            raise ValueError("target server must not be empty")

        generation = self.session.claim(target)
        if generation is None:
            logger.warning(f"Auto-scuttle already running, rejecting start({target})")
            raise AlreadyRunningError()

        logger.info(f"Starting auto-scuttle for target server: {target}")
        self._generation = generation
        self._last_outcome = None
        self._spawn(generation)
        self._last_target = target

    def stop(self) -> None:
        """Ask the running loop to stop. Returns immediately."""
        self.session.reset()
        logger.info("Auto-scuttle stopped")

    @property
    def last_target(self) -> Optional[str]:
        """Target of the most recent run, kept after the run ends."""
        return self._last_target

    def get_status(self) -> tuple[bool, int]:
        """Return (running, attempts)."""
        snap = self.session.snapshot()
        return snap.running, snap.attempts

    def status_dict(self) -> dict:
        """Extended status for the API."""
        snap = self.session.snapshot()
        return {
            "running": snap.running,
            "attempts": snap.attempts,
            "max_attempts": self.session.max_attempts,
            "target_server": snap.target,
            "last_target": self._last_target,
            "last_outcome": self._last_outcome.value if self._last_outcome else None,
        }

    async def shutdown(self):
        """Stop the session and cancel any loop still sleeping."""
        self.stop()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("ScuttleRunner shut down.")

    # -- Events --------------------------------------------------------------

    def add_listener(self, callback: Listener):
        """Register a callback receiving (event_name, payload)."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def drain_notifications(self) -> list:
        """Drain and return all pending notifications."""
        notifications = list(self._pending_notifications)
        self._pending_notifications.clear()
        return notifications

    def _emit(self, event: str, payload: Any):
        self._pending_notifications.append(
            {
                "event": event,
                "payload": payload,
                "timestamp": datetime.now().isoformat(),
            }
        )
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception as e:
                logger.error(f"Listener for {event} failed: {e}")

    # -- Internal ------------------------------------------------------------

    def _spawn(self, generation: int):
        try:
            running_loop = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None

        loop = self._loop or running_loop
        if loop is None or loop.is_closed():
            self.session.abandon(generation)
            raise RuntimeError("ScuttleRunner has no event loop to run on")

        if loop is running_loop:
            self._create_task(loop, generation)
        else:
            loop.call_soon_threadsafe(self._create_task, loop, generation)

    def _create_task(self, loop: asyncio.AbstractEventLoop, generation: int):
        task = loop.create_task(self._run_loop(generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_loop(self, generation: int) -> ScuttleOutcome:
        """Drive one run to a terminal outcome."""
        try:
            outcome = await self._drive(generation)
        except asyncio.CancelledError:
            self.session.abandon(generation)
            self._record_outcome(generation, ScuttleOutcome.CANCELLED)
            logger.info("Auto-scuttle task cancelled")
            raise
        except Exception as e:
            logger.error(f"Auto-scuttle loop crashed: {e}")
            self.session.abandon(generation)
            outcome = ScuttleOutcome.CANCELLED

        self._record_outcome(generation, outcome)
        return outcome

    def _record_outcome(self, generation: int, outcome: ScuttleOutcome):
        # A loop outliving its run must not overwrite a newer run's status
        if generation == self._generation:
            self._last_outcome = outcome

    async def _drive(self, generation: int) -> ScuttleOutcome:
        max_attempts = self.session.max_attempts

        while True:
            ticket = self.session.next_attempt(generation)
            if ticket.decision is AttemptDecision.CANCELLED:
                logger.info("Auto-scuttle stopped by user")
                return ScuttleOutcome.CANCELLED
            if ticket.decision is AttemptDecision.EXHAUSTED:
                logger.info(
                    f"Max attempts ({max_attempts}) reached, stopping auto-scuttle"
                )
                self._emit(EVENT_MAX_ATTEMPTS, ticket.attempt)
                return ScuttleOutcome.EXHAUSTED

            attempt = ticket.attempt
            logger.info(f"Auto-scuttle attempt #{attempt}/{max_attempts}")

            try:
                await tap(self._simulator, SCUTTLE_KEY, PRESS_DURATION_SECONDS)
            except Exception as e:
                logger.error(f"Attempt #{attempt}: failed to simulate key press: {e}")
                await asyncio.sleep(RETRY_DELAY_SECONDS)
                continue

            logger.info(
                f"Sent {SCUTTLE_KEY} key, waiting {SETTLE_SECONDS:g}s for scuttle..."
            )
            await asyncio.sleep(SETTLE_SECONDS)

            try:
                current = await self._observer.get_current_identifier()
            except Exception as e:
                logger.error(f"Failed to get current server: {e}")
            else:
                target = self.session.current_target(generation)
                logger.info(f"Current server: {current}, target: {target}")

                result = self.session.finish_if_target(generation, current)
                if result is MatchResult.MATCHED:
                    logger.info("Successfully reached target server!")
                    self._emit(EVENT_SUCCESS, current)
                    return ScuttleOutcome.SUCCEEDED
                if result is MatchResult.CANCELLED:
                    logger.info("Target cleared during observation, abandoning run")
                    return ScuttleOutcome.CANCELLED

            await asyncio.sleep(RETRY_DELAY_SECONDS)
