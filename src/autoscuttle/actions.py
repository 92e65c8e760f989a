"""
Action simulators: deliver the key events that trigger a scuttle.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional

from autoscuttle.config import PRESS_DURATION_SECONDS
from autoscuttle.errors import ActionError
from autoscuttle.logger import get_logger

logger = get_logger(__name__)


class ActionSimulator(ABC):
    """Presses and releases keys on behalf of the scuttle loop."""

    @abstractmethod
    def press(self, key: str) -> None:
        """Send a key-down event. Raises ActionError on failure."""

    @abstractmethod
    def release(self, key: str) -> None:
        """Send a key-up event. Raises ActionError on failure."""


class KeyboardSimulator(ActionSimulator):
    """Synthesizes keyboard events with pynput.

    Args:
        controller: A pynput ``keyboard.Controller``. Created lazily on first use
            when omitted, since pynput needs a display to import on Linux.
    """

    def __init__(self, controller: Optional[Any] = None):
        self._controller = controller

    def press(self, key: str) -> None:
        controller, resolved = self._resolve(key)
        try:
            controller.press(resolved)
        except Exception as e:
            raise ActionError(f"Failed to press {key}: {e}") from e

    def release(self, key: str) -> None:
        controller, resolved = self._resolve(key)
        try:
            controller.release(resolved)
        except Exception as e:
            raise ActionError(f"Failed to release {key}: {e}") from e

    def _resolve(self, key: str):
        try:
            from pynput import keyboard
        except Exception as e:
            raise ActionError(f"Keyboard backend unavailable: {e}") from e

        if self._controller is None:
            try:
                self._controller = keyboard.Controller()
            except Exception as e:
                raise ActionError(f"Cannot create keyboard controller: {e}") from e

        # Named keys ("left", "enter") map to keyboard.Key, anything else is a char
        resolved = getattr(keyboard.Key, key, None) if len(key) > 1 else None
        if resolved is None:
            if len(key) != 1:
                raise ActionError(f"Unknown key: {key}")
            resolved = key
        return self._controller, resolved


async def tap(
    simulator: ActionSimulator,
    key: str,
    duration: float = PRESS_DURATION_SECONDS,
) -> None:
    """Press ``key``, hold it for ``duration`` seconds, then release it.

    A failed press raises ActionError. A failed release is only logged, since the
    press already reached the game.
    """
    simulator.press(key)
    await asyncio.sleep(duration)
    try:
        simulator.release(key)
    except ActionError as e:
        logger.warning(f"Key release failed after press: {e}")
