"""Shared pytest fixtures and fakes for the scuttle tests."""

import asyncio

import pytest

from autoscuttle.actions import ActionSimulator
from autoscuttle.errors import ActionError, ObserverError
from autoscuttle.observer import StatusObserver


class FakeSimulator(ActionSimulator):
    """Records key events; fails the first ``fail_presses`` presses."""

    def __init__(self, fail_presses: int = 0, fail_releases: bool = False):
        self.events: list[tuple[str, str]] = []
        self.fail_presses = fail_presses
        self.fail_releases = fail_releases

    def press(self, key):
        if self.fail_presses > 0:
            self.fail_presses -= 1
            raise ActionError("press rejected")
        self.events.append(("press", key))

    def release(self, key):
        if self.fail_releases:
            raise ActionError("release rejected")
        self.events.append(("release", key))

    @property
    def presses(self) -> int:
        return sum(1 for kind, _ in self.events if kind == "press")


class ScriptedObserver(StatusObserver):
    """Answers from a script; the last entry repeats. Exceptions are raised."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0

    async def get_current_identifier(self) -> str:
        index = min(self.calls, len(self.answers) - 1)
        self.calls += 1
        answer = self.answers[index]
        if isinstance(answer, Exception):
            raise answer
        return answer


class StallingObserver(StatusObserver):
    """Never answers; keeps a run parked in its observe step."""

    async def get_current_identifier(self) -> str:
        await asyncio.sleep(3600)
        raise ObserverError("unreachable")


@pytest.fixture
def fast_timings(monkeypatch):
    """Collapse the press, settle and retry waits to zero."""
    monkeypatch.setattr("autoscuttle.core.scuttle.SETTLE_SECONDS", 0)
    monkeypatch.setattr("autoscuttle.core.scuttle.RETRY_DELAY_SECONDS", 0)
    monkeypatch.setattr("autoscuttle.core.scuttle.PRESS_DURATION_SECONDS", 0)


@pytest.fixture
def simulator():
    return FakeSimulator()
