"""Shared fixtures for jsreporter tests."""

from __future__ import annotations

import pytest

from jsreporter.reporter import JSReporter


class FakeClock:
    """Deterministic time source in seconds."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def reporter(clock: FakeClock) -> JSReporter:
    return JSReporter(clock=clock)
