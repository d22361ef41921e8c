"""Shared fixtures: a manual clock and scheduler so lookahead timing is deterministic."""

import pytest

from src.toss.config import Config
from src.toss.engine import ThrowDecisionEngine


class ManualClock:
    def __init__(self, start_ms: float = 0.0):
        self.now = start_ms

    def __call__(self) -> float:
        return self.now


class ManualScheduler:
    """Collects deferred callbacks and fires them as simulated time passes."""

    def __init__(self, clock: ManualClock):
        self._clock = clock
        self.pending = []  # (fire_at_ms, callback)

    def __call__(self, delay_ms, callback):
        self.pending.append((self._clock.now + delay_ms, callback))

    def advance(self, ms: float):
        self._clock.now += ms
        due = [item for item in self.pending if item[0] <= self._clock.now]
        self.pending = [item for item in self.pending if item[0] > self._clock.now]
        for _, callback in sorted(due, key=lambda item: item[0]):
            callback()


@pytest.fixture
def clock():
    return ManualClock(1000.0)


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def config():
    cfg = Config()
    cfg.throw.lookahead_delay_ms = 0
    cfg.ui.width = 1000
    cfg.ui.height = 800
    return cfg


@pytest.fixture
def make_engine(config, scheduler, clock):
    def _make(**overrides):
        for key, value in overrides.items():
            setattr(config.throw, key, value)
        return ThrowDecisionEngine(config, schedule=scheduler, clock=clock)
    return _make
