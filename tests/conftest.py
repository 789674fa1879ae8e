"""Shared fixtures for the session simulator tests.

Timings are shrunk to a few milliseconds and jitter comes from a seeded RNG
so playback runs finish quickly and repeatably.
"""

import asyncio
import random

import pytest

from collab.core.state import Actor, Cursor, TimelineState
from collab.core.time import PlaybackConfig
from collab.engine.chat import ChatLog
from collab.engine.presence import PresenceTracker
from collab.engine.sequencer import TimelineSequencer
from collab.script.steps import Script


@pytest.fixture
def fast_config() -> PlaybackConfig:
    return PlaybackConfig(
        type_delay_ms=2,
        type_jitter_ms=1,
        delete_delay_ms=2,
        cycle_pause_ms=5,
        pulse_ms=20,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def actors():
    return [
        Actor(id="ana", name="Ana Lopez", color="#10b981"),
        Actor(id="ben", name="Ben Okafor", color="#3b82f6"),
    ]


@pytest.fixture
def cursor() -> Cursor:
    return Cursor(x=10, y=20)


class Recorder:
    """Collects every snapshot a host or sequencer emits."""

    def __init__(self):
        self.snapshots = []

    def __call__(self, snap):
        self.snapshots.append(snap)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def _make_sequencer(script: Script, config: PlaybackConfig, on_change=None, rng=None):
    """Wire a bare sequencer over fresh state, without a host."""
    state = TimelineState()
    emit = on_change or (lambda: None)
    chat = ChatLog(state, config, emit)
    presence = PresenceTracker(state, list(script.actors))
    seq = TimelineSequencer(script, state, presence, chat, config, emit, rng=rng)
    return seq, state


async def _wait_for(host, predicate, timeout: float = 3.0):
    """Wait until an emitted (or current) snapshot satisfies ``predicate``."""
    if predicate(host.snapshot()):
        return host.snapshot()
    hit = asyncio.get_running_loop().create_future()

    def listener(snap):
        if not hit.done() and predicate(snap):
            hit.set_result(snap)

    host.subscribe(listener)
    try:
        return await asyncio.wait_for(hit, timeout)
    finally:
        host.unsubscribe(listener)


@pytest.fixture
def make_sequencer():
    return _make_sequencer


@pytest.fixture
def wait_for():
    return _wait_for
