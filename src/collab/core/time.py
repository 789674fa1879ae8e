"""Timing configuration and cooperative cancellation for session playback."""

import asyncio
import os
from dataclasses import dataclass

from collab.errors import PlaybackCancelled


@dataclass
class PlaybackConfig:
    type_delay_ms: float = 45.0  # base pause between typed batches
    type_jitter_ms: float = 25.0  # +/- random spread on the typing pause
    delete_delay_ms: float = 30.0  # fixed pause between deleted batches
    cycle_pause_ms: float = 4000.0  # idle time before the script restarts
    pulse_ms: float = 2000.0  # how long the "new message" flag stays raised
    time_scale: float = 1.0  # multiplier; 2.0 = 2x speed
    long_text_threshold: int = 40  # typed text longer than this goes 2 chars per tick
    long_delete_threshold: int = 20  # deleted spans longer than this go 3 chars per tick
    live_author: str = "You"

    @classmethod
    def from_env(cls) -> "PlaybackConfig":
        defaults = cls()
        return cls(
            type_delay_ms=float(os.getenv("COLLAB_TYPE_DELAY_MS", defaults.type_delay_ms)),
            type_jitter_ms=float(os.getenv("COLLAB_TYPE_JITTER_MS", defaults.type_jitter_ms)),
            delete_delay_ms=float(os.getenv("COLLAB_DELETE_DELAY_MS", defaults.delete_delay_ms)),
            cycle_pause_ms=float(os.getenv("COLLAB_CYCLE_PAUSE_MS", defaults.cycle_pause_ms)),
            pulse_ms=float(os.getenv("COLLAB_PULSE_MS", defaults.pulse_ms)),
            time_scale=max(0.1, float(os.getenv("COLLAB_TIME_SCALE", defaults.time_scale))),
            long_text_threshold=int(os.getenv("COLLAB_LONG_TEXT_THRESHOLD", defaults.long_text_threshold)),
            long_delete_threshold=int(os.getenv("COLLAB_LONG_DELETE_THRESHOLD", defaults.long_delete_threshold)),
            live_author=os.getenv("COLLAB_LIVE_AUTHOR", defaults.live_author),
        )

    def set_time_scale(self, scale: float) -> None:
        self.time_scale = max(0.1, scale)

    def seconds(self, ms: float) -> float:
        """Convert a scripted millisecond delay to real seconds under the time scale."""
        return max(0.0, ms) / 1000.0 / self.time_scale


class CancelToken:
    """One-shot cancellation signal shared by every suspension point of a playback run.

    The sequencer calls ``check()`` before each write to session state and sleeps
    only through ``sleep()``, so once ``cancel()`` fires no further write can land.
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def check(self) -> None:
        if self._cancelled:
            raise PlaybackCancelled()

    async def sleep(self, seconds: float) -> None:
        self.check()
        await asyncio.sleep(seconds)
        self.check()
