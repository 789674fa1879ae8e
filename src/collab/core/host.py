"""Playback host: owns one session and its sequencer task."""

import asyncio
import logging
import random
from typing import Callable, List, Optional

from collab.core.state import ChatMessage, TimelineSnapshot, TimelineState
from collab.core.time import CancelToken, PlaybackConfig
from collab.engine.chat import ChatLog
from collab.engine.presence import PresenceTracker
from collab.engine.sequencer import TimelineSequencer
from collab.errors import PlaybackCancelled
from collab.script.default import build_default_script
from collab.script.steps import Script

logger = logging.getLogger(__name__)

Listener = Callable[[TimelineSnapshot], None]


class PlaybackHost:
    """Lifecycle boundary around the sequencer.

    ``start`` launches exactly one sequencer task on the running event loop.
    ``stop`` cancels the run's token and task; it is idempotent and safe before
    ``start``. Starting again after a stop mounts a fresh session state.
    """

    def __init__(
        self,
        script: Script | None = None,
        config: PlaybackConfig | None = None,
        rng: Optional[random.Random] = None,
    ):
        self.script = script if script is not None else build_default_script()
        self.config = config or PlaybackConfig()
        self.rng = rng
        self._listeners: List[Listener] = []
        self._task: Optional[asyncio.Task] = None
        self._token: Optional[CancelToken] = None
        self._fresh = True
        self._mount()

    def _mount(self) -> None:
        self.state = TimelineState()
        self.chat = ChatLog(self.state, self.config, self._emit)
        self.presence = PresenceTracker(self.state, list(self.script.actors))
        self.sequencer = TimelineSequencer(
            self.script, self.state, self.presence, self.chat, self.config, self._emit, rng=self.rng
        )

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start playback on the running loop; no-op when already running."""
        if self.is_running:
            return
        if not self._fresh:
            self._mount()
            self._emit()
        self._fresh = False
        self._token = CancelToken()
        self._task = asyncio.get_running_loop().create_task(self._run(self._token))
        logger.info("playback started: %r (%d steps)", self.script.title, len(self.script))

    async def _run(self, token: CancelToken) -> None:
        try:
            await self.sequencer.run(token)
        except PlaybackCancelled:
            logger.debug("sequencer stopped at step %d", self.state.step_index)
        except Exception:
            logger.exception("sequencer failed at step %d", self.state.step_index)
            raise

    def stop(self) -> None:
        if self._token is not None:
            self._token.cancel()
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            logger.info("playback stopped at step %d", self.state.step_index)
        self._token = None
        self._task = None
        self.chat.cancel_pulse()

    async def shutdown(self) -> None:
        """Stop and wait for the sequencer task to unwind."""
        task = self._task
        self.stop()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def restart(self, script: Script) -> None:
        """Swap in a new script and play it from a fresh state."""
        await self.shutdown()
        self.script = script
        self._mount()
        self._fresh = True
        self._emit()
        self.start()

    def append_live_message(self, text: str) -> Optional[ChatMessage]:
        return self.chat.append_live(text)

    def snapshot(self) -> TimelineSnapshot:
        return self.state.snapshot()

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("snapshot listener failed")
