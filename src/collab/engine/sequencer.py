"""Timeline sequencer: walks the script step by step and loops it forever."""

import logging
import random
from typing import AsyncIterator, Callable, Optional

from collab.core.state import TimelineState
from collab.core.time import CancelToken, PlaybackConfig
from collab.engine.chat import ChatLog
from collab.engine.mutation import find_last, progressive_insert, progressive_remove
from collab.engine.presence import PresenceTracker
from collab.script.steps import ChatStep, DeleteStep, Script, Step, TypeStep

logger = logging.getLogger(__name__)


class TimelineSequencer:
    """Single writer of TimelineState.

    Steps run strictly one after another: wait the step's delay, dispatch it,
    then advance ``step_index``. Every write is preceded by ``token.check()``;
    a cancelled token raises PlaybackCancelled out of ``run`` instead.
    """

    def __init__(
        self,
        script: Script,
        state: TimelineState,
        presence: PresenceTracker,
        chat: ChatLog,
        config: PlaybackConfig,
        on_change: Callable[[], None],
        rng: Optional[random.Random] = None,
    ):
        self.script = script
        self.state = state
        self.presence = presence
        self.chat = chat
        self.config = config
        self.on_change = on_change
        self.rng = rng or random.Random()

    async def run(self, token: CancelToken) -> None:
        """Play the script, pause, reset and play again until cancelled."""
        while True:
            await self.run_cycle(token)
            await token.sleep(self.config.seconds(self.config.cycle_pause_ms))
            token.check()
            self.state.reset()
            self.on_change()
            logger.info("script %r restarted (cycle %d)", self.script.title, self.state.cycle)

    async def run_cycle(self, token: CancelToken) -> None:
        """Play the remaining steps of the current pass once."""
        while self.state.step_index < len(self.script):
            step = self.script.steps[self.state.step_index]
            await token.sleep(self.config.seconds(step.delay_ms))
            logger.debug("step %d: %s by %s", self.state.step_index, type(step).__name__, step.actor_id)
            await self.execute(step, token)
            token.check()
            self.state.step_index += 1
            self.on_change()

    async def execute(self, step: Step, token: CancelToken) -> None:
        if isinstance(step, TypeStep):
            frames = progressive_insert(step.text, self.state.buffer, self.config, token, self.rng)
            await self._animate(step, frames, token)
        elif isinstance(step, DeleteStep):
            if find_last(self.state.buffer, step.delete_text) < 0:
                logger.warning(
                    "step %d: %r not found in buffer, delete skipped", self.state.step_index, step.delete_text
                )
            frames = progressive_remove(step.delete_text, self.state.buffer, self.config, token)
            await self._animate(step, frames, token)
        elif isinstance(step, ChatStep):
            token.check()
            actor = self.script.actor(step.actor_id)
            self.chat.append_scripted(actor.name if actor else step.actor_id, step.message)
        else:
            raise TypeError(f"unknown step type {type(step).__name__}")

    async def _animate(self, step, frames: AsyncIterator[str], token: CancelToken) -> None:
        token.check()
        self.presence.begin(step.actor_id, step.cursor)
        self.on_change()
        async for buffer in frames:
            token.check()
            self.state.buffer = buffer
            self.on_change()
        token.check()
        self.presence.end()
        self.on_change()
