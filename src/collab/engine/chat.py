"""Chat log fed by the scripted timeline and by live user input."""

import asyncio
import logging
from typing import Callable, Optional

from collab.core.state import (
    ORIGIN_LIVE,
    ORIGIN_SCRIPTED,
    SYSTEM_AUTHOR,
    ChatMessage,
    TimelineState,
    new_message_id,
)
from collab.core.time import PlaybackConfig

logger = logging.getLogger(__name__)


class ChatLog:
    """Append-only view over ``TimelineState.chat``.

    Append order is log order for both producers; nothing is re-sorted by
    timestamp. Every append raises the ``new_message`` flag, which drops again
    after ``config.pulse_ms`` when an event loop is running.
    """

    def __init__(self, state: TimelineState, config: PlaybackConfig, on_change: Callable[[], None]):
        self.state = state
        self.config = config
        self.on_change = on_change
        self._pulse_handle: Optional[asyncio.TimerHandle] = None

    def append(self, author: str, text: str, origin: str = ORIGIN_SCRIPTED, is_system: bool = False) -> ChatMessage:
        msg = ChatMessage(id=new_message_id(), author=author, text=text, origin=origin, is_system=is_system)
        self.state.chat.append(msg)
        self._raise_pulse()
        self.on_change()
        return msg

    def append_scripted(self, author: str, text: str) -> ChatMessage:
        return self.append(author, text, origin=ORIGIN_SCRIPTED, is_system=author == SYSTEM_AUTHOR)

    def append_live(self, text: str, author: Optional[str] = None) -> Optional[ChatMessage]:
        """Append a user-typed message now; blank text is dropped and returns None."""
        if not text or not text.strip():
            return None
        msg = self.append(author or self.config.live_author, text.strip(), origin=ORIGIN_LIVE)
        logger.debug("live message %s appended at position %d", msg.id, len(self.state.chat) - 1)
        return msg

    def messages(self):
        return tuple(self.state.chat)

    def _raise_pulse(self) -> None:
        self.state.new_message = True
        self.cancel_pulse()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop to time the flag; it stays up until the next append under a loop
            return
        self._pulse_handle = loop.call_later(self.config.seconds(self.config.pulse_ms), self._clear_pulse)

    def _clear_pulse(self) -> None:
        self._pulse_handle = None
        self.state.new_message = False
        self.on_change()

    def cancel_pulse(self) -> None:
        """Drop a pending auto-clear without touching the flag."""
        if self._pulse_handle is not None:
            self._pulse_handle.cancel()
            self._pulse_handle = None
