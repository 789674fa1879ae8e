"""In-memory session state: actors, chat messages, the timeline record and its snapshots."""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

SYSTEM_AUTHOR = "System"
SESSION_STARTED = "session started"

ORIGIN_SCRIPTED = "scripted"
ORIGIN_LIVE = "live"

STATUS_ONLINE = "online"
STATUS_TYPING = "typing"


@dataclass(frozen=True)
class Actor:
    id: str
    name: str
    avatar: str = ""
    color: str = "#3b82f6"  # cursor / presence colour
    affiliation: str = ""

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper()


@dataclass(frozen=True)
class Cursor:
    x: float  # percent of editor width
    y: float  # percent of editor height


@dataclass(frozen=True)
class ChatMessage:
    id: str
    author: str
    text: str
    timestamp: float = field(default_factory=time.time)
    origin: str = ORIGIN_SCRIPTED
    is_system: bool = False

    @property
    def time_label(self) -> str:
        """Wall-clock label like '2:34 PM'."""
        return datetime.fromtimestamp(self.timestamp).strftime("%I:%M %p").lstrip("0")


def new_message_id() -> str:
    return str(uuid.uuid4())


def session_started_message() -> ChatMessage:
    return ChatMessage(
        id=new_message_id(),
        author=SYSTEM_AUTHOR,
        text=SESSION_STARTED,
        origin=ORIGIN_SCRIPTED,
        is_system=True,
    )


@dataclass(frozen=True)
class TimelineSnapshot:
    """Immutable projection of TimelineState handed to renderers and listeners."""

    step_index: int
    buffer: str
    typing_actor_id: Optional[str]
    cursor: Optional[Cursor]
    chat: Tuple[ChatMessage, ...]
    new_message: bool
    cycle: int


@dataclass
class TimelineState:
    """The one mutable record of a running session; written by the sequencer only.

    The live chat channel is the single exception and may only append to ``chat``.
    """

    step_index: int = 0
    buffer: str = ""
    typing_actor_id: Optional[str] = None
    cursor: Optional[Cursor] = None
    chat: List[ChatMessage] = field(default_factory=lambda: [session_started_message()])
    new_message: bool = False
    cycle: int = 0

    def reset(self) -> None:
        self.step_index = 0
        self.buffer = ""
        self.typing_actor_id = None
        self.cursor = None
        self.chat = [session_started_message()]
        self.cycle += 1

    def snapshot(self) -> TimelineSnapshot:
        return TimelineSnapshot(
            step_index=self.step_index,
            buffer=self.buffer,
            typing_actor_id=self.typing_actor_id,
            cursor=self.cursor,
            chat=tuple(self.chat),
            new_message=self.new_message,
            cycle=self.cycle,
        )


def with_status(actor: Actor, status: str) -> dict:
    """Render-ready actor dict carrying its derived status."""
    return {
        "id": actor.id,
        "name": actor.name,
        "initials": actor.initials,
        "avatar": actor.avatar,
        "color": actor.color,
        "affiliation": actor.affiliation,
        "status": status,
    }
