"""Script model: the three step kinds and the immutable script that orders them."""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union

from collab.core.state import Actor, Cursor
from collab.errors import ScriptError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeStep:
    actor_id: str
    delay_ms: float
    text: str
    cursor: Optional[Cursor] = None


@dataclass(frozen=True)
class DeleteStep:
    actor_id: str
    delay_ms: float
    delete_text: str
    cursor: Optional[Cursor] = None


@dataclass(frozen=True)
class ChatStep:
    actor_id: str
    delay_ms: float
    message: str


Step = Union[TypeStep, DeleteStep, ChatStep]
STEP_TYPES = (TypeStep, DeleteStep, ChatStep)


def _payload(step: Step):
    if isinstance(step, TypeStep):
        return step.text
    if isinstance(step, DeleteStep):
        return step.delete_text
    return step.message


@dataclass(frozen=True)
class Script:
    """Ordered, validated list of steps plus the actors they reference.

    Validation happens once, here: every step must be one of the known kinds and
    every step must name a declared actor. Declared actors that no step uses are
    dropped so that the roster is exactly the script's cast.
    """

    title: str
    actors: Tuple[Actor, ...]
    steps: Tuple[Step, ...] = field(default_factory=tuple)

    def __post_init__(self):
        steps = tuple(self.steps)
        declared = {a.id: a for a in self.actors}
        if len(declared) != len(self.actors):
            raise ScriptError("duplicate actor id in script")
        for i, step in enumerate(steps):
            if not isinstance(step, STEP_TYPES):
                raise ScriptError(f"step {i}: unknown step type {type(step).__name__}")
            if not isinstance(step.actor_id, str) or step.actor_id not in declared:
                raise ScriptError(f"step {i}: unknown actor {step.actor_id!r}")
            if isinstance(step.delay_ms, bool) or not isinstance(step.delay_ms, (int, float)):
                raise ScriptError(f"step {i}: delay_ms must be a number")
            if not math.isfinite(step.delay_ms):
                raise ScriptError(f"step {i}: delay_ms must be finite")
            if step.delay_ms < 0:
                raise ScriptError(f"step {i}: negative delay")
            payload = _payload(step)
            if not isinstance(payload, str):
                raise ScriptError(f"step {i}: payload must be a string, not {type(payload).__name__}")
            if not isinstance(getattr(step, "cursor", None), (Cursor, type(None))):
                raise ScriptError(f"step {i}: cursor must be a Cursor")
        used = {s.actor_id for s in steps}
        unused = [a.id for a in self.actors if a.id not in used]
        if unused:
            logger.warning("script %r declares actors no step uses: %s", self.title, unused)
        object.__setattr__(self, "steps", steps)
        object.__setattr__(self, "actors", tuple(a for a in self.actors if a.id in used))

    def __len__(self) -> int:
        return len(self.steps)

    def actor(self, actor_id: str) -> Optional[Actor]:
        for a in self.actors:
            if a.id == actor_id:
                return a
        return None


def build_script(title: str, actors: Iterable[Actor], steps: Iterable[Step]) -> Script:
    return Script(title=title, actors=tuple(actors), steps=tuple(steps))
