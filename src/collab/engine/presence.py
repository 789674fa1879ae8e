"""Presence: who is editing right now and where their cursor sits."""

from typing import List, Optional

from collab.core.state import STATUS_ONLINE, STATUS_TYPING, Actor, Cursor, TimelineState, with_status


class PresenceTracker:
    """View over the presence fields of TimelineState.

    ``begin``/``end`` are called only by the sequencer. Status is derived from
    ``typing_actor_id``, so at most one actor can ever read as typing.
    """

    def __init__(self, state: TimelineState, actors: List[Actor]):
        self.state = state
        self.actors = list(actors)

    def begin(self, actor_id: str, cursor: Optional[Cursor]) -> None:
        self.state.typing_actor_id = actor_id
        self.state.cursor = cursor

    def end(self) -> None:
        self.state.typing_actor_id = None
        self.state.cursor = None

    def typing_actor(self) -> Optional[Actor]:
        for a in self.actors:
            if a.id == self.state.typing_actor_id:
                return a
        return None

    def status_of(self, actor_id: str) -> str:
        return STATUS_TYPING if actor_id == self.state.typing_actor_id else STATUS_ONLINE

    def online_count(self) -> int:
        # every scripted actor is present for the whole session
        return len(self.actors)

    def typing_label(self) -> str:
        actor = self.typing_actor()
        return f"{actor.name} is typing..." if actor else ""

    def roster(self) -> List[dict]:
        return [with_status(a, self.status_of(a.id)) for a in self.actors]
