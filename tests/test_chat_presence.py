"""Tests for the chat log, the new-message pulse, presence views and actor helpers."""

import asyncio
from datetime import datetime

from collab.core.state import (
    ORIGIN_LIVE,
    ORIGIN_SCRIPTED,
    STATUS_ONLINE,
    STATUS_TYPING,
    SYSTEM_AUTHOR,
    Actor,
    ChatMessage,
    TimelineState,
)
from collab.engine.chat import ChatLog
from collab.engine.presence import PresenceTracker


class TestChatLog:
    def test_append_order_is_log_order(self, fast_config):
        state = TimelineState()
        chat = ChatLog(state, fast_config, lambda: None)
        late = chat.append("Ana", "late stamp")
        chat.append_live("typed")
        chat.append_scripted("Ben", "scripted")
        texts = [m.text for m in chat.messages()]
        assert texts[1:] == ["late stamp", "typed", "scripted"]
        assert chat.messages()[1].id == late.id
        assert [m.origin for m in chat.messages()[1:]] == [ORIGIN_SCRIPTED, ORIGIN_LIVE, ORIGIN_SCRIPTED]

    def test_system_author_marks_system_message(self, fast_config):
        chat = ChatLog(TimelineState(), fast_config, lambda: None)
        msg = chat.append_scripted(SYSTEM_AUTHOR, "Code execution completed successfully")
        assert msg.is_system

    def test_every_append_notifies(self, fast_config):
        calls = []
        chat = ChatLog(TimelineState(), fast_config, lambda: calls.append(1))
        chat.append_live("a")
        chat.append_scripted("Ana", "b")
        chat.append_live(" ")
        assert len(calls) == 2

    def test_pulse_raised_then_cleared(self, fast_config):
        state = TimelineState()
        chat = ChatLog(state, fast_config, lambda: None)

        async def _go():
            chat.append_live("ping")
            raised = state.new_message
            await asyncio.sleep(fast_config.seconds(fast_config.pulse_ms) + 0.05)
            return raised, state.new_message

        raised, later = asyncio.run(_go())
        assert raised is True
        assert later is False

    def test_cancel_pulse_keeps_flag(self, fast_config):
        state = TimelineState()
        chat = ChatLog(state, fast_config, lambda: None)

        async def _go():
            chat.append_live("ping")
            chat.cancel_pulse()
            await asyncio.sleep(fast_config.seconds(fast_config.pulse_ms) + 0.05)
            return state.new_message

        assert asyncio.run(_go()) is True


class TestPresenceTracker:
    def test_status_is_derived(self, actors, cursor):
        state = TimelineState()
        presence = PresenceTracker(state, actors)
        assert [presence.status_of(a.id) for a in actors] == [STATUS_ONLINE, STATUS_ONLINE]
        presence.begin("ben", cursor)
        assert presence.status_of("ben") == STATUS_TYPING
        assert presence.status_of("ana") == STATUS_ONLINE
        assert presence.typing_label() == "Ben Okafor is typing..."
        assert state.cursor == cursor
        presence.end()
        assert presence.typing_actor() is None
        assert presence.typing_label() == ""
        assert state.cursor is None

    def test_roster_and_online_count(self, actors):
        state = TimelineState()
        presence = PresenceTracker(state, actors)
        presence.begin("ana", None)
        roster = presence.roster()
        assert presence.online_count() == 2
        assert roster[0]["status"] == STATUS_TYPING
        assert roster[0]["initials"] == "AL"
        assert roster[1]["status"] == STATUS_ONLINE


class TestStateHelpers:
    def test_initials(self):
        assert Actor(id="x", name="Jordan Kim").initials == "JK"
        assert Actor(id="y", name="cher").initials == "C"

    def test_time_label(self):
        ts = datetime(2024, 5, 1, 14, 34).timestamp()
        msg = ChatMessage(id="m", author="Ana", text="hi", timestamp=ts)
        assert msg.time_label == "2:34 PM"

    def test_reset_bumps_cycle_and_clears(self, cursor):
        state = TimelineState(step_index=3, buffer="abc", typing_actor_id="ana", cursor=cursor)
        state.chat.append(ChatMessage(id="m", author="Ana", text="hi"))
        state.reset()
        snap = state.snapshot()
        assert (snap.step_index, snap.buffer, snap.typing_actor_id, snap.cursor) == (0, "", None, None)
        assert len(snap.chat) == 1 and snap.chat[0].is_system
        assert snap.cycle == 1
