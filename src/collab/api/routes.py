"""HTTP API for a hosting view of the simulated session."""

import math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query

from collab.core.host import PlaybackHost
from collab.errors import ScriptError
from collab.persistence.script_io import script_from_dict, script_to_dict

router = APIRouter()

_host: Optional[PlaybackHost] = None


def configure_session(host: PlaybackHost) -> None:
    """Inject the playback host from the app."""
    global _host
    _host = host


def _require_host() -> PlaybackHost:
    if _host is None:
        raise HTTPException(status_code=500, detail="PlaybackHost not configured")
    return _host


def _message_to_dict(msg) -> Dict[str, Any]:
    return {
        "id": msg.id,
        "author": msg.author,
        "text": msg.text,
        "timestamp": msg.timestamp,
        "time": msg.time_label,
        "origin": msg.origin,
        "is_system": msg.is_system,
    }


@router.get("/session")
async def get_session(chat_limit: int = Query(50, ge=1, le=500)):
    host = _require_host()
    snap = host.snapshot()
    cursor = snap.cursor
    return {
        "running": host.is_running,
        "title": host.script.title,
        "step_index": snap.step_index,
        "steps": len(host.script),
        "cycle": snap.cycle,
        "buffer": snap.buffer,
        "typing_actor_id": snap.typing_actor_id,
        "typing_label": host.presence.typing_label(),
        "cursor": {"x": cursor.x, "y": cursor.y} if cursor else None,
        "actors": host.presence.roster(),
        "online": host.presence.online_count(),
        "chat": [_message_to_dict(m) for m in snap.chat[-chat_limit:]],
        "new_message": snap.new_message,
    }


@router.post("/session/start")
async def session_start():
    host = _require_host()
    host.start()
    return {"running": host.is_running, "step_index": host.state.step_index}


@router.post("/session/stop")
async def session_stop():
    host = _require_host()
    host.stop()
    return {"running": host.is_running, "step_index": host.state.step_index}


@router.post("/session/chat")
async def post_chat(payload: Dict[str, Any] = Body(default_factory=dict)):
    host = _require_host()
    msg = host.append_live_message(str(payload.get("text", "")))
    if msg is None:
        return {"accepted": False}
    return {"accepted": True, "message": _message_to_dict(msg)}


@router.get("/session/script")
async def get_script():
    host = _require_host()
    return script_to_dict(host.script)


@router.post("/session/script")
async def set_script(payload: Dict[str, Any]):
    host = _require_host()
    try:
        script = script_from_dict(payload)
    except ScriptError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await host.restart(script)
    return {"title": script.title, "steps": len(script), "running": host.is_running}


@router.post("/session/time-scale")
async def set_time_scale(payload: Dict[str, Any]):
    host = _require_host()
    try:
        scale = float(payload.get("time_scale", 1.0))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="time_scale must be a number")
    if not math.isfinite(scale):
        raise HTTPException(status_code=400, detail="time_scale must be finite")
    host.config.set_time_scale(scale)
    return {"time_scale": host.config.time_scale}
