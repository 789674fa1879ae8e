"""Load/save session scripts as JSON."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from collab.core.state import Actor, Cursor
from collab.errors import ScriptError
from collab.script.steps import ChatStep, DeleteStep, Script, Step, TypeStep

logger = logging.getLogger(__name__)


def _dict_to_actor(d: Dict) -> Actor:
    if not isinstance(d, dict):
        raise ScriptError("actor must be a JSON object")
    if "id" not in d:
        raise ScriptError("actor is missing 'id'")
    return Actor(
        id=str(d["id"]),
        name=str(d.get("name", d["id"])),
        avatar=str(d.get("avatar", "")),
        color=str(d.get("color", "#3b82f6")),
        affiliation=str(d.get("affiliation", "")),
    )


def _dict_to_cursor(d: Optional[Dict], index: int) -> Optional[Cursor]:
    if not d:
        return None
    if not isinstance(d, dict):
        raise ScriptError(f"step {index}: cursor must be an object with x and y")
    try:
        return Cursor(x=float(d.get("x", 0)), y=float(d.get("y", 0)))
    except (TypeError, ValueError) as e:
        raise ScriptError(f"step {index}: cursor x and y must be numbers") from e


def _dict_to_step(d: Dict, index: int) -> Step:
    if not isinstance(d, dict):
        raise ScriptError(f"step {index}: must be a JSON object")
    kind = d.get("kind")
    actor_id = d.get("actor_id")
    if not actor_id:
        raise ScriptError(f"step {index}: actor_id is required")
    try:
        delay_ms = float(d.get("delay_ms", 0))
    except (TypeError, ValueError) as e:
        raise ScriptError(f"step {index}: bad delay_ms") from e
    if kind == "type":
        return TypeStep(actor_id, delay_ms, d.get("text", ""), _dict_to_cursor(d.get("cursor"), index))
    if kind == "delete":
        return DeleteStep(actor_id, delay_ms, d.get("delete_text", ""), _dict_to_cursor(d.get("cursor"), index))
    if kind == "chat":
        return ChatStep(actor_id, delay_ms, d.get("message", ""))
    raise ScriptError(f"step {index}: unknown step kind {kind!r}")


def _step_to_dict(step: Step) -> Dict[str, Any]:
    if isinstance(step, TypeStep):
        data = {"kind": "type", "text": step.text}
    elif isinstance(step, DeleteStep):
        data = {"kind": "delete", "delete_text": step.delete_text}
    elif isinstance(step, ChatStep):
        data = {"kind": "chat", "message": step.message}
    else:
        raise TypeError(f"unknown step type {type(step).__name__}")
    data["actor_id"] = step.actor_id
    data["delay_ms"] = step.delay_ms
    cursor = getattr(step, "cursor", None)
    if cursor is not None:
        data["cursor"] = {"x": cursor.x, "y": cursor.y}
    return data


def script_from_dict(raw: Dict) -> Script:
    if not isinstance(raw, dict):
        raise ScriptError("script must be a JSON object")
    raw_actors = raw.get("actors", [])
    raw_steps = raw.get("steps", [])
    if not isinstance(raw_actors, list) or not isinstance(raw_steps, list):
        raise ScriptError("script actors and steps must be lists")
    actors = [_dict_to_actor(a) for a in raw_actors]
    steps = [_dict_to_step(s, i) for i, s in enumerate(raw_steps)]
    return Script(title=str(raw.get("title", "untitled")), actors=tuple(actors), steps=tuple(steps))


def script_to_dict(script: Script) -> Dict[str, Any]:
    return {
        "title": script.title,
        "actors": [
            {"id": a.id, "name": a.name, "avatar": a.avatar, "color": a.color, "affiliation": a.affiliation}
            for a in script.actors
        ],
        "steps": [_step_to_dict(s) for s in script.steps],
    }


def load_script(path: Path) -> Script:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ScriptError(f"{path}: not valid JSON ({e.msg})") from e
    script = script_from_dict(raw)
    logger.info("loaded script %r from %s (%d steps)", script.title, path, len(script))
    return script


def save_script(script: Script, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(script_to_dict(script), f, ensure_ascii=False, indent=2)
