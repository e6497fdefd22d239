from __future__ import annotations
import json
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .types import *


def encode(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


# server side frame builders
def event_frame(event: str, *args: Any) -> Dict[str, Any]:
    return {"type": event, "args": list(args)}

def resp_error(code: str, detail: str) -> Dict[str, Any]:
    return {"type": ERROR, "payload": {"code": code, "detail": detail}}

def system_message(text: str, chat_type: str, timestamp: str, now_ms: int) -> Dict[str, Any]:
    """Message object for a notice authored by the relay itself."""
    return {
        "id": SYSTEM_ID,
        "message": text,
        "username": SYSTEM_USERNAME,
        "timestamp": timestamp,
        "messageId": f"system-{now_ms}-{uuid.uuid4()}",
        "chatType": chat_type,
    }


# inbound parsing
def decode_frame(raw: str | bytes) -> Dict[str, Any]:
    """Parse one text frame. Raises ValueError when it isn't a JSON object."""
    try:
        obj = json.loads(raw)
    except RecursionError:
        raise ValueError("frame nested too deeply")
    if not isinstance(obj, dict):
        raise ValueError("frame is not an object")
    return obj

def validate_frame(obj: Dict[str, Any]) -> Tuple[bool, str]:
    if not isinstance(obj.get("type"), str):
        return False, "type:not_string"
    if "args" in obj and not isinstance(obj["args"], list):
        return False, "args:not_list"
    if "payload" in obj and not isinstance(obj["payload"], dict):
        return False, "payload:not_object"
    return True, ""

def frame_args(obj: Dict[str, Any]) -> List[Any]:
    """
    Positional arguments for the frame's event, trimmed to the parameters the
    event declares. Named payloads are mapped onto the same order; trailing
    missing values are left off so handler defaults apply.
    """
    params = EVENT_PARAMS.get(obj["type"], ())
    args: Optional[List[Any]] = obj.get("args")
    if args is not None:
        return list(args[:len(params)])

    payload = obj.get("payload") or {}
    out: List[Any] = []
    for name in params:
        out.append(payload.get(name))
    while out and out[-1] is None:
        out.pop()
    return out
