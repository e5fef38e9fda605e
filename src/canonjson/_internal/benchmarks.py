"""Performance sentinel payloads and budgets."""

from __future__ import annotations

import json
import os
from typing import Any, Dict

from canonjson.api import to_canonical_string


def _budget_from_env(var_name: str, default_us: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_us
    try:
        return float(raw)
    except ValueError:
        return default_us


MAX_SERIALIZE_US = _budget_from_env("CANONJSON_MAX_SERIALIZE_US", 500.0)
MAX_ROUNDTRIP_US = _budget_from_env("CANONJSON_MAX_ROUNDTRIP_US", 500.0)


def power_levels_event() -> Dict[str, Any]:
    """A room power-levels state event, typical of signed federation payloads."""
    return {
        "content": {
            "ban": 50,
            "events": {
                "m.room.avatar": 50,
                "m.room.canonical_alias": 50,
                "m.room.history_visibility": 100,
                "m.room.name": 50,
                "m.room.power_levels": 100,
            },
            "events_default": 0,
            "invite": 0,
            "kick": 50,
            "redact": 50,
            "state_default": 50,
            "users": {
                "@example:localhost": 100,
            },
            "users_default": 0,
        },
        "event_id": "$15139375512JaHAW:localhost",
        "origin_server_ts": 45,
        "sender": "@example:localhost",
        "room_id": "!room:localhost",
        "state_key": "",
        "type": "m.room.power_levels",
        "unsigned": {
            "age": 45,
        },
    }


def serialize_canonical(payload: Dict[str, Any]) -> str:
    return to_canonical_string(payload)


def serialize_roundtrip(payload: Dict[str, Any]) -> str:
    """Baseline: the standard library's sorted, compact dump of the same payload."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

