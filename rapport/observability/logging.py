"""
One JSON object per line on stdout: {"ts", "level", "event", ...fields}.

Message bodies, verification credentials, passwords and session tokens are
masked to a length marker at any depth when ENABLE_PII_REDACTION is on, so a
log line can show that a value was present without exposing it.
"""
import json
import time
from typing import Any

from rapport.settings import settings

SENSITIVE_KEYS = frozenset({
    "content",
    "credentials",
    "password",
    "currentPassword",
    "newPassword",
    "token",
    "adminKey",
})


def _mask(value: Any) -> Any:
    if isinstance(value, str):
        return f"[REDACTED:{len(value)}chars]" if value else value
    if isinstance(value, dict):
        return {k: _mask(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_mask(v) for v in value]
    return value


def _scrub(value: Any) -> Any:
    """Walk dicts and lists, masking values stored under a sensitive key."""
    if isinstance(value, dict):
        return {k: (_mask(v) if k in SENSITIVE_KEYS else _scrub(v)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_scrub(v) for v in value]
    return value


def log(event: str, level: str = "info", **fields):
    payload = {"ts": int(time.time()), "level": level, "event": event}
    payload.update(_scrub(fields) if settings.ENABLE_PII_REDACTION else fields)
    print(json.dumps(payload, ensure_ascii=False, default=str))
