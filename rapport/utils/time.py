import time
from datetime import datetime, timezone

def now_ms() -> int:
    return int(time.time() * 1000)

def parse_timestamp_ms(ts) -> int:
    """
    Normalize a client-supplied timestamp to epoch milliseconds (int).
    Accepts:
    - int/float or a digit string: treated as epoch ms (or seconds if suspiciously small)
    - ISO-8601 string: parsed via datetime.fromisoformat (supports trailing 'Z')
    Raises ValueError for anything else; callers looking up by exact time
    must not silently fall back to "now".
    """
    if ts is None or isinstance(ts, bool):
        raise ValueError("timestamp is required")
    if isinstance(ts, str):
        s = ts.strip()
        if not s:
            raise ValueError("timestamp is required")
        if s.lstrip("-").isdigit():
            ts = int(s)
        else:
            # Support Zulu time
            if s.endswith("Z"):
                s = s[:-1] + "+00:00"
            dt = datetime.fromisoformat(s)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return int(round(dt.timestamp() * 1000))
    if isinstance(ts, (int, float)):
        v = int(ts)
        # Heuristic: if looks like seconds (< 10^12), convert to ms.
        return v * 1000 if 0 < v < 10**12 else v
    raise ValueError(f"unsupported timestamp type: {type(ts).__name__}")

def format_timestamp_ms(ms: int) -> str:
    """Epoch ms -> ISO-8601 UTC with millisecond precision, e.g. 2024-01-01T00:00:00.123Z."""
    dt = datetime.fromtimestamp(int(ms) / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(ms) % 1000:03d}Z"
