"""
Observability Metrics
---------------------
Lightweight Redis-backed counters for state-machine transitions plus a bounded
sample of request latencies, summarized by get_metrics_snapshot() for
/admin/metrics. Missing keys (first boot) read as zero.
"""
from __future__ import annotations
import time
from typing import Dict, List, Tuple
from rapport.store.redis_conn import get_redis, key
from rapport.settings import settings

K_EVENTS = key("metrics", "events")            # HINCRBY event -> count
K_REQ_LAT = key("metrics", "request:latencies")  # LPUSH ms
K_REQ_ERR = key("metrics", "request:errors")     # HINCRBY error code -> count

_MAX_SAMPLES = 500  # cap to bound percentile computation cost

def _percentile(data: List[float], p: float) -> float:
    """Deterministic percentile (nearest-rank on sorted data)."""
    if not data:
        return 0.0
    d = sorted(data)
    k = max(1, int(round(p * len(d))))
    return float(d[k - 1])

def _p50_p95(latencies_ms: List[float]) -> Tuple[float, float]:
    if not latencies_ms:
        return 0.0, 0.0
    return _percentile(latencies_ms, 0.50), _percentile(latencies_ms, 0.95)

def increment(event: str, amount: int = 1) -> None:
    if not settings.METRICS_ENABLED:
        return
    r = get_redis()
    r.hincrby(K_EVENTS, event, amount)

def increment_error(code: str) -> None:
    if not settings.METRICS_ENABLED:
        return
    r = get_redis()
    r.hincrby(K_REQ_ERR, code, 1)

def record_request_latency(ms: float) -> None:
    if not settings.METRICS_ENABLED:
        return
    r = get_redis()
    r.lpush(K_REQ_LAT, int(ms))
    r.ltrim(K_REQ_LAT, 0, _MAX_SAMPLES - 1)

def _read_counts(k: str) -> Dict[str, int]:
    r = get_redis()
    return {name: int(v) for name, v in (r.hgetall(k) or {}).items()}

def get_metrics_snapshot() -> dict:
    """
    Return a dict shaped for /admin/metrics consumers.
    Fields:
      - events: transition counters (follow_request_sent, verification_approved, ...)
      - errors: rejected requests by error code
      - p50_request_latency_ms, p95_request_latency_ms over the last samples
    """
    r = get_redis()
    raw = r.lrange(K_REQ_LAT, 0, _MAX_SAMPLES - 1) or []
    samples: List[float] = []
    for x in raw:
        try:
            samples.append(float(x))
        except (TypeError, ValueError):
            continue
    p50, p95 = _p50_p95(samples)
    return {
        "events": _read_counts(K_EVENTS),
        "errors": _read_counts(K_REQ_ERR),
        "p50_request_latency_ms": round(p50, 3),
        "p95_request_latency_ms": round(p95, 3),
        "samples": len(samples),
        "snapshot_at": int(time.time()),
    }
