from unittest.mock import MagicMock, patch

from rapport.observability import metrics
from rapport.settings import settings


def test_percentiles():
    assert metrics._p50_p95([]) == (0.0, 0.0)
    assert metrics._p50_p95([10, 20, 30, 40]) == (20.0, 40.0)


def test_snapshot_from_fake_redis(fake_redis):
    metrics.increment("follow_request_sent")
    metrics.increment("follow_request_sent")
    metrics.increment_error("conflict")
    for ms in (5, 15, 25):
        metrics.record_request_latency(ms)

    snap = metrics.get_metrics_snapshot()
    assert snap["events"] == {"follow_request_sent": 2}
    assert snap["errors"] == {"conflict": 1}
    assert snap["samples"] == 3
    assert snap["p50_request_latency_ms"] == 15.0


def test_empty_snapshot(fake_redis):
    snap = metrics.get_metrics_snapshot()
    assert snap["events"] == {} and snap["errors"] == {}
    assert snap["samples"] == 0


@patch("rapport.observability.metrics.get_redis")
def test_disabled_metrics_never_touch_redis(mock_get_redis, monkeypatch):
    monkeypatch.setattr(settings, "METRICS_ENABLED", False)
    mock_get_redis.return_value = MagicMock()
    metrics.increment("x")
    metrics.increment_error("y")
    metrics.record_request_latency(1)
    assert not mock_get_redis.called
