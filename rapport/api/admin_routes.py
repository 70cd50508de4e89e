from fastapi import Depends

from rapport.api.auth import require_admin_session
from rapport.api.router import ADMIN, Route
from rapport.core.context import Actor
import rapport.observability.metrics as metrics


def get_metrics(_: Actor = Depends(require_admin_session)):
    """Transition counters and request latency percentiles backed by Redis."""
    return metrics.get_metrics_snapshot()


ADMIN_ROUTES = [
    Route("GET", "/admin/metrics", get_metrics, ADMIN, tags=("admin",)),
]
