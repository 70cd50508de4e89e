import time

from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from rapport.api.admin_routes import ADMIN_ROUTES
from rapport.api.router import build_router
from rapport.api.routes import ROUTES
from rapport.core.errors import RapportError
from rapport.observability import metrics
from rapport.observability.logging import log
from rapport.settings import settings

app = FastAPI(title="Rapport API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(build_router(ROUTES + ADMIN_ROUTES))


@app.get("/")
def root():
    return {"status": "ok", "message": "Rapport API is running."}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def record_latency(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    # metrics write to Redis synchronously; keep them off the event loop
    await run_in_threadpool(metrics.record_request_latency, (time.perf_counter() - started) * 1000)
    return response


# ---------------------------------------------------------------------------
# Typed core failures become structured error payloads with their own status.
# ---------------------------------------------------------------------------
@app.exception_handler(RapportError)
def rapport_error_handler(request: Request, exc: RapportError):
    log(
        event="request_rejected",
        level="warning",
        method=request.method,
        path=request.url.path,
        error=exc.code,
        status=exc.status_code,
        detail=exc.message,
    )
    metrics.increment_error(exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    log(event="unhandled_exception", level="error", method=request.method, path=request.url.path, error=repr(exc))
    return JSONResponse(
        status_code=500,
        content={"status": "error", "error": "internal_error", "detail": "Internal server error."},
    )
