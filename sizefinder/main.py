import os
import time
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .config import settings
from .data.reference import ReferenceDataError, get_reference_data
from .logging_setup import configure_logging
from .routers.recommend import router as recommend_router
from .routers.wizard import router as wizard_router
from .security import create_jwt


configure_logging()
logger = structlog.get_logger("sizefinder")


app = FastAPI(title="Size Finder", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validate_config() -> None:
    strict = os.getenv("STRICT_CONFIG", "0") == "1"
    errors = []
    if not settings.api_key or settings.api_key == "change-me":
        errors.append("API_KEY must be set to a secure value")
    if settings.default_unit not in ("cm", "inch"):
        errors.append("SIZEFINDER_DEFAULT_UNIT must be 'cm' or 'inch'")
    if (settings.recorder or "none").lower() in ("webhook", "http") and not settings.recorder_url:
        errors.append("SIZEFINDER_RECORDER_URL must be set for the webhook recorder")
    try:
        get_reference_data()
    except ReferenceDataError as e:
        # broken reference data cannot be served, strict or not
        raise RuntimeError(f"Configuration error: {e}")
    if errors:
        if strict:
            raise RuntimeError("Configuration error: " + "; ".join(errors))
        for e in errors:
            logger.warning("config_warning", warning=e)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    request_id = uuid.uuid4().hex[:8]
    resp = None
    structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        logger.info("request_started",
                    path=str(request.url.path),
                    method=request.method,
                    client_ip=request.client.host if request.client else "unknown")
        resp = await call_next(request)
        return resp
    finally:
        duration_ms = int((time.time() - start) * 1000)
        status_code = getattr(resp, "status_code", 0) if resp else 0
        logger.info("request_completed",
                    path=str(request.url.path),
                    method=request.method,
                    status=status_code,
                    duration_ms=duration_ms)
        structlog.contextvars.unbind_contextvars("request_id")


@app.exception_handler(Exception)
async def handle_exceptions(request: Request, exc: Exception):
    request_id = uuid.uuid4().hex[:8]
    logger.error("unhandled_exception",
                 request_id=request_id,
                 path=str(request.url.path),
                 method=request.method,
                 error=str(exc),
                 error_type=type(exc).__name__,
                 exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "request_id": request_id,
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        },
    )


@app.get("/v1/health")
async def health():
    return {"status": "ok"}


@app.post("/v1/auth/token")
async def issue_token():
    token = create_jwt("size-finder-widget")
    return {"token": token}


app.include_router(wizard_router, prefix="/v1")
app.include_router(recommend_router, prefix="/v1")

# Warnings by default; STRICT_CONFIG=1 turns them into startup errors
_validate_config()
