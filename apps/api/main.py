from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
import uuid
import logging

from packages.config import CORS_ORIGINS
from packages.error_reporting import init_error_reporting
from packages.errors import StructuralParseError, UpstreamGenerationError
from packages.logging_utils import setup_logging
from packages.request_context import request_id_var
from packages.metrics import inc, observe
from .routes import health as health_routes
from .routes import metrics as metrics_routes
from .routes import plans as plans_routes
from .routes import uploads as uploads_routes


setup_logging()
init_error_reporting("api", enable_fastapi=True)
logger = logging.getLogger("trainlog.api")

app = FastAPI(title="Training Log Planner API")


def format_error(code: str, message: str, request_id: str | None = None, details: dict | None = None):
    payload = {"error": {"code": code, "message": message, "request_id": request_id}}
    if details:
        payload["error"]["details"] = details
    return payload


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        return response
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.exception("request_error %s %s %.1fms", request.method, request.url.path, duration_ms)
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        status_code = getattr(response, "status_code", "ERR")
        inc("http_requests_total")
        inc(f"http_requests_total{{path=\"{request.url.path}\",status=\"{status_code}\"}}")
        observe("http_request_duration_seconds", duration_ms / 1000.0)
        logger.info("%s %s -> %s %.1fms", request.method, request.url.path, status_code, duration_ms)
        request_id_var.reset(token)
        if response is not None:
            response.headers["x-request-id"] = request_id


def _error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    req_id = request_id_var.get() or "-"
    return JSONResponse(status_code=status_code, content=format_error(code, message, req_id, details))


# Consistent error model
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    details = exc.detail if isinstance(exc.detail, dict) else None
    return _error_response(exc.status_code, f"http_{exc.status_code}", message, details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = {"errors": [{"loc": list(e.get("loc", [])), "msg": e.get("msg")} for e in exc.errors()]}
    return _error_response(422, "http_422", "Invalid request", details)


@app.exception_handler(StructuralParseError)
async def structural_parse_handler(request: Request, exc: StructuralParseError):
    details = {"line": exc.line} if exc.line is not None else None
    return _error_response(400, "invalid_upload", f"Failed to process the CSV file: {exc}", details)


@app.exception_handler(UpstreamGenerationError)
async def upstream_generation_handler(request: Request, exc: UpstreamGenerationError):
    logger.warning("upstream_generation_error %s %s: %s", request.method, request.url.path, exc)
    return _error_response(502, "upstream_error", exc.user_message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "Internal server error")


# Public routes (unprefixed) + /api + /api/v1
for prefix in ("", "/api", "/api/v1"):
    for module in (health_routes, metrics_routes, uploads_routes, plans_routes):
        app.include_router(module.router, prefix=prefix)
