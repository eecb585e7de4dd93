"""FastAPI application serving the InvoiceChaser MCP endpoint.

Routes:
- POST /api: JSON-RPC requests (initialize, tools/list, tools/call)
- GET /api: server-sent events stream for an initialized session
- GET /api/health: liveness probe
- GET /.well-known/openai-apps-challenge: domain verification token
- GET /metrics: Prometheus metrics

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import json
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from invoicechaser.api import metrics
from invoicechaser.extraction.schema import ExtractionResult
from invoicechaser.mcp.protocol import PARSE_ERROR, DispatchOutcome, McpDispatcher, jsonrpc_error
from invoicechaser.mcp.registry import create_tool_registry
from invoicechaser.mcp.sessions import SessionRegistry
from invoicechaser.mcp.sse import MESSAGE_EVENT, event_stream
from invoicechaser.reminders.red_flags import missing_fields
from invoicechaser.shared.config import get_settings

settings = get_settings()

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
logger = logging.getLogger(__name__)

app = FastAPI(
    title="InvoiceChaser",
    description="MCP server that drafts payment-reminder emails from invoice text",
    version=settings.service_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Accept",
        "MCP-Session-Id",
        "Last-Event-ID",
        "MCP-Protocol-Version",
    ],
    expose_headers=["Mcp-Session-Id"],
)

session_registry = SessionRegistry(
    ttl_seconds=settings.session_ttl_seconds,
    queue_size=settings.sse_queue_size,
)
tool_registry = create_tool_registry(settings)
dispatcher = McpDispatcher(settings, tool_registry, session_registry)

SESSION_HEADER = "Mcp-Session-Id"
SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "X-Accel-Buffering": "no",
}


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    # Skip metrics for /metrics endpoint itself
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    # Label by route template so arbitrary paths do not each open a new series
    route = request.scope.get("route")
    endpoint = getattr(route, "path", "unmatched")

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=endpoint,
    ).observe(duration)

    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors in the server's ``{ok, error}`` shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse({"ok": False, "error": "Not Found"}, status_code=exc.status_code)
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            {"ok": False, "error": "Method Not Allowed"},
            status_code=exc.status_code,
            headers=exc.headers,
        )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)


class HealthResponse(BaseModel):
    """Health check response."""

    ok: bool


def _not_acceptable(message: str) -> JSONResponse:
    return JSONResponse(
        {"ok": False, "error": message}, status_code=status.HTTP_406_NOT_ACCEPTABLE
    )


def _record_outcome(outcome: DispatchOutcome) -> None:
    """Update JSON-RPC, tool and data-quality metrics for one dispatch."""
    metrics.jsonrpc_requests_total.labels(
        method=outcome.method or "missing",
        outcome="result" if outcome.ok else "error",
    ).inc()

    if outcome.tool is None:
        return
    metrics.tool_calls_total.labels(tool=outcome.tool, status=outcome.tool_status).inc()

    if outcome.tool_status == "success":
        structured = outcome.response["result"].get("structuredContent") or {}
        if "extracted" in structured:
            extraction = ExtractionResult.model_validate(structured["extracted"])
            for field in missing_fields(extraction):
                metrics.red_flags_total.labels(field=field).inc()


@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Liveness probe.

    Returns:
        Constant ok status
    """
    return HealthResponse(ok=True)


@app.options("/api/health", tags=["Health"], include_in_schema=False)
def health_options() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/.well-known/openai-apps-challenge", include_in_schema=False)
def openai_apps_challenge() -> PlainTextResponse:
    """Serve the domain verification token exactly, without a trailing newline."""
    token = settings.openai_apps_challenge_token
    if not token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return PlainTextResponse(token)


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


@app.options("/api", tags=["MCP"], include_in_schema=False)
def mcp_options() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/api", tags=["MCP"])
async def mcp_request(request: Request) -> JSONResponse:
    """Handle one JSON-RPC request.

    The body is read raw so that an empty body counts as ``{}`` and invalid
    JSON yields a JSON-RPC parse error instead of a validation response.
    If the caller names a known session in ``Mcp-Session-Id``, the session
    is touched and its stream (if any) receives an ``mcp:message`` event.
    """
    raw = await request.body()
    try:
        body: Any = json.loads(raw) if raw.strip() else None
    except ValueError as e:
        metrics.jsonrpc_requests_total.labels(method="unparsed", outcome="error").inc()
        return JSONResponse(
            jsonrpc_error(None, PARSE_ERROR, f"Parse error: {e}"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    outcome = dispatcher.handle(body)
    _record_outcome(outcome)

    session_id = request.headers.get(SESSION_HEADER)
    if session_id and session_registry.touch(session_id) is not None:
        request_id = body.get("id") if isinstance(body, dict) else None
        session_registry.publish(
            session_id, MESSAGE_EVENT, {"type": MESSAGE_EVENT, "id": request_id}
        )

    headers = {SESSION_HEADER: outcome.session_id} if outcome.session_id else None
    return JSONResponse(outcome.response, headers=headers)


async def _tracked_stream(session_id: str) -> AsyncIterator[str]:
    metrics.sse_streams_active.inc()
    try:
        async for frame in event_stream(
            session_registry, session_id, settings.sse_heartbeat_seconds
        ):
            yield frame
    finally:
        metrics.sse_streams_active.dec()


@app.get("/api", tags=["MCP"])
async def mcp_stream(request: Request) -> Response:
    """Attach a server-sent events stream to an initialized session.

    Requires ``Accept: text/event-stream`` and a known ``Mcp-Session-Id``;
    otherwise responds 406 immediately rather than holding the connection.
    """
    accept = request.headers.get("accept", "")
    if "text/event-stream" not in accept.lower():
        return _not_acceptable("GET /api requires Accept: text/event-stream")

    session_id = request.headers.get(SESSION_HEADER)
    if not session_id:
        return _not_acceptable("GET /api requires MCP-Session-Id")

    if session_id not in session_registry:
        return _not_acceptable("Unknown MCP session")

    logger.info(f"Opening SSE stream for MCP session {session_id}")
    return StreamingResponse(
        _tracked_stream(session_id), media_type="text/event-stream", headers=SSE_HEADERS
    )
