"""Prometheus metrics for the MCP server.

Exposes key metrics for monitoring:
- Request counts by endpoint and status
- Request duration histograms
- JSON-RPC method outcomes and tool calls
- Red flags raised per missing field
- Open SSE streams

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0),
)

# JSON-RPC metrics
jsonrpc_requests_total = Counter(
    "jsonrpc_requests_total",
    "Total JSON-RPC requests",
    ["method", "outcome"],  # outcome: result, error
)

tool_calls_total = Counter(
    "mcp_tool_calls_total",
    "Total MCP tool invocations",
    ["tool", "status"],  # success, invalid_params, unknown_tool
)

# Data-quality metrics
red_flags_total = Counter(
    "invoice_red_flags_total",
    "Invoice fields that could not be extracted",
    ["field"],
)

# Streaming metrics
sse_streams_active = Gauge(
    "mcp_sse_streams_active",
    "Currently open SSE notification streams",
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
