"""
server.py — CRM Health Audit MCP server.

Two transports over the same tools (crm_audit, list_signals):

1. HTTP   — JSON-RPC 2.0 on POST /rpc, plus GET /health with audit tallies.
2. Stdio  — the MCP protocol for desktop hosts.

Set CRM_AUDIT_MCP_AUTH_TOKEN to require ``Authorization: Bearer <token>``
on every HTTP request.

Start HTTP:
    python -m crm_health_audit.mcp_server.server

Start Stdio:
    python -m crm_health_audit.mcp_server.server --stdio
"""

import argparse
import asyncio
import json
import logging
import os
import secrets
import sys
import time
from importlib.metadata import PackageNotFoundError, version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from crm_health_audit.mcp_server.audit_metrics import AuditMetrics
from crm_health_audit.mcp_server.audit_tools import AUDIT_TOOLS, call_tool

try:
    __version__ = version("crm-health-audit")
except PackageNotFoundError:
    __version__ = "0.0.0+local"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,  # stdout carries the stdio protocol
)
logger = logging.getLogger("crm_health_audit.mcp_server")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


AUTH_TOKEN = os.environ.get("CRM_AUDIT_MCP_AUTH_TOKEN", "").strip()
STRUCTURED_LOGS = _env_flag("CRM_AUDIT_MCP_STRUCTURED_LOGS")
PROTOCOL_VERSION = "2024-05-01"
SERVER_NAME = "crm-health-audit"

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

METRICS = AuditMetrics()

app = FastAPI(title="CRM Health Audit MCP Server", version=__version__)


def _tool_listing() -> list[dict]:
    return [
        {"name": tool.name, "description": tool.description, "inputSchema": tool.input_schema}
        for tool in AUDIT_TOOLS.values()
    ]


def _bearer_ok(request: Request) -> bool:
    if not AUTH_TOKEN:
        return True
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    return scheme == "Bearer" and secrets.compare_digest(token.strip(), AUTH_TOKEN)


def _rpc_result(req_id, result: dict) -> dict:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def _rpc_error(req_id, code: int, message: str) -> dict:
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def _log_tool_call(tool: str, status: str, run_id, elapsed_ms: float) -> None:
    fields = {"event": "tool_call", "tool": tool, "status": status, "run_id": run_id, "ms": elapsed_ms}
    if STRUCTURED_LOGS:
        logger.info(json.dumps(fields, sort_keys=True))
    else:
        logger.info(" ".join(f"{k}={v}" for k, v in fields.items() if v is not None))


async def _handle_rpc(body: dict) -> dict:
    req_id = body.get("id")
    method = body.get("method")
    params = body.get("params") or {}

    if method == "initialize":
        return _rpc_result(
            req_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
                "capabilities": {"tools": {}},
            },
        )
    if method == "tools/list":
        return _rpc_result(req_id, {"tools": _tool_listing()})
    if method != "tools/call":
        return _rpc_error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    name = params.get("name") if isinstance(params, dict) else None
    if name not in AUDIT_TOOLS:
        return _rpc_error(req_id, METHOD_NOT_FOUND, f"Unknown tool: {name}")
    arguments = params.get("arguments") or {}
    if not isinstance(arguments, dict):
        return _rpc_error(req_id, INVALID_PARAMS, "Tool arguments must be a JSON object.")

    start = time.perf_counter()
    outcome = await asyncio.to_thread(call_tool, name, arguments)
    elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
    METRICS.observe(outcome, elapsed_ms)
    _log_tool_call(name, outcome.payload.get("status"), outcome.payload.get("run_id"), elapsed_ms)
    return _rpc_result(req_id, outcome.payload)


@app.post("/rpc")
async def rpc(request: Request) -> JSONResponse:
    if not _bearer_ok(request):
        logger.warning("Rejected /rpc request without a valid bearer token")
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(_rpc_error(None, PARSE_ERROR, "Parse error"))
    if not isinstance(body, dict):
        return JSONResponse(_rpc_error(None, INVALID_REQUEST, "Invalid Request"))
    return JSONResponse(await _handle_rpc(body))


@app.get("/health")
async def health(request: Request):
    if not _bearer_ok(request):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    return {"status": "ok", "version": __version__, "tools": list(AUDIT_TOOLS), **METRICS.snapshot()}


# --- Stdio transport ---


def _build_stdio_server():
    """MCP stdio server over the same tools. Needs the ``mcp`` 1.x SDK."""
    import mcp.types as types
    from mcp.server import Server

    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=t["name"], description=t["description"], inputSchema=t["inputSchema"])
            for t in _tool_listing()
        ]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        if name not in AUDIT_TOOLS:
            return [types.TextContent(type="text", text=f"Error: Unknown tool {name}")]
        outcome = await asyncio.to_thread(call_tool, name, arguments or {})
        return [types.TextContent(type="text", text=json.dumps(outcome.payload, indent=2))]

    return server


async def run_stdio():
    from mcp.server.stdio import stdio_server

    server = _build_stdio_server()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    parser = argparse.ArgumentParser(description="CRM Health Audit MCP Server")
    parser.add_argument("--stdio", action="store_true", help="Run in stdio mode for desktop hosts")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("CRM_AUDIT_MCP_PORT", 8001)),
        help="HTTP port (default: 8001)",
    )
    args = parser.parse_args()

    if args.stdio or _env_flag("CRM_AUDIT_MCP_STDIO"):
        logger.info("Starting CRM Health Audit MCP Server in stdio mode")
        asyncio.run(run_stdio())
        return

    import uvicorn

    logger.info(f"Starting CRM Health Audit MCP Server in HTTP mode on port {args.port}")
    uvicorn.run("crm_health_audit.mcp_server.server:app", host="0.0.0.0", port=args.port, log_level="info")


if __name__ == "__main__":
    main()
