"""
crm_health_audit MCP Server

FastAPI JSON-RPC 2.0 and MCP stdio server exposing the CRM health audit
as two tools: crm_audit and list_signals.

Start with:
    python -m crm_health_audit.mcp_server.server
"""
