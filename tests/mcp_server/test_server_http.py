import crm_health_audit.mcp_server.server as server_module


def test_health_lists_tools_and_tallies(client):
    """/health reports version, tools and the running audit tallies."""
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert "version" in data
    assert set(data["tools"]) == {"crm_audit", "list_signals"}
    assert {"uptime_sec", "tool_calls", "tool_failures", "mean_call_ms", "audits"} <= set(data)
    assert {"total", "by_severity", "mean_health_score", "last_health_score"} <= set(data["audits"])


def test_audit_outcome_is_tallied(client, broken_deals, call_tool):
    """A completed crm_audit call bumps the call count and the severity tally."""
    before = server_module.METRICS.snapshot()
    result = call_tool(client, "crm_audit", {"deals": broken_deals})["result"]
    after = client.get("/health").json()

    assert result["summary"]["overall_severity"] == "high"
    assert after["tool_calls"]["crm_audit"] == before["tool_calls"].get("crm_audit", 0) + 1
    assert after["audits"]["total"] == before["audits"]["total"] + 1
    assert after["audits"]["by_severity"]["high"] == before["audits"]["by_severity"].get("high", 0) + 1
    assert after["audits"]["last_health_score"] == result["summary"]["health_score"]


def test_failed_tool_call_is_tallied(client, call_tool):
    """An errored audit counts as a failure and not as an audit."""
    before = server_module.METRICS.snapshot()
    result = call_tool(client, "crm_audit", {})["result"]
    after = server_module.METRICS.snapshot()

    assert result["status"] == "error"
    assert after["tool_failures"]["crm_audit"] == before["tool_failures"].get("crm_audit", 0) + 1
    assert after["audits"]["total"] == before["audits"]["total"]


def test_list_signals_is_not_an_audit(client, call_tool):
    """Only crm_audit results feed the audit tallies."""
    before = server_module.METRICS.snapshot()["audits"]["total"]
    call_tool(client, "list_signals", {})
    assert server_module.METRICS.snapshot()["audits"]["total"] == before


def test_rpc_protocol_errors_are_not_tallied(client):
    """Requests that never reach a tool leave the call counts alone."""
    before = server_module.METRICS.snapshot()["tool_calls"]
    client.post("/rpc", json={"jsonrpc": "2.0", "id": 7, "method": "initialize"})
    client.post("/rpc", json=[1, 2])
    assert server_module.METRICS.snapshot()["tool_calls"] == before


def test_rpc_non_object_body_is_invalid_request(client):
    """A JSON body that is not an object is an invalid request."""
    response = client.post("/rpc", json=[{"method": "initialize"}])
    assert response.status_code == 200
    assert response.json()["error"]["code"] == -32600


def test_auth_rejects_missing_or_wrong_token(client, monkeypatch):
    """With a token configured, requests without it get 401."""
    monkeypatch.setattr(server_module, "AUTH_TOKEN", "test-token")

    assert client.get("/health").status_code == 401

    rpc_response = client.post("/rpc", json={"jsonrpc": "2.0", "id": 901, "method": "initialize"})
    assert rpc_response.status_code == 401
    assert rpc_response.json() == {"error": "Unauthorized"}

    wrong = client.get("/health", headers={"Authorization": "Bearer nope"})
    assert wrong.status_code == 401
    basic = client.get("/health", headers={"Authorization": "Basic test-token"})
    assert basic.status_code == 401


def test_auth_accepts_bearer_token(client, monkeypatch):
    """The configured bearer token opens both endpoints."""
    monkeypatch.setattr(server_module, "AUTH_TOKEN", "test-token")
    headers = {"Authorization": "Bearer test-token"}

    assert client.get("/health", headers=headers).json()["status"] == "ok"

    rpc_payload = {"jsonrpc": "2.0", "id": 902, "method": "initialize", "params": {}}
    rpc_response = client.post("/rpc", json=rpc_payload, headers=headers)
    assert rpc_response.status_code == 200
    assert rpc_response.json()["result"]["serverInfo"]["name"] == "crm-health-audit"


def test_structured_logs_emit_json(client, call_tool, monkeypatch, caplog):
    """Structured mode logs each tool call as one JSON object."""
    monkeypatch.setattr(server_module, "STRUCTURED_LOGS", True)
    with caplog.at_level("INFO", logger="crm_health_audit.mcp_server"):
        call_tool(client, "list_signals", {})
    lines = [r.getMessage() for r in caplog.records if r.name == "crm_health_audit.mcp_server"]
    assert any('"event": "tool_call"' in line and '"tool": "list_signals"' in line for line in lines)
