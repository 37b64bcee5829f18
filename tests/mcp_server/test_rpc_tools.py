import json

from crm_health_audit.mcp_server.audit_tools import AUDIT_TOOLS, STATUS_BY_SEVERITY


def test_rpc_initialize(client):
    """Verify the MCP 'initialize' method via JSON-RPC."""
    payload = {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}
    response = client.post("/rpc", json=payload)
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["protocolVersion"] == "2024-05-01"
    assert result["serverInfo"]["name"] == "crm-health-audit"


def test_rpc_tools_list(client):
    """Verify 'tools/list' returns both tools with input schemas."""
    payload = {"jsonrpc": "2.0", "id": 2, "method": "tools/list", "params": {}}
    response = client.post("/rpc", json=payload)
    tools = {t["name"]: t for t in response.json()["result"]["tools"]}
    assert set(tools) == {"crm_audit", "list_signals"}
    props = tools["crm_audit"]["inputSchema"]["properties"]
    assert {"contacts", "companies", "deals", "config", "run_id"} <= set(props)
    assert set(AUDIT_TOOLS) == set(tools)


def test_rpc_unknown_method_and_tool(client, call_tool):
    """Unknown methods and tools map to JSON-RPC -32601."""
    response = client.post("/rpc", json={"jsonrpc": "2.0", "id": 3, "method": "resources/list"})
    assert response.json()["error"]["code"] == -32601

    body = call_tool(client, "no_such_tool", {}, req_id=4)
    assert body["error"]["code"] == -32601


def test_rpc_parse_error(client):
    """Malformed JSON bodies return a parse error."""
    response = client.post("/rpc", content="{not json", headers={"content-type": "application/json"})
    assert response.status_code == 200
    assert response.json()["error"]["code"] == -32700


def test_rpc_arguments_must_be_object(client):
    """Non-object arguments are rejected as invalid params."""
    payload = {
        "jsonrpc": "2.0",
        "id": 5,
        "method": "tools/call",
        "params": {"name": "crm_audit", "arguments": ["deals"]},
    }
    error = client.post("/rpc", json=payload).json()["error"]
    assert error["code"] == -32602


def test_crm_audit_inline_records(client, broken_deals, call_tool):
    """Inline records produce a failing audit with summary, tree and narrative input."""
    result = call_tool(client, "crm_audit", {"deals": broken_deals, "run_id": "rpc_inline"})["result"]
    assert result["status"] == "fail"
    assert result["module"] == "crm_audit"
    assert result["run_id"] == "rpc_inline"

    summary = result["summary"]
    assert summary["overall_severity"] == "high"
    assert summary["deals_count"] == 2
    assert summary["contacts_count"] == 0
    assert summary["primary_risk_driver"].startswith("Forecast integrity is compromised: 50%")

    audit = result["audit"]
    assert audit["overall_health"]["score"] == summary["health_score"]
    assert len(audit["signals"]) == 7
    assert result["narrative_input"]["top_actions"][0]["priority"] == 1
    assert result["artifacts"] == {}


def test_crm_audit_clean_records_pass(client, call_tool):
    """Complete records give a low-severity audit and a pass status."""
    deals = [{"closedate": "2026-01-01", "amount": "1", "dealstage": "won", "pipeline": "default"}]
    result = call_tool(client, "crm_audit", {"deals": deals})["result"]
    assert result["status"] == "pass"
    assert result["run_id"] == "mcp_run"
    assert result["summary"]["health_score"] == 50
    assert result["summary"]["action_count"] == 0
    assert STATUS_BY_SEVERITY == {"low": "pass", "medium": "warn", "high": "fail"}


def test_crm_audit_exports_artifacts(client, broken_deals, tmp_path, monkeypatch, call_tool):
    """Exported artifact paths are returned when export_report is on."""
    monkeypatch.chdir(tmp_path)
    config = {"settings": {"export_report": True, "export_html": True}}
    result = call_tool(
        client, "crm_audit", {"deals": broken_deals, "config": config, "run_id": "rpc_export"}
    )["result"]
    artifacts = result["artifacts"]
    assert set(artifacts) == {"report_excel", "report_json", "report_html"}
    saved = json.loads((tmp_path / artifacts["report_json"]).read_text())
    assert saved["overall_health"] == result["audit"]["overall_health"]


def test_crm_audit_reads_input_paths(client, tmp_path, call_tool):
    """Without inline records the tool loads config.input_paths."""
    deals_path = tmp_path / "deals.csv"
    deals_path.write_text("closedate,amount,dealstage,pipeline\n2026-01-01,5,won,default\n")
    config = {"input_paths": {"deals": str(deals_path)}}
    result = call_tool(client, "crm_audit", {"config": config})["result"]
    assert result["summary"]["deals_count"] == 1


def test_crm_audit_config_errors_are_enveloped(client, call_tool):
    """Bad configs and missing inputs come back as structured tool errors."""
    result = call_tool(client, "crm_audit", {"config": {"logging": "loud"}, "deals": []})["result"]
    assert result["status"] == "error"
    assert result["error"]["type"] == "ValidationError"
    assert "config block" in result["error"]["hint"]

    result = call_tool(client, "crm_audit", {})["result"]
    assert result["status"] == "error"
    assert "input_paths" in result["error"]["message"]


def test_list_signals(client, call_tool):
    """The signal catalog lists all seven signals with their remediation."""
    result = call_tool(client, "list_signals", {})["result"]
    assert result["status"] == "pass"
    signals = {s["key"]: s for s in result["signals"]}
    assert len(signals) == 7
    close = signals["deals_missing_close_date_pct"]
    assert close["object_type"] == "deals"
    assert close["criticality"] == "critical"
    assert close["action"]["order_weight"] == 100
