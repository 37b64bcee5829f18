import pytest
from fastapi.testclient import TestClient

import crm_health_audit.mcp_server.server as server_module


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(server_module, "AUTH_TOKEN", "")
    return TestClient(server_module.app)


@pytest.fixture
def broken_deals() -> list[dict]:
    """Deals where close date and amount are missing on half the records."""
    return [
        {"properties": {"closedate": "", "amount": "", "dealstage": "won", "pipeline": "default"}},
        {"properties": {"closedate": "2026-01-01", "amount": "10", "dealstage": "won", "pipeline": "default"}},
    ]


@pytest.fixture
def call_tool():
    """Post a tools/call request and return the decoded JSON-RPC body."""

    def _call(client: TestClient, name: str, arguments, req_id: int = 1) -> dict:
        payload = {
            "jsonrpc": "2.0",
            "id": req_id,
            "method": "tools/call",
            "params": {"name": name, "arguments": arguments},
        }
        response = client.post("/rpc", json=payload)
        assert response.status_code == 200
        return response.json()

    return _call
