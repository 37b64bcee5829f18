import logging

import pytest


@pytest.fixture(autouse=True)
def isolate_test_env(monkeypatch: pytest.MonkeyPatch):
    """
    Keep tests deterministic by clearing server env vars from the shell and
    re-enabling logging that a pipeline run with logging 'off' disabled.
    """
    for name in (
        "CRM_AUDIT_MCP_AUTH_TOKEN",
        "CRM_AUDIT_MCP_STRUCTURED_LOGS",
        "CRM_AUDIT_MCP_STDIO",
        "CRM_AUDIT_MCP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    logging.disable(logging.NOTSET)
