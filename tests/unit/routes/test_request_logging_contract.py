"""请求级别日志注入 + wide event 的契约测试."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from leafconfig.utils.logging.context_vars import request_id_var


@pytest.mark.unit
def test_request_id_is_echoed_and_context_reset(client) -> None:
    response = client.get("/api/v1/health/ping", headers={"X-Request-ID": "req_test_123"})

    assert response.status_code == 200
    assert response.headers.get("X-Request-ID") == "req_test_123"
    # teardown_request 应 reset contextvars(避免泄漏到后续请求/测试)
    assert request_id_var.get() is None


@pytest.mark.unit
def test_invalid_request_id_is_replaced(client) -> None:
    response = client.get("/api/v1/health/ping", headers={"X-Request-ID": "bad id with spaces"})

    assert response.headers.get("X-Request-ID", "").startswith("req_")


@pytest.mark.unit
def test_http_request_completed_is_emitted_per_request(client) -> None:
    with capture_logs() as entries:
        response = client.get("/_not_found", headers={"X-Request-ID": "req_error_404"})

    assert response.status_code == 404
    wide_entry = next(entry for entry in entries if entry.get("event") == "http_request_completed")
    assert wide_entry["module"] == "http"
    assert wide_entry["status_code"] == 404
    assert wide_entry["outcome"] == "error"
    assert isinstance(wide_entry["duration_ms"], int)


@pytest.mark.unit
def test_error_envelope_contains_request_id(client) -> None:
    response = client.get("/_not_found", headers={"X-Request-ID": "req_404"})

    assert response.status_code == 404
    assert response.headers.get("X-Request-ID") == "req_404"

    payload = response.get_json()
    assert isinstance(payload, dict)
    assert payload["message_code"] == "RESOURCE_NOT_FOUND"
    context = payload.get("context")
    assert isinstance(context, dict)
    assert context.get("request_id") == "req_404"
