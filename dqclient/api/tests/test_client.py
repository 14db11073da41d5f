import json

import httpx
import pytest

from conftest import column_profile, report_payload
from dqclient.api import client as client_module
from dqclient.api.client import AnalysisClient, resolve_base_url
from dqclient.core.errors import EmptyResultError, TransportError
from dqclient.core.types import AnalysisReport, FileInput


def test_resolve_base_url_appends_prefix_once():
    assert resolve_base_url("http://dq.local:9000/") == "http://dq.local:9000/api/v1/data-quality"
    assert resolve_base_url("http://dq.local/api/v1/data-quality") == "http://dq.local/api/v1/data-quality"


def test_resolve_base_url_falls_back_to_env_then_default(monkeypatch):
    monkeypatch.setattr(client_module, "API_URL", "https://quality.example.com")
    assert resolve_base_url() == "https://quality.example.com/api/v1/data-quality"
    monkeypatch.setattr(client_module, "API_URL", None)
    assert resolve_base_url() == "http://localhost:8080/api/v1/data-quality"


def test_analyze_file_sends_multipart_with_string_flags(analysis_service, analysis_client, run):
    upload = FileInput(filename="customers.csv", content=b"id,email\n1,a@example.com\n")

    report = run(lambda: analysis_client.analyze_file(upload, perform_pii_check=True, perform_bias_check=False))

    assert isinstance(report, AnalysisReport)
    assert report.analysis_id == "a1b2c3d4"
    call = analysis_service.calls[0]
    assert call["kind"] == "file"
    assert call["content_type"].startswith("multipart/form-data")
    assert b'filename="customers.csv"' in call["body"]
    assert b"Content-Type: text/csv" in call["body"]
    assert b'name="performPIICheck"\r\n\r\ntrue' in call["body"]
    assert b'name="performBiasCheck"\r\n\r\nfalse' in call["body"]


def test_analyze_url_sends_json_body(analysis_service, analysis_client, run):
    run(lambda: analysis_client.analyze_url("https://example.com/data.csv", perform_bias_check=True))

    call = analysis_service.calls[0]
    assert call["kind"] == "url"
    assert json.loads(call["body"]) == {
        "dataUrl": "https://example.com/data.csv",
        "performPIICheck": True,
        "performBiasCheck": True,
    }


def test_analyze_inline_sends_text_verbatim(analysis_service, analysis_client, run):
    records = '[{"name": "John", "age": 30}]'
    run(lambda: analysis_client.analyze_inline(records, perform_pii_check=False))

    body = json.loads(analysis_service.calls[0]["body"])
    assert body["inlineData"] == records
    assert body["performPIICheck"] is False
    assert body["performBiasCheck"] is False


def test_error_message_comes_from_service_body(analysis_service, analysis_client, run):
    analysis_service.respond_with({"message": "File is empty", "status": 400}, status_code=400)

    with pytest.raises(TransportError) as excinfo:
        run(lambda: analysis_client.analyze_inline("[]"))

    assert excinfo.value.message == "File is empty"
    assert excinfo.value.status_code == 400


def test_error_detail_field_is_used_when_message_missing(analysis_service, analysis_client, run):
    analysis_service.respond_with({"detail": "Service temporarily unavailable"}, status_code=503)

    with pytest.raises(TransportError) as excinfo:
        run(lambda: analysis_client.analyze_url("https://example.com/data.csv"))

    assert excinfo.value.message == "Service temporarily unavailable"


def test_error_without_body_gets_generic_message(analysis_service, analysis_client, run):
    analysis_service.respond_raw(b"", status_code=500)

    with pytest.raises(TransportError) as excinfo:
        run(lambda: analysis_client.analyze_inline("[]"))

    assert excinfo.value.message == "Request failed with status code 500"
    assert excinfo.value.status_code == 500


@pytest.mark.parametrize("body", [b"", b"   ", b"{}", b"[]", b"<html>oops</html>"])
def test_success_without_report_is_empty_result(analysis_service, analysis_client, run, body):
    analysis_service.respond_raw(body)

    with pytest.raises(EmptyResultError):
        run(lambda: analysis_client.analyze_inline("[]"))


def test_schema_violation_is_empty_result(analysis_service, analysis_client, run):
    broken = report_payload(columnProfiles=[column_profile("score", nullPercentage=120.0)])
    analysis_service.respond_with(broken)

    with pytest.raises(EmptyResultError):
        run(lambda: analysis_client.analyze_inline("[]"))


def test_timeout_is_reported_as_transport_error(run):
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    client = AnalysisClient("http://testserver", transport=httpx.MockTransport(handler), timeout=0.5)

    with pytest.raises(TransportError) as excinfo:
        run(lambda: client.analyze_url("https://example.com/data.csv"))

    assert excinfo.value.message == "The analysis request timed out"
    assert excinfo.value.status_code is None


def test_connection_failure_keeps_transport_message(run):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = AnalysisClient("http://testserver", transport=httpx.MockTransport(handler))

    with pytest.raises(TransportError) as excinfo:
        run(lambda: client.analyze_inline("[]"))

    assert excinfo.value.message == "connection refused"


def test_custom_headers_are_sent(run):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json=report_payload())

    client = AnalysisClient(
        "http://testserver",
        transport=httpx.MockTransport(handler),
        headers={"Authorization": "Bearer token"},
    )
    report = run(lambda: client.analyze_inline("[]"))

    assert report.health_score == 73.4
    assert seen == {"path": "/api/v1/data-quality/analyze/inline", "auth": "Bearer token"}
