"""Tests for the path router, response helpers and structured logs."""

import json

import pytest

from core.utils.responses import create_raw_response, get_method, method_not_allowed, parse_body
from index import lambda_handler
from structured_logger import StructuredLogger, normalize_route, redact_params


@pytest.mark.parametrize("path", ["/analyze", "/prod/analyze", "/get-n-score", "/dev/n-score/"])
def test_endpoints_enforce_post(path, make_event):
    response = lambda_handler(make_event({}, method="GET", path=path), None)

    assert response["statusCode"] == 405


def test_router_validates_before_reading_configuration(make_event):
    response = lambda_handler(make_event({"foodNames": []}, path="/prod/get-n-score"), None)

    assert response["statusCode"] == 400
    assert json.loads(response["body"]) == {"error": "Missing totalNutrition data."}


def test_health(make_event, monkeypatch):
    monkeypatch.setenv("STAGE", "staging")

    response = lambda_handler(make_event(method="GET", path="/staging/health"), None)

    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {"status": "healthy", "service": "nutri-scan", "stage": "staging"}


def test_unknown_path(make_event):
    response = lambda_handler(make_event({}, path="/recipes"), None)

    assert response["statusCode"] == 404
    assert json.loads(response["body"]) == {"error": "Endpoint not found"}


def test_http_api_v2_event_is_routed():
    event = {"requestContext": {"http": {"method": "DELETE", "path": "/analyze"}}}

    assert get_method(event) == "DELETE"
    assert lambda_handler(event, None)["statusCode"] == 405


@pytest.mark.parametrize("event, expected", [
    ({}, {}),
    ({"body": ""}, {}),
    ({"body": '{"a": 1}'}, {"a": 1}),
    ({"body": {"a": 1}}, {"a": 1}),
    ({"body": "[1, 2]"}, [1, 2]),
])
def test_parse_body(event, expected):
    assert parse_body(event) == expected


def test_parse_body_rejects_invalid_json():
    with pytest.raises(ValueError, match="Invalid JSON"):
        parse_body({"body": "{"})


def test_response_helpers():
    assert method_not_allowed()["headers"]["Allow"] == "POST"
    raw = create_raw_response(200, '{"nScore":1}')
    assert raw["body"] == '{"nScore":1}'
    assert raw["headers"]["Access-Control-Allow-Origin"] == "*"


def test_normalize_route_drops_stage():
    assert normalize_route("POST", "/prod/get-n-score") == "POST /get-n-score"
    assert normalize_route("POST", "/analyze") == "POST /analyze"
    assert normalize_route("", "") == "/"


def test_query_credentials_are_redacted(capsys):
    assert redact_params({"key": "abc", "lang": "en"}) == {"key": "***", "lang": "en"}

    StructuredLogger(service_name="nutri-scan").start_request(
        {"httpMethod": "POST", "path": "/analyze", "queryStringParameters": {"key": "abc"}}
    )

    logged = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert logged["logType"] == "REQUEST"
    assert logged["queryParams"] == {"key": "***"}
    assert "abc" not in json.dumps(logged)


def test_request_id_comes_from_api_gateway(capsys):
    ctx = StructuredLogger().start_request({"httpMethod": "POST", "requestContext": {"requestId": "gw-123"}})

    assert ctx["request_id"] == "gw-123"
    assert json.loads(capsys.readouterr().out)["requestId"] == "gw-123"


def test_lifecycle_events_share_request_context(capsys):
    structured = StructuredLogger(service_name="nutri-scan")
    ctx = structured.start_request({"httpMethod": "POST", "path": "/dev/get-n-score"})

    structured.log_warning(ctx, "odd shape", {"path": "/get-n-score"})
    structured.log_metric(ctx, "UpstreamAttempts", 2)
    structured.log_response(ctx, status_code=200)

    events = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
    assert [event["logType"] for event in events] == ["REQUEST", "WARNING", "METRIC", "RESPONSE"]
    assert {event["requestId"] for event in events} == {ctx["request_id"]}
    assert events[1]["warning"] == {"message": "odd shape", "path": "/get-n-score"}
    assert events[2]["metricName"] == "UpstreamAttempts" and events[2]["value"] == 2
    assert events[3]["statusCode"] == 200
    assert events[3]["routeNormalized"] == "POST /get-n-score"
    assert not hasattr(structured, "debug")
