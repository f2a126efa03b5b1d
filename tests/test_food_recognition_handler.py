"""Tests for the food recognition Lambda entry point."""

import json

import pytest

from core.errors import UpstreamTransportError
from index import analyze_handler

IMAGE_DATA = "/9j/4AAQSkZJRgABAQAAAQABAAD/2wBDAAgGBgcGBQgHBwcJCQgKDBQNDAsLDBkSEw8U"


@pytest.fixture
def recognition_body():
    return {"base64ImageData": IMAGE_DATA, "supportedFoods": ["apple", "banana"]}


@pytest.fixture
def recognition_envelope(envelope_with_text):
    return envelope_with_text('[{"foodName": "apple", "estimatedWeight": 182, "confidenceScore": 0.93}]')


def _invoke(event, settings, upstream):
    return analyze_handler(event, None, settings=settings, client=upstream)


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "OPTIONS"])
def test_non_post_is_rejected_without_upstream_call(method, make_event, recognition_body, settings, upstream):
    response = _invoke(make_event(recognition_body, method=method, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 405
    upstream.generate_content.assert_not_called()


def test_envelope_is_relayed_unmodified(make_event, recognition_body, recognition_envelope, settings, upstream,
                                        make_response):
    upstream.generate_content.return_value = make_response(200, recognition_envelope)

    response = _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 200
    assert response["body"] == json.dumps(recognition_envelope)
    assert json.loads(response["body"]) == recognition_envelope


def test_non_ascii_model_text_is_not_escaped(make_event, recognition_body, settings, upstream, make_response,
                                             envelope_with_text):
    envelope = envelope_with_text('[{"foodName": "crème brûlée 🍮", "estimatedWeight": 120, "confidenceScore": 0.8}]')
    upstream.generate_content.return_value = make_response(200, envelope)

    response = _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 200
    assert response["body"] == json.dumps(envelope, ensure_ascii=False)
    assert "crème brûlée 🍮" in response["body"]
    assert "\\u" not in response["body"]


def test_request_inlines_image_and_prompt(make_event, recognition_body, recognition_envelope, settings, upstream,
                                          make_response):
    upstream.generate_content.return_value = make_response(200, recognition_envelope)

    _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    model, payload = upstream.generate_content.call_args.args
    assert model == settings.recognition_model
    assert "generationConfig" not in payload
    text, image = payload["contents"][0]["parts"]
    assert "From this specific list ONLY: apple, banana," in text["text"]
    assert image == {"inlineData": {"mimeType": "image/jpeg", "data": IMAGE_DATA}}


def test_declared_mime_type_is_forwarded(make_event, recognition_body, recognition_envelope, settings, upstream,
                                         make_response):
    upstream.generate_content.return_value = make_response(200, recognition_envelope)
    recognition_body["mimeType"] = "image/png"

    _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    _, payload = upstream.generate_content.call_args.args
    assert payload["contents"][0]["parts"][1]["inlineData"]["mimeType"] == "image/png"


@pytest.mark.parametrize("body", [
    {"supportedFoods": ["apple"]},
    {"base64ImageData": IMAGE_DATA},
    {"base64ImageData": IMAGE_DATA, "supportedFoods": []},
    {"base64ImageData": IMAGE_DATA, "supportedFoods": ["apple", "  "]},
    {"base64ImageData": "", "supportedFoods": ["apple"]},
    {"base64ImageData": IMAGE_DATA, "supportedFoods": ["apple"], "mimeType": "text/plain"},
])
def test_incomplete_request_is_client_error(body, make_event, settings, upstream):
    response = _invoke(make_event(body, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 400
    assert "error" in json.loads(response["body"])
    upstream.generate_content.assert_not_called()


def test_server_error_is_not_retried(make_event, recognition_body, settings, upstream, make_response):
    upstream.generate_content.return_value = make_response(503, text="overloaded")

    response = _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "API error 503: overloaded"}
    upstream.generate_content.assert_called_once()


def test_transport_failure_is_surfaced(make_event, recognition_body, settings, upstream):
    upstream.generate_content.side_effect = UpstreamTransportError("Upstream request failed: connection reset")

    response = _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Upstream request failed: connection reset"}
    upstream.generate_content.assert_called_once()


def test_non_json_success_body_is_internal_error(make_event, recognition_body, settings, upstream, make_response):
    upstream.generate_content.return_value = make_response(200, text="<html>proxy error</html>")

    response = _invoke(make_event(recognition_body, path="/analyze"), settings, upstream)

    assert response["statusCode"] == 500
    assert "not valid JSON" in json.loads(response["body"])["error"]
