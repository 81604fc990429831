from unittest import mock

import pytest
import requests

import gemini_client
from errors import UpstreamError


def _candidate(*texts):
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": t} for t in texts]}, "finishReason": "STOP"}
        ]
    }


@pytest.fixture
def mock_post():
    with mock.patch("gemini_client.requests.post") as post:
        yield post


def test_request_shape(mock_post, fake_response):
    mock_post.return_value = fake_response(json_data=_candidate('{"ok": true}'))

    text = gemini_client.generate_content(
        "排盘",
        api_key="k",
        model_name="gemini-test",
        system_instruction="只输出 JSON",
        timeout=7,
        base_url="https://api.example.com/v1beta/",
    )

    assert text == '{"ok": true}'
    args, kwargs = mock_post.call_args
    assert args == ("https://api.example.com/v1beta/models/gemini-test:generateContent",)
    assert kwargs["headers"]["x-goog-api-key"] == "k"
    assert kwargs["timeout"] == 7
    body = kwargs["json"]
    assert body["contents"] == [{"role": "user", "parts": [{"text": "排盘"}]}]
    assert body["systemInstruction"] == {"parts": [{"text": "只输出 JSON"}]}
    assert body["generationConfig"] == {"responseMimeType": "application/json"}


def test_system_instruction_is_optional(mock_post, fake_response):
    mock_post.return_value = fake_response(json_data=_candidate("{}"))
    gemini_client.generate_content("排盘", api_key="k", model_name="m")
    assert "systemInstruction" not in mock_post.call_args.kwargs["json"]


def test_text_parts_are_concatenated(mock_post, fake_response):
    mock_post.return_value = fake_response(json_data=_candidate('{"a":', ' 1}'))
    assert gemini_client.generate_content("p", api_key="k", model_name="m") == '{"a": 1}'


def test_api_error_message_is_surfaced(mock_post, fake_response):
    mock_post.return_value = fake_response(
        status_code=400,
        reason="Bad Request",
        json_data={"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}},
    )
    with pytest.raises(UpstreamError) as excinfo:
        gemini_client.generate_content("p", api_key="bad", model_name="m")
    assert excinfo.value.message == "API key not valid."
    assert excinfo.value.status_code == 400


def test_http_error_without_json_body(mock_post, fake_response):
    mock_post.return_value = fake_response(status_code=503, reason="Service Unavailable", text="<html>")
    with pytest.raises(UpstreamError, match="503 Service Unavailable"):
        gemini_client.generate_content("p", api_key="k", model_name="m")


def test_network_error(mock_post):
    mock_post.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(UpstreamError, match="connection refused"):
        gemini_client.generate_content("p", api_key="k", model_name="m")


def test_no_candidates(mock_post, fake_response):
    mock_post.return_value = fake_response(json_data={"promptFeedback": {"blockReason": "SAFETY"}})
    with pytest.raises(UpstreamError, match="SAFETY"):
        gemini_client.generate_content("p", api_key="k", model_name="m")


def test_candidate_without_text(mock_post, fake_response):
    mock_post.return_value = fake_response(json_data={"candidates": [{"finishReason": "MAX_TOKENS"}]})
    with pytest.raises(UpstreamError, match="Empty response"):
        gemini_client.generate_content("p", api_key="k", model_name="m")
