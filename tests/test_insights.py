import pytest
import requests

from behavior_engine import insights
from behavior_engine.insights import InsightsClient, InsightsError, build_prompt, request_insights
from helpers import mood, stimulus


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.reason = reason
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def fake_post(response, calls):
    def _post(url, params=None, json=None, timeout=None):
        calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        return response

    return _post


def test_build_prompt_lists_each_log():
    events = [mood("Anxious", "10:30 AM", note="Loud noise"), stimulus("Auditory", "High", "10:00 AM")]
    prompt = build_prompt("Liam Carter", events)
    assert "Student: Liam Carter" in prompt
    assert "- 10:30 AM: Feeling - Anxious, Notes: Loud noise" in prompt
    assert "- 10:00 AM: Sensory - Auditory (Intensity: High)" in prompt
    assert prompt.endswith("Keep your response concise and practical for a busy teacher.")


def test_generate_returns_candidate_text(monkeypatch):
    calls = []
    payload = {"candidates": [{"content": {"parts": [{"text": "1. Offer headphones"}]}}]}
    monkeypatch.setattr(insights.requests, "post", fake_post(FakeResponse(payload=payload), calls))

    client = InsightsClient(api_key="secret", model="test-model")
    assert request_insights("Liam", [mood("Happy", 1)], client) == "1. Offer headphones"
    assert len(calls) == 1
    assert calls[0]["url"].endswith("/models/test-model:generateContent")
    assert calls[0]["params"] == {"key": "secret"}


@pytest.mark.parametrize(
    "status, expected",
    [
        (400, "Invalid API key"),
        (429, "rate limit"),
        (503, "API request failed: 503"),
    ],
)
def test_http_errors_surface_without_retry(monkeypatch, status, expected):
    calls = []
    monkeypatch.setattr(insights.requests, "post", fake_post(FakeResponse(status, reason="Err"), calls))
    with pytest.raises(InsightsError, match=expected):
        InsightsClient(api_key="secret").generate("prompt")
    assert len(calls) == 1


def test_error_payload_and_unexpected_shape(monkeypatch):
    monkeypatch.setattr(insights.requests, "post", fake_post(FakeResponse(payload={"error": {"message": "quota"}}), []))
    with pytest.raises(InsightsError, match="quota"):
        InsightsClient(api_key="secret").generate("prompt")

    monkeypatch.setattr(insights.requests, "post", fake_post(FakeResponse(payload={"foo": 1}), []))
    with pytest.raises(InsightsError, match="Unexpected response format"):
        InsightsClient(api_key="secret").generate("prompt")


def test_transport_failure(monkeypatch):
    def _post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("down")

    monkeypatch.setattr(insights.requests, "post", _post)
    with pytest.raises(InsightsError, match="down"):
        InsightsClient(api_key="secret").generate("prompt")


def test_no_logs_and_no_key():
    with pytest.raises(InsightsError, match="No logs"):
        request_insights("Liam", [], InsightsClient(api_key="secret"))
    with pytest.raises(InsightsError):
        InsightsClient(api_key="")


def test_client_from_env(monkeypatch):
    monkeypatch.setenv("BEHAVIOR_ENGINE_INSIGHTS_API_KEY", "k")
    monkeypatch.setenv("BEHAVIOR_ENGINE_INSIGHTS_URL", "http://localhost:9999/v1/")
    client = InsightsClient.from_env()
    assert client.endpoint == "http://localhost:9999/v1/models/gemini-1.5-flash:generateContent"
