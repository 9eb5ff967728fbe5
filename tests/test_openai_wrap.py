import pytest
import requests

from fitscore.services import openai_wrap
from fitscore.services.openai_wrap import AnalysisError, analyze_profile, build_prompt, extract_text


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", headers=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.headers = headers or {}

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def keyed_app(app):
    app.config.update(OPENAI_API_KEY="sk-test", OPENAI_MAX_ATTEMPTS=3)
    return app


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(openai_wrap.time, "sleep", lambda s: None)


def test_build_prompt_mentions_profile():
    prompt = build_prompt("Ana", "Senior", ["Docker", "Next.js"], "Led a platform team.")
    assert "Seniority: Senior" in prompt
    assert "Docker, Next.js" in prompt
    assert prompt.endswith("Led a platform team.")


def test_extract_text_shapes():
    assert extract_text({"output_text": " hi "}) == "hi"
    payload = {"output": [{"content": [{"type": "output_text", "text": "line 1"}, "line 2"]}]}
    assert extract_text(payload) == "line 1\nline 2"
    assert extract_text(None) == ""


def test_analyze_profile_returns_text(keyed_app, monkeypatch):
    calls = []

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append((url, headers, json, timeout))
        return FakeResponse(payload={"output_text": "Solid candidate."})
    monkeypatch.setattr(openai_wrap.requests, "post", fake_post)

    assert analyze_profile("Ana", "Mid", ["Docker"], "summary") == "Solid candidate."
    url, headers, body, timeout = calls[0]
    assert url == openai_wrap.RESPONSES_URL
    assert headers["Authorization"] == "Bearer sk-test"
    assert body["model"] == "gpt-4o-mini"
    assert timeout == 30


def test_analyze_profile_retries_transient_errors(keyed_app, monkeypatch, no_sleep):
    responses = [FakeResponse(status_code=503), FakeResponse(status_code=429, headers={"Retry-After": "0"}),
                 FakeResponse(payload={"output_text": "third time"})]
    monkeypatch.setattr(openai_wrap.requests, "post", lambda *a, **kw: responses.pop(0))
    assert analyze_profile("Ana", "Mid", [], "summary") == "third time"


def test_analyze_profile_gives_up_after_max_attempts(keyed_app, monkeypatch, no_sleep):
    def down(*a, **kw):
        raise requests.exceptions.ConnectionError("refused")
    monkeypatch.setattr(openai_wrap.requests, "post", down)
    with pytest.raises(AnalysisError):
        analyze_profile("Ana", "Mid", [], "summary")


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=401, text="bad key"),
    FakeResponse(status_code=429, text='{"error": {"code": "insufficient_quota"}}'),
    FakeResponse(payload={"output": []}),
    FakeResponse(payload=None),
])
def test_analyze_profile_errors(keyed_app, monkeypatch, response):
    monkeypatch.setattr(openai_wrap.requests, "post", lambda *a, **kw: response)
    with pytest.raises(AnalysisError):
        analyze_profile("Ana", "Mid", [], "summary")
