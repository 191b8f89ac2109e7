# tests/unit/test_openai_adapter.py

from __future__ import annotations
import sys
from pathlib import Path
import httpx
import openai
import pytest

# Make "src" importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

# Import the module, then monkeypatch its OpenAI class
import chatlink.providers.openai_adapter as oa  # type: ignore
from chatlink.core.errors import FaultCategory, ProviderHttpFailure, TransportFailure

_REQ = httpx.Request("POST", "https://api.openai.test/v1/chat/completions")


# -------- Fakes to replace the OpenAI SDK --------

class _FakeMessage:
    def __init__(self, content: str) -> None:
        self.content = content

class _FakeChoiceMsg:
    def __init__(self, content: str) -> None:
        self.message = _FakeMessage(content)

class _FakeResponse:
    def __init__(self, content: str) -> None:
        self.choices = [_FakeChoiceMsg(content)]

class _FakeCompletions:
    def __init__(self, parent) -> None:
        self.parent = parent
    def create(self, **kwargs):
        self.parent.calls.append(kwargs)
        if self.parent.error is not None:
            raise self.parent.error
        return _FakeResponse("hello world")

class _FakeChat:
    def __init__(self, parent) -> None:
        self.completions = _FakeCompletions(parent)

class _FakeOpenAI:
    error = None
    instances: list = []

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.calls: list = []
        self.chat = _FakeChat(self)
        _FakeOpenAI.instances.append(self)

    def close(self) -> None:
        pass


@pytest.fixture
def fake_openai(monkeypatch):
    _FakeOpenAI.error = None
    _FakeOpenAI.instances = []
    monkeypatch.setattr(oa, "OpenAI", _FakeOpenAI, raising=True)
    return _FakeOpenAI


def test_openai_adapter_chat(fake_openai):
    adapter = oa.OpenAIAdapter(model="test-model", api_key="sk-test", timeout=5.0, params={"temperature": 0.1})

    out = adapter.chat([{"role": "user", "content": "hi"}])
    assert out == {"content": "hello world"}
    assert adapter.model == "test-model"

    client = fake_openai.instances[-1]
    # SDK retries off, timeout passed through
    assert client.kwargs["max_retries"] == 0
    assert client.kwargs["timeout"] == 5.0
    assert client.calls[0]["temperature"] == 0.1


def test_status_error_maps_to_http_failure_with_raw_body(fake_openai):
    body = '{"error": {"message": "Rate limit reached", "type": "requests", "code": "rate_limit_exceeded"}}'
    response = httpx.Response(429, content=body.encode("utf-8"), request=_REQ)
    fake_openai.error = openai.RateLimitError("Rate limit reached", response=response, body=None)

    adapter = oa.OpenAIAdapter(model="m", api_key="sk-test")
    with pytest.raises(ProviderHttpFailure) as ei:
        adapter.chat([{"role": "user", "content": "hi"}])
    assert ei.value.status_code == 429
    assert str(ei.value) == body


def test_timeout_maps_to_transport_failure(fake_openai):
    fake_openai.error = openai.APITimeoutError(request=_REQ)

    adapter = oa.OpenAIAdapter(model="m", api_key="sk-test", timeout=0.5)
    with pytest.raises(TransportFailure) as ei:
        adapter.chat([{"role": "user", "content": "hi"}])
    assert ei.value.category is FaultCategory.TIMEOUT
    assert "timed out" in ei.value.message


def test_connection_error_maps_to_transport_failure(fake_openai):
    fake_openai.error = openai.APIConnectionError(request=_REQ)

    adapter = oa.OpenAIAdapter(model="m", api_key="sk-test")
    with pytest.raises(TransportFailure) as ei:
        adapter.chat([{"role": "user", "content": "hi"}])
    assert ei.value.category is FaultCategory.CONNECTION


def test_unrelated_sdk_errors_pass_through(fake_openai):
    fake_openai.error = openai.OpenAIError("misconfigured")

    adapter = oa.OpenAIAdapter(model="m", api_key="sk-test")
    with pytest.raises(openai.OpenAIError) as ei:
        adapter.chat([{"role": "user", "content": "hi"}])
    assert not isinstance(ei.value, (ProviderHttpFailure, TransportFailure))
