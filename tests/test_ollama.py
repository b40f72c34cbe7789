from __future__ import annotations

from typing import Any

import pytest
import requests

from lexicon_oracle.config import OllamaConfig
from lexicon_oracle.errors import ExternalGeneratorError
from lexicon_oracle.ollama import USER_AGENT, OllamaClient


class FakeResponse:
    def __init__(self, payload: Any = None, status: int = 200, invalid_json: bool = False) -> None:
        self.payload = payload
        self.status_code = status
        self.invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    def __init__(self, response: FakeResponse | Exception) -> None:
        self.headers: dict[str, str] = {}
        self.response = response
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, json: dict[str, Any], timeout: float) -> FakeResponse:
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _client(response: FakeResponse | Exception) -> tuple[OllamaClient, FakeSession]:
    session = FakeSession(response)
    config = OllamaConfig(host="http://ollama.test:11434/", model="llama3.2:3b", timeout=5.0)
    return OllamaClient(config, session=session), session


def test_generate_posts_prompt_and_returns_text() -> None:
    client, session = _client(FakeResponse({"response": "  doom and fate \n", "done": True}))
    text = client.generate("mistral", "Speak.", 0.4)
    assert text == "doom and fate"
    request = session.requests[0]
    assert request["url"] == "http://ollama.test:11434/api/generate"
    assert request["timeout"] == 5.0
    assert request["json"] == {
        "model": "mistral",
        "prompt": "Speak.",
        "stream": False,
        "options": {"temperature": 0.4},
    }
    assert session.headers["User-Agent"] == USER_AGENT


def test_generate_falls_back_to_configured_model() -> None:
    client, session = _client(FakeResponse({"response": "doom"}))
    client.generate("", "Speak.", 0.7)
    assert session.requests[0]["json"]["model"] == "llama3.2:3b"


@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("timed out"),
        FakeResponse({"error": "model not found"}, status=404),
        FakeResponse(invalid_json=True),
        FakeResponse(["not", "a", "mapping"]),
        FakeResponse({"error": "model 'x' not found"}),
        FakeResponse({"done": True}),
    ],
)
def test_generate_wraps_failures(response: FakeResponse | Exception) -> None:
    client, _ = _client(response)
    with pytest.raises(ExternalGeneratorError):
        client.generate("llama3.2:3b", "Speak.", 0.7)
