"""Tests for the Ollama oracle client and the bounded oracle call."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from feedback_intel.utils.config import OllamaConfig
from feedback_intel.utils.ollama_client import OllamaClient, OracleError, consult_oracle


def _client(handler) -> OllamaClient:
    return OllamaClient(
        base_url="http://ollama.test:11434/",
        model="gemma:2b",
        temperature=0.0,
        transport=httpx.MockTransport(handler),
    )


def test_complete_posts_generate_request() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "  Hostel \n", "done": True})

    reply = asyncio.run(_client(handler).complete("Classify this", timeout_seconds=5))

    assert reply == "Hostel"
    assert seen["url"] == "http://ollama.test:11434/api/generate"
    assert seen["body"] == {
        "model": "gemma:2b",
        "prompt": "Classify this",
        "stream": False,
        "options": {"temperature": 0.0},
    }


def test_json_mode_sets_format() -> None:
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"response": '{"matched": false}'})

    reply = asyncio.run(_client(handler).complete("Match this", timeout_seconds=5, json_mode=True))

    assert reply == '{"matched": false}'
    assert bodies[0]["format"] == "json"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="model not loaded"),
        httpx.Response(404, json={"error": "model 'gemma:2b' not found"}),
        httpx.Response(200, text="<html>proxy error</html>"),
        httpx.Response(200, json={"done": True}),
        httpx.Response(200, json={"response": None}),
        httpx.Response(200, json=["Hostel"]),
    ],
)
def test_bad_responses_raise_oracle_error(response: httpx.Response) -> None:
    client = _client(lambda request: response)

    with pytest.raises(OracleError):
        asyncio.run(client.complete("prompt", timeout_seconds=5))


def test_transport_errors_raise_oracle_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(OracleError):
        asyncio.run(_client(handler).complete("prompt", timeout_seconds=5))


def test_from_config() -> None:
    client = OllamaClient.from_config(OllamaConfig(base_url="http://gpu-box:11434", model="llama3", temperature=0.2))

    assert client.base_url == "http://gpu-box:11434"
    assert client.model == "llama3"
    assert client.temperature == 0.2


def test_consult_oracle_without_oracle() -> None:
    with pytest.raises(OracleError):
        asyncio.run(consult_oracle(None, "prompt", 1.0))


def test_consult_oracle_enforces_deadline(stub_oracle) -> None:
    oracle = stub_oracle(reply="late", delay=1.0)

    with pytest.raises(OracleError):
        asyncio.run(consult_oracle(oracle, "prompt", 0.05))


def test_consult_oracle_wraps_unexpected_errors(stub_oracle) -> None:
    with pytest.raises(OracleError) as excinfo:
        asyncio.run(consult_oracle(stub_oracle(error=KeyError("response")), "prompt", 1.0))

    assert isinstance(excinfo.value.__cause__, KeyError)


def test_consult_oracle_passes_json_mode(stub_oracle) -> None:
    oracle = stub_oracle(reply="{}")

    assert asyncio.run(consult_oracle(oracle, "prompt", 1.0, json_mode=True)) == "{}"
    assert oracle.json_modes == [True]


def test_consult_oracle_strips_reply(stub_oracle) -> None:
    assert asyncio.run(consult_oracle(stub_oracle(reply="  Hostel \n"), "prompt", 1.0)) == "Hostel"
    assert asyncio.run(consult_oracle(stub_oracle(reply=" \n "), "prompt", 1.0)) == ""


def test_consult_oracle_rejects_non_text_reply(stub_oracle) -> None:
    with pytest.raises(OracleError):
        asyncio.run(consult_oracle(stub_oracle(reply=None), "prompt", 1.0))
