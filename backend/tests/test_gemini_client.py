import json
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import pytest

from conftest import TEST_API_BASE

from market_api.analysis.services.gemini_client import (
    API_KEY_HEADER,
    GeminiClient,
    extract_google_error_message,
)

pytestmark = pytest.mark.anyio


@asynccontextmanager
async def _client(handler) -> AsyncIterator[GeminiClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        yield GeminiClient(http_client, TEST_API_BASE)


async def test_call_model_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"candidates": []})

    async with _client(handler) as client:
        result = await client.call_model("secret", "gemini-1.5-flash", "hello", 0.2)

    request = seen["request"]
    body = json.loads(request.content)
    assert request.method == "POST"
    assert request.url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
    assert request.headers[API_KEY_HEADER] == "secret"
    assert "secret" not in str(request.url)
    assert body["contents"] == [{"parts": [{"text": "hello"}]}]
    assert body["generationConfig"] == {"temperature": 0.2, "responseMimeType": "application/json"}
    assert result.ok and result.status == 200
    assert result.parsed_json == {"candidates": []}


async def test_error_envelope_does_not_raise():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"code": 429, "message": "Quota exceeded"}})

    async with _client(handler) as client:
        result = await client.call_model("k", "m", "p", 0.1)

    assert not result.ok
    assert result.status == 429
    assert result.details == "Quota exceeded"
    assert result.parsed_json["error"]["code"] == 429


async def test_non_json_body_keeps_raw_text_as_details():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream connect error")

    async with _client(handler) as client:
        result = await client.call_model("k", "m", "p", 0.1)

    assert result.parsed_json is None
    assert result.raw_text == "upstream connect error"
    assert result.details == "upstream connect error"


async def test_transport_error_propagates():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(httpx.ConnectError):
        async with _client(handler) as client:
            await client.call_model("k", "m", "p", 0.1)


async def test_list_models():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/v1beta/models"
        assert request.headers[API_KEY_HEADER] == "k"
        return httpx.Response(200, json={"models": []})

    async with _client(handler) as client:
        result = await client.list_models("k")
    assert result.ok and result.parsed_json == {"models": []}


def test_extract_google_error_message():
    assert extract_google_error_message('{"error": {"message": "bad"}}') == "bad"
    assert extract_google_error_message('{"error": "bad"}') is None
    assert extract_google_error_message("[]") is None
    assert extract_google_error_message("plain") is None
