import json
import os
import sys
from pathlib import Path

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

# 테스트용 환경 변수 세팅 (market_api 모듈 임포트 전에 적용)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# sys.path에 backend 추가하여 'market_api' 패키지 검색 가능하게 함
repo_root = Path(__file__).resolve().parents[2]
backend_path = repo_root / "backend"
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from market_api.main import app
from market_api.config import Config
from market_api.analysis.dependencies import get_gemini_client, get_settings
from market_api.analysis.services.gemini_client import GeminiClient

TEST_API_BASE = "https://gemini.test/v1beta"


def gemini_response(payload) -> dict:
    """generateContent 표준 응답 구조로 감싼다 (payload가 dict면 JSON 텍스트로 직렬화)"""
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def models_listing(*names: str) -> dict:
    return {
        "models": [
            {"name": f"models/{name}", "supportedGenerationMethods": ["generateContent", "countTokens"]}
            for name in names
        ]
    }


class FakeGemini:
    """
    Gemini REST API 대역.
    generate 응답은 큐에 (status, body) 또는 예외 인스턴스로 쌓아 둔다.
    """

    def __init__(self):
        self.models_status = 200
        self.models_body = models_listing("gemini-1.5-flash", "gemini-1.5-pro")
        self.generate_queue = []
        self.requests: list[httpx.Request] = []

    def queue(self, status: int, body) -> None:
        self.generate_queue.append((status, body))

    def queue_error(self, exc: Exception) -> None:
        self.generate_queue.append(exc)

    @property
    def generate_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(":generateContent")]

    @property
    def list_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET" and r.url.path.endswith("/models")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and request.url.path.endswith("/models"):
            return httpx.Response(self.models_status, json=self.models_body)

        if not self.generate_queue:
            raise AssertionError(f"Unexpected generate call: {request.url}")
        item = self.generate_queue.pop(0)
        if isinstance(item, Exception):
            raise item
        status, body = item
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def test_settings():
    return Config(
        _env_file=None,
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL=None,
        GEMINI_API_BASE=TEST_API_BASE,
        CORS_ORIGINS=["*"],
    )


@pytest.fixture()
def fake_gemini():
    return FakeGemini()


@pytest.fixture()
def override_dependencies(test_settings, fake_gemini):
    async def _get_gemini_client():
        async with httpx.AsyncClient(transport=fake_gemini.transport()) as http_client:
            yield GeminiClient(http_client, TEST_API_BASE)

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_gemini_client] = _get_gemini_client
    app.state.model_cache.clear()
    yield
    app.dependency_overrides.clear()
    app.state.model_cache.clear()


@pytest.fixture()
async def client(override_dependencies):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
