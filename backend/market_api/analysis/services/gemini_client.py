# backend/market_api/analysis/services/gemini_client.py
"""
Gemini REST API 호출 모듈

응답 상태와 관계없이 본문을 텍스트로 읽어 UpstreamResult로 돌려준다.
non-2xx는 예외가 아니라 ok=False 결과이며, 네트워크 오류(httpx.HTTPError)만 호출자에게 전파된다.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

# API 키는 쿼리스트링이 아닌 헤더로만 전달
API_KEY_HEADER = "x-goog-api-key"


@dataclass(frozen=True)
class UpstreamResult:
    ok: bool
    status: int
    raw_text: str
    parsed_json: Optional[Any]
    details: str


def extract_google_error_message(raw: str) -> Optional[str]:
    """{"error": {"message": ...}} 형식의 오류 본문에서 메시지만 추출"""
    try:
        obj = json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None
    if not isinstance(obj, dict):
        return None
    error = obj.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


def _to_result(response: httpx.Response) -> UpstreamResult:
    raw = response.text or ""
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        parsed = None
    return UpstreamResult(
        ok=response.is_success,
        status=response.status_code,
        raw_text=raw,
        parsed_json=parsed,
        details=extract_google_error_message(raw) or raw,
    )


class GeminiClient:
    """generativelanguage.googleapis.com v1beta 엔드포인트용 얇은 비동기 클라이언트"""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def list_models(self, api_key: str) -> UpstreamResult:
        response = await self.http_client.get(f"{self.base_url}/models", headers={API_KEY_HEADER: api_key})
        logger.info(f"Gemini list models -> HTTP {response.status_code}")
        return _to_result(response)

    async def call_model(self, api_key: str, model: str, prompt: str, temperature: float) -> UpstreamResult:
        url = f"{self.base_url}/models/{quote(model, safe='')}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "responseMimeType": "application/json",
            },
        }
        logger.debug(f"Gemini prompt preview: {prompt[:300]}...")
        response = await self.http_client.post(
            url,
            json=body,
            headers={"Content-Type": "application/json", API_KEY_HEADER: api_key},
        )
        result = _to_result(response)
        logger.info(f"Gemini generateContent model={model} temperature={temperature} -> HTTP {result.status}")
        if not result.ok:
            logger.warning(f"Gemini error response ({result.status}): {result.details[:500]}")
        return result
