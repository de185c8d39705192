# backend/market_api/analysis/services/model_selector.py
"""
Gemini 모델 자동 감지

GEMINI_MODEL이 지정되면 그대로 쓰고, 아니면 models 목록에서 generateContent를 지원하는
모델을 선호 순서대로 고른다. 고른 결과는 TTL 동안 ModelCache에 보관한다.
"""

import logging
import time
from typing import Callable, List, Optional

import httpx

from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

MODEL_PREFIX = "models/"
GENERATE_METHOD = "generateContent"

PREFERRED_MODELS = [
    "gemini-1.5-flash",
    "gemini-1.5-flash-002",
    "gemini-1.5-flash-001",
    "gemini-1.5-flash-8b",
    "gemini-1.5-pro",
    "gemini-1.5-pro-002",
    "gemini-1.5-pro-001",
    "gemini-1.0-pro",
    "gemini-pro",
]
# 선호 목록에 없을 때: 버전 토큰 + flash 조합 > 최신 메이저 계열이 아닌 모델 > 첫 번째 모델
PREFERRED_VERSION_TOKEN = "1.5"
NEWEST_FAMILY_PREFIX = "gemini-2.0"


class ModelCache:
    """프로세스 내 모델명 캐시. 마지막 set이 이긴다 (동시성 보호 불필요)"""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.model_name: Optional[str] = None
        self.cached_at: float = 0.0

    def get(self) -> Optional[str]:
        if self.model_name and self.clock() - self.cached_at < self.ttl_seconds:
            return self.model_name
        return None

    def set(self, value: str, timestamp: Optional[float] = None) -> None:
        self.model_name = value
        self.cached_at = self.clock() if timestamp is None else timestamp

    def clear(self) -> None:
        self.model_name = None
        self.cached_at = 0.0


def generate_candidates(models_json) -> List[str]:
    """models 목록 응답에서 generateContent 지원 모델명만 추려 'models/' 접두사를 제거"""
    models = models_json.get("models") if isinstance(models_json, dict) else None
    if not isinstance(models, list):
        return []

    candidates = []
    for model in models:
        if not isinstance(model, dict):
            continue
        name = str(model.get("name") or "")
        methods = model.get("supportedGenerationMethods")
        if not isinstance(methods, list):
            methods = []
        if name.startswith(MODEL_PREFIX) and GENERATE_METHOD in methods:
            candidates.append(name[len(MODEL_PREFIX):])
    return candidates


def pick_model(candidates: List[str]) -> Optional[str]:
    for preferred in PREFERRED_MODELS:
        if preferred in candidates:
            return preferred
    for name in candidates:
        if PREFERRED_VERSION_TOKEN in name and "flash" in name:
            return name
    for name in candidates:
        if not name.startswith(NEWEST_FAMILY_PREFIX):
            return name
    return candidates[0] if candidates else None


class ModelSelector:
    def __init__(self, client: GeminiClient, cache: ModelCache, fallback_model: str):
        self.client = client
        self.cache = cache
        self.fallback_model = fallback_model

    async def select(self, api_key: str, forced_model: str | None = None) -> Optional[str]:
        """사용할 모델명을 반환. 결정할 수 없으면 None"""
        forced = (forced_model or "").strip()
        if forced:
            return forced

        cached = self.cache.get()
        if cached:
            return cached

        fallback = self.fallback_model or None
        try:
            result = await self.client.list_models(api_key)
        except httpx.HTTPError as e:
            logger.warning(f"Model list request failed, using fallback {fallback!r}: {e}")
            return fallback

        if not result.ok:
            logger.warning(f"Model list returned HTTP {result.status}, using fallback {fallback!r}")
            return fallback

        candidates = generate_candidates(result.parsed_json)
        if not candidates:
            logger.warning("No generateContent-capable models listed, using fallback")
            return fallback

        chosen = pick_model(candidates) or fallback
        if chosen:
            self.cache.set(chosen)
            logger.info(f"Auto-selected Gemini model: {chosen} (from {len(candidates)} candidates)")
        return chosen
