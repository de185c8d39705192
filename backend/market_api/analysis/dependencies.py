# backend/market_api/analysis/dependencies.py
from typing import Annotated, AsyncGenerator

import httpx
from fastapi import Depends, Request

from ..config import Config, settings
from .services.gemini_client import GeminiClient
from .services.model_selector import ModelCache, ModelSelector


def get_settings() -> Config:
    return settings


SettingsDep = Annotated[Config, Depends(get_settings)]


async def get_gemini_client(request: Request, config: SettingsDep) -> AsyncGenerator[GeminiClient, None]:
    # lifespan에서 만든 공용 클라이언트를 우선 사용, 없으면 요청 단위로 생성 후 정리
    http_client = getattr(request.app.state, "http_client", None)
    if http_client is not None:
        yield GeminiClient(http_client, config.GEMINI_API_BASE)
        return
    async with httpx.AsyncClient(timeout=config.GEMINI_TIMEOUT_SECONDS) as client:
        yield GeminiClient(client, config.GEMINI_API_BASE)


GeminiClientDep = Annotated[GeminiClient, Depends(get_gemini_client)]


def get_model_cache(request: Request, config: SettingsDep) -> ModelCache:
    cache = getattr(request.app.state, "model_cache", None)
    if cache is None:
        cache = ModelCache(ttl_seconds=config.MODEL_CACHE_TTL_SECONDS)
        request.app.state.model_cache = cache
    return cache


def get_model_selector(
    client: GeminiClientDep,
    config: SettingsDep,
    cache: ModelCache = Depends(get_model_cache),
) -> ModelSelector:
    return ModelSelector(client, cache, config.GEMINI_FALLBACK_MODEL)


ModelSelectorDep = Annotated[ModelSelector, Depends(get_model_selector)]
