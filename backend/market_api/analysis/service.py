# backend/market_api/analysis/service.py
"""
시장 분석 요청 처리

validate -> select_model -> generate_primary -> repair_if_needed -> fallback_if_needed -> respond
"""

import logging
from typing import List, Tuple

import httpx

from ..config import Config
from ..exceptions import ClientInputError, ConfigurationError, UpstreamCallError, UpstreamUnavailable
from .schemas import AnalysisMeta, AnalysisRequest, AnalysisResponse
from .services.error_hints import NO_MODEL_HINT, extract_retry_after_seconds, upstream_error_hint
from .services.fallback_table import fallback_for
from .services.gemini_client import GeminiClient
from .services.keyword_normalizer import is_compliant, normalize_keywords, normalize_list
from .services.model_selector import ModelSelector
from .services.payload_parser import parse_payload
from .services.prompt_builder import build_primary_prompt, build_repair_prompt, expected_local_language

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 10
MAX_PLATFORMS = 10


def validate_request(body: AnalysisRequest, config: Config) -> Tuple[str, str, str]:
    """입력값과 API 키를 검증하고 (product, country, api_key)를 반환"""
    product = body.product.strip()
    country = body.country.strip()

    if not product or not country:
        raise ClientInputError("Missing product or country")
    if len(product) > config.MAX_PRODUCT_LENGTH or len(country) > config.MAX_COUNTRY_LENGTH:
        raise ClientInputError("Input too long")

    api_key = (config.GEMINI_API_KEY or "").strip()
    if not api_key:
        raise ConfigurationError("Missing GEMINI_API_KEY")
    return product, country, api_key


async def repair_keywords(
    client: GeminiClient,
    api_key: str,
    model: str,
    keywords: List[str],
    country: str,
    temperature: float,
) -> List[str]:
    """키워드 형식 보정 호출. 실패하면 빈 목록 (요청 전체를 실패시키지 않음)"""
    prompt = build_repair_prompt(keywords, country)
    try:
        result = await client.call_model(api_key, model, prompt, temperature)
    except httpx.HTTPError as e:
        logger.warning(f"Keyword repair call failed: {e}")
        return []

    if not result.ok:
        logger.warning(f"Keyword repair returned HTTP {result.status}; keeping previous keywords")
        return []

    payload = parse_payload(result.raw_text, result.parsed_json)
    return normalize_keywords(payload.keywords, country)


async def analyze_market(
    body: AnalysisRequest,
    *,
    config: Config,
    client: GeminiClient,
    selector: ModelSelector,
) -> AnalysisResponse:
    product, country, api_key = validate_request(body, config)

    forced = config.forced_model
    model = await selector.select(api_key, forced)
    if not model:
        raise UpstreamUnavailable("No available model for generateContent", hint=NO_MODEL_HINT)

    logger.info(f"Analyzing market: product={product!r}, country={country!r}, model={model}")

    # 1) 1차 생성
    first = await client.call_model(api_key, model, build_primary_prompt(product, country), config.PRIMARY_TEMPERATURE)
    if not first.ok:
        raise UpstreamCallError(
            "Gemini API error",
            upstream_status=first.status,
            model=model,
            details=first.details,
            hint=upstream_error_hint(first.details),
            retry_after_seconds=extract_retry_after_seconds(first.details),
        )

    payload = parse_payload(first.raw_text, first.parsed_json)
    keywords = normalize_keywords(payload.keywords, country)
    platforms = normalize_list(payload.platforms)[:MAX_PLATFORMS]
    strategy = payload.strategy.strip() if isinstance(payload.strategy, str) else ""

    # 2) 형식 보정
    if not is_compliant(keywords, country):
        logger.info(f"Keywords not bilingual-compliant ({len(keywords)} valid); running repair pass")
        repaired = await repair_keywords(client, api_key, model, keywords, country, config.REPAIR_TEMPERATURE)
        if repaired:
            keywords = repaired

    # 3) 고정 대체표
    if not is_compliant(keywords, country):
        fallback = fallback_for(product, country)
        if fallback:
            logger.info(f"Using fallback keyword table for product={product!r}, country={country!r}")
            keywords = fallback
        else:
            logger.warning("Keywords still non-compliant and no fallback entry available")

    return AnalysisResponse(
        keywords=keywords[:MAX_KEYWORDS],
        platforms=platforms,
        strategy=strategy,
        meta=AnalysisMeta(
            model_used=model,
            forced_model=bool(forced),
            worker_version=config.WORKER_VERSION,
            keyword_bilingual_complete=is_compliant(keywords, country),
            keyword_local_language=expected_local_language(country),
        ),
    )
