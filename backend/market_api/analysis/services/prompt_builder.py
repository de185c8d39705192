# backend/market_api/analysis/services/prompt_builder.py
"""
프롬프트 생성 모듈
시장 분석(1차 생성)과 키워드 형식 보정(repair)용 프롬프트를 만든다.
두 함수 모두 부수효과가 없는 순수 함수.
"""

import json
from typing import List

from .countries import CountryBucket, country_bucket

LOCAL_LANGUAGE_LABELS = {
    CountryBucket.CHINA: "Simplified Chinese",
    CountryBucket.VIETNAM: "Vietnamese",
}
GENERIC_LOCAL_LANGUAGE = "Local language"


def expected_local_language(country: str | None) -> str:
    """국가명으로부터 키워드 괄호 안에 들어가야 할 현지 언어 라벨을 반환"""
    return LOCAL_LANGUAGE_LABELS.get(country_bucket(country), GENERIC_LOCAL_LANGUAGE)


def build_primary_prompt(product: str, country: str) -> str:
    local_lang = expected_local_language(country)

    prompt_parts = [
        "You are a market analyst for global commerce.",
        f'Analyze market potential for product "{product}" in "{country}".',
        "",
        "Return JSON ONLY. No markdown. No explanations.",
        "Output schema:",
        "{",
        '  "keywords": [',
        f'    {{ "ko": "Korean keyword", "local": "{local_lang} keyword" }}',
        "  ],",
        '  "platforms": ["string", "..."],',
        '  "strategy": "string (Korean, one sentence)"',
        "}",
        "",
        "Rules:",
        "- keywords: exactly 6 items",
        "- each keyword MUST include ko + local",
        f"- local MUST be {local_lang}",
        "- no plain Korean-only keyword items",
        "- platforms: up to 10 items",
        "- strategy: Korean one sentence",
    ]
    return "\n".join(prompt_parts)


def build_repair_prompt(keyword_list: List, country: str) -> str:
    """이전 응답의 키워드 목록을 같은 의미로 6개 이중언어 스키마에 맞춰 재작성하도록 요청"""
    local_lang = expected_local_language(country)

    prompt_parts = [
        "Reformat the keyword list below.",
        "Return JSON ONLY with schema:",
        "{",
        '  "keywords": [',
        f'    {{ "ko": "Korean keyword", "local": "{local_lang} keyword" }}',
        "  ]",
        "}",
        "",
        "Rules:",
        "- keep the same meaning",
        "- output exactly 6 items",
        "- each item must contain ko and local",
        f"- local language must be {local_lang}",
        "",
        "Input:",
        json.dumps(keyword_list, ensure_ascii=False),
    ]
    return "\n".join(prompt_parts)
