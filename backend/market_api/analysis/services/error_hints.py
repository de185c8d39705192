# backend/market_api/analysis/services/error_hints.py
"""
Gemini 오류 메시지 해석

할당량 초과(429) 메시지에는 보통 "Please retry in 42.218702404s." 같은 문구가 들어 있다.
대기시간(초)을 뽑아 사용자 안내 문구로 만든다.
"""

import math
import re
from typing import Optional

RETRY_AFTER_PATTERN = re.compile(r"retry\s+in\s+([0-9]+(?:\.[0-9]+)?)\s*s\b", re.IGNORECASE)

UPSTREAM_ERROR_HINT = (
    "If quota exceeded(limit:0), check billing/quota. "
    "If model not found, set GEMINI_MODEL or let auto-detect choose another model."
)
NO_MODEL_HINT = (
    "No model supports generateContent for this key/project. "
    "Check API enablement, key project, and billing/quota."
)


def extract_retry_after_seconds(message: str | None) -> Optional[int]:
    match = RETRY_AFTER_PATTERN.search(message or "")
    if not match:
        return None
    return max(1, math.ceil(float(match.group(1))))


def retry_hint(seconds: int) -> str:
    return f"약 {seconds}초 후 다시 시도해주세요."


def upstream_error_hint(message: str | None) -> str:
    """업스트림 오류 안내 문구. 재시도 대기시간이 있으면 앞에 붙인다"""
    seconds = extract_retry_after_seconds(message)
    if seconds is None:
        return UPSTREAM_ERROR_HINT
    return f"{retry_hint(seconds)} {UPSTREAM_ERROR_HINT}"
