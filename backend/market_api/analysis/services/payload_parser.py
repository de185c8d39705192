# backend/market_api/analysis/services/payload_parser.py
"""
모델 응답 파싱 모듈

Gemini 응답은 (1) 이미 최종 JSON이거나, (2) candidates[0].content.parts 안의 텍스트에
JSON이 들어 있거나, (3) 아예 JSON이 아닌 자유 텍스트일 수 있다.
추출 전략을 순서대로 시도하고, 모두 실패하면 텍스트를 strategy로 넘기는 축소 결과를 만든다.
이 모듈의 함수는 예외를 던지지 않는다.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

PAYLOAD_FIELDS = ("keywords", "platforms", "strategy")

_FENCE_LANG_PATTERN = re.compile(r"```json", re.IGNORECASE)


@dataclass
class AnalysisPayload:
    """정규화 전 분석 결과"""
    keywords: Any = field(default_factory=list)
    platforms: Any = field(default_factory=list)
    strategy: Any = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisPayload":
        return cls(
            keywords=data.get("keywords", []),
            platforms=data.get("platforms", []),
            strategy=data.get("strategy", ""),
        )


def try_json_parse(text: Any) -> Optional[Any]:
    try:
        return json.loads(str(text or ""))
    except (json.JSONDecodeError, TypeError, ValueError):
        return None


def extract_json_object(text: Any) -> Optional[Dict[str, Any]]:
    """
    코드펜스를 제거한 뒤 첫 '{'부터 마지막 '}'까지를 JSON으로 파싱.
    모델이 지시를 어기고 앞뒤에 설명을 붙인 경우를 허용한다.
    """
    cleaned = _FENCE_LANG_PATTERN.sub("```", str(text or "").strip()).replace("```", "").strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    parsed = try_json_parse(cleaned[start:end + 1])
    return parsed if isinstance(parsed, dict) else None


def lenient_json(text: Any) -> Optional[Dict[str, Any]]:
    parsed = extract_json_object(text)
    if parsed is not None:
        return parsed
    parsed = try_json_parse(text)
    return parsed if isinstance(parsed, dict) else None


def candidate_text(response_json: Any) -> str:
    """Gemini 표준 응답 구조에서 첫 번째 후보의 parts 텍스트를 이어 붙인다"""
    if not isinstance(response_json, dict):
        return ""
    candidates = response_json.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


def _from_raw_text(raw_text: str, response_json: Any) -> Optional[AnalysisPayload]:
    direct = lenient_json(raw_text)
    if direct and any(direct.get(name) for name in PAYLOAD_FIELDS):
        return AnalysisPayload.from_dict(direct)
    return None


def _from_candidates(raw_text: str, response_json: Any) -> Optional[AnalysisPayload]:
    parsed = lenient_json(candidate_text(response_json))
    if parsed is not None:
        return AnalysisPayload.from_dict(parsed)
    return None


def _plain_text(raw_text: str, response_json: Any) -> Optional[AnalysisPayload]:
    return AnalysisPayload(keywords=[], platforms=[], strategy=candidate_text(response_json).strip())


EXTRACTION_STRATEGIES: List[Callable[[str, Any], Optional[AnalysisPayload]]] = [
    _from_raw_text,
    _from_candidates,
    _plain_text,
]


def parse_payload(raw_text: str, response_json: Any) -> AnalysisPayload:
    for strategy in EXTRACTION_STRATEGIES:
        payload = strategy(raw_text, response_json)
        if payload is not None:
            logger.debug(f"Payload extracted via {strategy.__name__}")
            return payload
    return AnalysisPayload()
