# backend/market_api/analysis/services/keyword_normalizer.py
"""
키워드 정규화 / 검증 모듈

모델이 돌려주는 키워드는 {"ko": ..., "local": ...} 객체이거나
"한국어 (현지어)" 형태의 문자열이다. 두 형태 모두 같은 검증/직렬화 경로를 거쳐
"<ko> (<local>)" 정규형 문자열로 변환된다.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from .countries import CountryBucket, country_bucket

logger = logging.getLogger(__name__)

# "등산화 (登山鞋)" -> ("등산화", "登山鞋"), 첫 여는 괄호부터 끝의 닫는 괄호까지가 현지어
KEYWORD_PATTERN = re.compile(r"^(.+?)\s*\((.+)\)$")

CJK_PATTERN = re.compile(r"[\u4e00-\u9fff]")
VIETNAMESE_PATTERN = re.compile(
    r"[ăâđêôơưáàảãạấầẩẫậắằẳẵặéèẻẽẹếềểễệíìỉĩịóòỏõọốồổỗộớờởỡợúùủũụứừửữựýỳỷỹỵ]",
    re.IGNORECASE,
)

# 플랫폼 문자열 분리 기준: 줄바꿈, 쉼표, 글머리표, 하이픈
LIST_SPLIT_PATTERN = re.compile(r"\n|,|•|-")

KO_KEYS = ("ko", "korean")
LOCAL_KEYS = ("local", "native")


@dataclass(frozen=True)
class StructuredKeyword:
    ko: str
    local: str

    def parts(self) -> Optional[Tuple[str, str]]:
        return self.ko.strip(), self.local.strip()


@dataclass(frozen=True)
class FormattedKeyword:
    text: str

    def parts(self) -> Optional[Tuple[str, str]]:
        return split_keyword(self.text)


RawKeyword = Union[StructuredKeyword, FormattedKeyword]


def split_keyword(text: str) -> Optional[Tuple[str, str]]:
    """'A (B)' 문자열을 (A, B)로 분리. 형식이 맞지 않으면 None"""
    match = KEYWORD_PATTERN.match((text or "").strip())
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def _first_text(item: dict, keys: Iterable[str]) -> str:
    for key in keys:
        value = item.get(key)
        if value:
            return str(value)
    return ""


def to_raw_keyword(item: Any) -> Optional[RawKeyword]:
    """모델 응답의 개별 항목을 태그된 키워드 타입으로 변환 (지원하지 않는 형태는 None)"""
    if not item:
        return None
    if isinstance(item, dict):
        return StructuredKeyword(ko=_first_text(item, KO_KEYS), local=_first_text(item, LOCAL_KEYS))
    if isinstance(item, str):
        return FormattedKeyword(text=item)
    return None


def is_chinese_text(text: str | None) -> bool:
    return bool(CJK_PATTERN.search(text or ""))


def is_vietnamese_text(text: str | None) -> bool:
    return bool(VIETNAMESE_PATTERN.search(text or ""))


def local_language_valid(local: str | None, country: str | None) -> bool:
    """현지어 부분이 대상 국가의 문자 체계를 만족하는지 검사"""
    bucket = country_bucket(country)
    if bucket is CountryBucket.CHINA:
        return is_chinese_text(local)
    if bucket is CountryBucket.VIETNAM:
        return is_vietnamese_text(local)
    return bool((local or "").strip())


def format_keyword(ko: str, local: str) -> str:
    return f"{ko} ({local})"


def normalize_keywords(raw_keywords: Any, country: str | None) -> List[str]:
    """원시 키워드 목록을 검증된 정규형 문자열 목록으로 변환 (순서 유지 중복 제거)"""
    if not isinstance(raw_keywords, list):
        return []

    items: List[str] = []
    for raw in raw_keywords:
        keyword = to_raw_keyword(raw)
        if keyword is None:
            continue
        parts = keyword.parts()
        if parts is None:
            continue
        ko, local = parts
        if ko and local and local_language_valid(local, country):
            items.append(format_keyword(ko, local))

    normalized = list(dict.fromkeys(items))
    dropped = len(raw_keywords) - len(normalized)
    if dropped:
        logger.debug(f"Dropped {dropped} keyword item(s) during normalization for country={country!r}")
    return normalized


def is_compliant(keywords: Any, country: str | None) -> bool:
    """키워드 목록 전체가 이중언어 형식이고 현지어가 검증을 통과하는지 여부"""
    if not isinstance(keywords, list) or not keywords:
        return False
    for item in keywords:
        parts = split_keyword(item) if isinstance(item, str) else None
        if parts is None or not local_language_valid(parts[1], country):
            return False
    return True


def normalize_list(value: Any) -> List[str]:
    """배열은 그대로, 문자열은 줄바꿈/쉼표/글머리표/하이픈으로 분리해 공백 항목 제거"""
    if isinstance(value, list):
        return [text for text in (str(v).strip() for v in value) if text]
    if isinstance(value, str):
        return [text for text in (part.strip() for part in LIST_SPLIT_PATTERN.split(value)) if text]
    return []
