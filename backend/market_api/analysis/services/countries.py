# backend/market_api/analysis/services/countries.py
"""국가 입력값을 언어권 버킷으로 분류"""

from enum import Enum


class CountryBucket(str, Enum):
    CHINA = "CHINA"
    VIETNAM = "VIETNAM"
    OTHER = "OTHER"


# 영문/한글 표기 모두 허용 (부분 일치, 대소문자 무시)
_BUCKET_MARKERS = {
    CountryBucket.CHINA: ("china", "중국"),
    CountryBucket.VIETNAM: ("vietnam", "베트남"),
}


def country_bucket(country: str | None) -> CountryBucket:
    normalized = (country or "").lower()
    for bucket, markers in _BUCKET_MARKERS.items():
        if any(marker in normalized for marker in markers):
            return bucket
    return CountryBucket.OTHER
