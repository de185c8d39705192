# backend/market_api/analysis/services/fallback_table.py
"""
고정 키워드 대체표

모델이 보정 이후에도 이중언어 형식을 지키지 않을 때, 알려진 상품/국가 조합에 한해
사람이 검수한 키워드 6개를 돌려준다.
"""

from typing import Dict, List, Tuple

from .countries import CountryBucket, country_bucket

FALLBACK_KEYWORDS: Dict[Tuple[CountryBucket, str], List[str]] = {
    (CountryBucket.CHINA, "등산화"): [
        "등산화 (登山鞋)",
        "트레킹화 (徒步鞋)",
        "방수 등산화 (防水登山鞋)",
        "경량 등산화 (轻量登山鞋)",
        "아웃도어 신발 (户外鞋)",
        "미끄럼 방지 (防滑)",
    ],
    (CountryBucket.CHINA, "샴푸"): [
        "샴푸 (洗发水)",
        "두피 케어 (头皮护理)",
        "탈모 방지 (防脱发)",
        "무실리콘 (无硅油)",
        "약산성 샴푸 (弱酸性洗发水)",
        "손상모 케어 (受损发质护理)",
    ],
    (CountryBucket.VIETNAM, "스마트폰"): [
        "스마트폰 (điện thoại thông minh)",
        "가성비 스마트폰 (điện thoại giá tốt)",
        "게이밍폰 (điện thoại chơi game)",
        "카메라 성능 (camera chất lượng cao)",
        "5G 스마트폰 (điện thoại 5G)",
        "중저가 모델 (phân khúc tầm trung)",
    ],
}


def fallback_for(product: str | None, country: str | None) -> List[str]:
    """대체표에서 상품명 부분 일치로 키워드를 찾는다. 없으면 빈 목록"""
    name = (product or "").strip()
    bucket = country_bucket(country)
    for (table_bucket, product_marker), keywords in FALLBACK_KEYWORDS.items():
        if table_bucket is bucket and product_marker in name:
            return list(keywords)
    return []
