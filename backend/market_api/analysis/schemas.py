# backend/market_api/analysis/schemas.py
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from ..models import CamelModel, CustomModel


class AnalysisRequest(CustomModel):
    """시장 분석 요청. 길이/공백 검증은 service.validate_request에서 설정값 기준으로 수행"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product: str = Field("", json_schema_extra={"example": "등산화"})
    country: str = Field("", json_schema_extra={"example": "중국"})

    @field_validator("product", "country", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        """숫자 등 문자열이 아닌 값도 문자열로 받아 앞뒤 공백을 제거"""
        if v is None:
            return ""
        return str(v).strip()


class AnalysisMeta(CamelModel):
    model_used: str = Field(..., description="실제 호출한 Gemini 모델")
    forced_model: bool = Field(..., description="GEMINI_MODEL 강제 지정 여부")
    worker_version: str
    keyword_bilingual_complete: bool = Field(..., description="최종 키워드가 이중언어 형식을 모두 만족하는지")
    keyword_local_language: str = Field(..., description="괄호 안 현지어로 기대한 언어")


class AnalysisResponse(CustomModel):
    keywords: List[str] = Field(default_factory=list, description="'한국어 (현지어)' 형식 키워드, 최대 10개")
    platforms: List[str] = Field(default_factory=list, description="추천 판매 플랫폼, 최대 10개")
    strategy: str = ""
    meta: AnalysisMeta


class ErrorResponse(CamelModel):
    """에러 응답 (문서화 용도)"""
    error: str
    details: Optional[str] = None
    hint: Optional[str] = None
    status: Optional[int] = None
    model: Optional[str] = None
    retry_after_seconds: Optional[int] = None
