import json
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file="../.env", env_file_encoding="utf-8", extra="ignore")

    # FastAPI 애플리케이션 설정
    ENVIRONMENT: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"  # 로그 레벨 설정

    # CORS 설정 (프론트엔드는 정적 사이트이므로 기본은 전체 허용)
    CORS_ORIGINS: List[str] = ["*"]

    # Gemini API 설정
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str | None = None  # 지정 시 자동 감지 없이 강제 사용
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_FALLBACK_MODEL: str = "gemini-1.5-flash"
    GEMINI_TIMEOUT_SECONDS: float = 60.0

    # 모델 자동 감지 캐시 (초)
    MODEL_CACHE_TTL_SECONDS: float = 60 * 30

    # 입력 길이 제한
    MAX_PRODUCT_LENGTH: int = 120
    MAX_COUNTRY_LENGTH: int = 60

    # 생성 온도 (1차 생성 / 키워드 보정)
    PRIMARY_TEMPERATURE: float = 0.2
    REPAIR_TEMPERATURE: float = 0.1

    WORKER_VERSION: str = "2026-02-19-bilingual-v4"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _normalise_cors(cls, value):
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if raw.startswith("[") and raw.endswith("]"):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        raise ValueError("CORS_ORIGINS must be a string or list of strings")

    @property
    def forced_model(self) -> str:
        """강제 모델명 (공백 제거, 미지정 시 빈 문자열)"""
        return (self.GEMINI_MODEL or "").strip()


settings = Config()
