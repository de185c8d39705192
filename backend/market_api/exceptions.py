# backend/market_api/exceptions.py
"""
분석 API 에러 분류

각 예외는 HTTP 상태 코드와 응답 본문을 스스로 알고 있으며,
main.py의 exception handler가 JSONResponse로 변환합니다.
"""

from typing import Any, Dict, Optional


class AnalysisError(Exception):
    """분석 요청 처리 중 발생하는 모든 예상 가능한 오류의 기본 클래스."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"error": self.message}
        if self.details:
            content["details"] = self.details
        if self.hint:
            content["hint"] = self.hint
        return content


class ClientInputError(AnalysisError):
    """필수 입력 누락 또는 길이 초과 (400)"""

    status_code = 400


class ConfigurationError(AnalysisError):
    """서버 설정 누락, 예: API 키 미설정 (500)"""

    status_code = 500


class UpstreamUnavailable(AnalysisError):
    """generateContent를 지원하는 모델을 찾지 못함 (502)"""

    status_code = 502


class UpstreamCallError(AnalysisError):
    """Gemini 생성 호출이 2xx가 아닌 응답을 반환함 (502)"""

    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        upstream_status: int,
        model: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
        retry_after_seconds: Optional[int] = None,
    ):
        super().__init__(message, details=details, hint=hint)
        self.upstream_status = upstream_status
        self.model = model
        self.retry_after_seconds = retry_after_seconds

    def to_content(self) -> Dict[str, Any]:
        content = super().to_content()
        content["status"] = self.upstream_status
        content["model"] = self.model
        if self.retry_after_seconds is not None:
            content["retryAfterSeconds"] = self.retry_after_seconds
        return content


class ServerError(AnalysisError):
    """처리 중 예상하지 못한 예외 (500)"""

    status_code = 500
