# backend/market_api/analysis/router.py
import json
import logging

from fastapi import APIRouter, Request

from ..exceptions import AnalysisError, ClientInputError, ServerError
from . import service
from .dependencies import GeminiClientDep, ModelSelectorDep, SettingsDep
from .schemas import AnalysisRequest, AnalysisResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


async def read_analysis_request(request: Request) -> AnalysisRequest:
    """Content-Type과 관계없이 본문을 JSON으로 읽는다 (text/plain 단순 요청 허용)"""
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        payload = None
    if not isinstance(payload, dict):
        raise ClientInputError("Missing product or country")
    return AnalysisRequest.model_validate(payload)


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={
        400: {"model": ErrorResponse, "description": "입력 누락 또는 길이 초과"},
        500: {"model": ErrorResponse, "description": "API 키 미설정 또는 서버 오류"},
        502: {"model": ErrorResponse, "description": "Gemini 호출 실패 / 사용 가능한 모델 없음"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": AnalysisRequest.model_json_schema()}},
        }
    },
)
async def analyze(
    request: Request,
    config: SettingsDep,
    client: GeminiClientDep,
    selector: ModelSelectorDep,
):
    """상품/국가에 대한 시장 분석 (키워드, 플랫폼, 전략)"""
    body = await read_analysis_request(request)
    try:
        return await service.analyze_market(body, config=config, client=client, selector=selector)
    except AnalysisError:
        raise
    except Exception as e:
        logger.exception(f"Market analysis failed: {e}")
        raise ServerError("Server error", details=str(e)) from e
