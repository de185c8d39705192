import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .exceptions import AnalysisError
from .analysis.router import router as analysis_router
from .analysis.services.model_selector import ModelCache

# 로깅 설정 (Docker 환경 최적화)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # stdout으로 명시적 출력
    ]
)

# 특정 모듈 로그 레벨 설정
logging.getLogger("market_api.analysis.service").setLevel(log_level)
logging.getLogger("market_api.analysis.router").setLevel(log_level)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.info(f"Application starting with log level: {settings.LOG_LEVEL}")

CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS)
    logger.info(f"Gemini HTTP client ready (timeout={settings.GEMINI_TIMEOUT_SECONDS}s)")
    yield
    await app.state.http_client.aclose()
    app.state.http_client = None


app = FastAPI(title="Market Analysis API", lifespan=lifespan)
app.state.model_cache = ModelCache(ttl_seconds=settings.MODEL_CACHE_TTL_SECONDS)


def cors_headers(request: Request) -> dict:
    origin = request.headers.get("origin")
    if "*" in settings.CORS_ORIGINS:
        allow_origin = "*"
    elif origin and origin in settings.CORS_ORIGINS:
        allow_origin = origin
    else:
        allow_origin = None

    headers = {
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Vary": "Origin",
    }
    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
    return headers


# CORS: 모든 경로의 OPTIONS는 204로 바로 응답, 그 외 응답에는 CORS 헤더를 붙인다
@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors_headers(request))
    response = await call_next(request)
    response.headers.update(cors_headers(request))
    return response


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message} {exc.details or ''}".strip())
    else:
        logger.info(f"Rejected request on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # ServerErrorMiddleware에서 호출되므로 CORS 헤더를 직접 붙인다
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Server error", "details": str(exc)},
        headers=cors_headers(request),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


# 라우터 등록
app.include_router(analysis_router)


# 헬스 체크
@app.get("/", response_class=PlainTextResponse, tags=["health"])
async def health():
    return "Worker is running"
