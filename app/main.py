"""FastAPI 앱 진입점. app.main:app"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from app.core.config import settings

# 환경 변수 로드 직후 Sentry 초기화. 임포트/라우터 등록 단계 예외도 수집.
def _init_sentry() -> None:
    """SENTRY_DSN이 있으면 Sentry 초기화. environment는 설정에서 로드(스테이징/로컬 구분)."""
    if settings.sentry_dsn:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=settings.sentry_dsn.get_secret_value(),
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=0.1,
            environment=settings.environment,
        )


_init_sentry()

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from app.api import account, auth, deposit, health, pages, security
from app.core.errors import ApiError
from app.repositories.ledger_repository import InMemoryLedger

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 수명 주기: HTTP 클라이언트(싱글톤), 인메모리 Ledger."""
    if not settings.payments_enabled:
        logger.warning("MERCADO_PAGO_ACCESS_TOKEN not set. PIX deposits disabled.")
    app.state.httpx_client = httpx.AsyncClient()
    app.state.ledger = InMemoryLedger()
    logger.info(
        "Server starting: port=%s redirect_uri=%s",
        settings.port,
        settings.discord_redirect_uri,
    )
    yield
    await app.state.httpx_client.aclose()


def _static_dir() -> Path:
    path = Path(settings.static_dir)
    return path if path.is_absolute() else PROJECT_ROOT / path


app = FastAPI(
    title="DevHostings API",
    description="Discord 로그인 + PIX 입금 백엔드",
    version="0.1.0",
    lifespan=lifespan,
)

# 쿠키: HttpOnly, SameSite=Lax. HTTPS 뒤에서는 https_only=True 로 바꿔야 함.
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret.get_secret_value(),
    max_age=settings.session_max_age_seconds,
    same_site="lax",
    https_only=False,
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(account.router)
app.include_router(deposit.router)
app.include_router(security.router)
app.include_router(pages.router)

# 마지막에 마운트. 라우트에 안 걸린 경로는 정적 파일 → 없으면 404 핸들러.
app.mount(
    "/",
    StaticFiles(directory=_static_dir(), html=True, check_dir=False),
    name="static",
)


def _not_found(request: Request) -> Response:
    """GET은 HTML 404 페이지, 그 외 메서드는 JSON."""
    if request.method == "GET":
        return pages.render_not_found(request)
    return JSONResponse(status_code=404, content={"error": "Rota não encontrada."})


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """잘못된 JSON 본문 등. FastAPI 기본 422 대신 400 + {"error"}."""
    logger.info("Request validation failed: %s %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Requisição inválida."})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """
    라우트·정적 파일 모두 불일치 시 StaticFiles가 404(GET/HEAD) 또는 405(그 외 메서드)를 던짐.
    둘 다 '없는 경로'로 취급.
    """
    if exc.status_code in (404, 405):
        return _not_found(request)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 → 500 + 로그. 내부 정보는 응답에 노출하지 않음."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc  # 정상 연결 종료, 500 로그 방지
    logger.exception("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Erro interno do servidor."},
    )
