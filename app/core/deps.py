"""FastAPI 의존성. HTTP 클라이언트·Ledger 등 앱 생명주기 객체와 세션 유저 주입."""

from fastapi import Depends, Request

import httpx

from app.core.config import settings
from app.core.errors import ApiError
from app.repositories.ledger_repository import LedgerRepository
from app.schemas.user import SessionUser

SESSION_USER_KEY = "user"


def get_httpx_client(request: Request) -> httpx.AsyncClient:
    """
    앱 lifespan에서 생성한 싱글톤 AsyncClient 반환.
    매 요청마다 새 클라이언트를 만들지 않아 소켓 고갈(TIME_WAIT) 방지.
    """
    return request.app.state.httpx_client


def get_ledger(request: Request) -> LedgerRepository:
    """앱 lifespan에서 생성한 Ledger 싱글톤."""
    return request.app.state.ledger


def get_session_user(request: Request) -> SessionUser | None:
    """세션의 로그인 유저. 비로그인 시 None."""
    raw = request.session.get(SESSION_USER_KEY)
    if not raw:
        return None
    return SessionUser.model_validate(raw)


def require_user(user: SessionUser | None = Depends(get_session_user)) -> SessionUser:
    """로그인 필수 API용. 비로그인 시 401."""
    if user is None:
        raise ApiError(401, "Não autenticado.")
    return user


def require_payments_configured() -> None:
    """MERCADO_PAGO_ACCESS_TOKEN 미설정 시 500. 외부 호출 전에 차단."""
    if not settings.payments_enabled:
        raise ApiError(
            500,
            "Configuração de Mercado Pago ausente. Defina MERCADO_PAGO_ACCESS_TOKEN.",
        )
