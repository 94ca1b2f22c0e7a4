"""Auth API. Discord OAuth (authorization code + 세션 쿠키)."""

import httpx
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from app.core.deps import SESSION_USER_KEY, get_httpx_client, get_ledger
from app.repositories.ledger_repository import LedgerRepository
from app.services.auth_service import (
    AuthError,
    build_authorize_url,
    consume_oauth_state,
    discord_login,
    issue_oauth_state,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/discord")
async def get_discord_login(request: Request) -> RedirectResponse:
    """state nonce를 세션에 저장하고 Discord 인가 페이지로 리다이렉트."""
    state = issue_oauth_state(request.session)
    return RedirectResponse(build_authorize_url(state), status_code=302)


@router.get("/discord/callback", response_model=None)
async def get_discord_callback(
    request: Request,
    code: str | None = Query(None),
    state: str | None = Query(None),
    user_agent: str | None = Header(None),
    http_client: httpx.AsyncClient = Depends(get_httpx_client),
    ledger: LedgerRepository = Depends(get_ledger),
) -> RedirectResponse | PlainTextResponse:
    """
    Discord 콜백. state 검증·소비 → code 교환 → 세션에 유저 저장 → / 로 리다이렉트.
    state 누락/불일치 400, Discord 오류 500 (세션·저장소 변경 없음).
    """
    state_ok = consume_oauth_state(request.session, state)
    if not code or not state_ok:
        return PlainTextResponse("Requisição inválida.", status_code=400)

    try:
        user = await discord_login(
            code,
            user_agent,
            http_client=http_client,
            ledger=ledger,
        )
    except AuthError:
        return PlainTextResponse("Erro ao autenticar com o Discord.", status_code=500)

    request.session[SESSION_USER_KEY] = user.model_dump(by_alias=True)
    return RedirectResponse("/", status_code=302)
