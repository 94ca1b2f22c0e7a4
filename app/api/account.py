"""로그인 유저 API. 프로필 조회·로그아웃."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.deps import SESSION_USER_KEY, get_ledger, get_session_user
from app.repositories.ledger_repository import LedgerRepository
from app.schemas.user import MeResponse, SessionUser

router = APIRouter(prefix="/api", tags=["account"])


@router.get("/me", response_model=MeResponse)
async def get_me(
    request: Request,
    user: SessionUser | None = Depends(get_session_user),
    ledger: LedgerRepository = Depends(get_ledger),
) -> MeResponse | JSONResponse:
    """
    현재 유저 + 잔액. 세션에 캐시된 잔액은 Ledger 값으로 갱신(외부 반영분 포함).
    비로그인은 에러가 아니라 {"loggedIn": false} + 401.
    """
    if user is None:
        return JSONResponse(status_code=401, content={"loggedIn": False})

    user.balance = await ledger.get_balance(user.id)
    request.session[SESSION_USER_KEY] = user.model_dump(by_alias=True)
    return MeResponse(logged_in=True, user=user)


@router.post("/logout")
async def post_logout(request: Request) -> dict[str, bool]:
    """세션 파기. 로그인 여부와 무관하게 항상 성공(멱등)."""
    request.session.clear()
    return {"ok": True}
