"""HTML 페이지. 로그인 필요 페이지는 비로그인 시 / 로 리다이렉트. 404 페이지 렌더링."""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.core.deps import get_session_user
from app.schemas.user import SessionUser

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["pages"])


@router.get("/seguranca", response_class=HTMLResponse, response_model=None)
async def get_security_page(
    request: Request,
    user: SessionUser | None = Depends(get_session_user),
) -> HTMLResponse | RedirectResponse:
    """보안 코드·최근 로그인·QR 스캐너(클라이언트 jsQR)."""
    if user is None:
        return RedirectResponse("/", status_code=302)
    return templates.TemplateResponse(request, "security.html", {"user": user})


@router.get("/saldo/historico", response_class=HTMLResponse, response_model=None)
async def get_balance_history_page(
    request: Request,
    user: SessionUser | None = Depends(get_session_user),
) -> HTMLResponse | RedirectResponse:
    if user is None:
        return RedirectResponse("/", status_code=302)
    return templates.TemplateResponse(request, "balance_history.html", {"user": user})


def render_not_found(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "not_found.html", {}, status_code=404)
