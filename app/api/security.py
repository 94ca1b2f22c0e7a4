"""계정 보안 API. 보안 코드 + 최근 로그인."""

from fastapi import APIRouter, Depends

from app.core.deps import get_ledger, require_user
from app.repositories.ledger_repository import LedgerRepository
from app.schemas.security import SecurityInfoResponse
from app.schemas.user import SessionUser
from app.services.security_service import get_security_info

router = APIRouter(prefix="/api/security", tags=["security"])


@router.get("/info", response_model=SecurityInfoResponse)
async def get_info(
    user: SessionUser = Depends(require_user),
    ledger: LedgerRepository = Depends(get_ledger),
) -> SecurityInfoResponse:
    return await get_security_info(user.id, ledger)
