"""PIX 입금 API (Mercado Pago)."""

import httpx
from fastapi import APIRouter, Body, Depends

from app.core.deps import get_httpx_client, require_payments_configured, require_user
from app.core.errors import ApiError
from app.schemas.payment import DepositRequest, DepositResponse
from app.schemas.user import SessionUser
from app.services.payment_service import (
    MAX_DEPOSIT_AMOUNT,
    MIN_DEPOSIT_AMOUNT,
    InvalidAmountError,
    PaymentError,
    create_pix_deposit,
    parse_amount,
)

router = APIRouter(prefix="/api/deposit", tags=["deposit"])


@router.post("/create", response_model=DepositResponse)
async def post_create_deposit(
    user: SessionUser = Depends(require_user),
    _configured: None = Depends(require_payments_configured),
    payload: DepositRequest | None = Body(None),
    http_client: httpx.AsyncClient = Depends(get_httpx_client),
) -> DepositResponse:
    """
    PIX 결제 생성 후 QR 반환. 검증 순서: 로그인(401) → 결제 설정(500) → 금액(400) → 제공자(500).
    금액이 유효하지 않으면 외부 호출 없음. 잔액은 변경하지 않음.
    """
    try:
        amount = parse_amount(payload.amount if payload else None)
    except InvalidAmountError as e:
        raise ApiError(
            400,
            f"Valor inválido. Use entre {MIN_DEPOSIT_AMOUNT} e {MAX_DEPOSIT_AMOUNT}.",
        ) from e

    try:
        return await create_pix_deposit(amount, user.id, http_client=http_client)
    except PaymentError as e:
        raise ApiError(500, "Erro ao criar pagamento PIX.") from e
