"""
Payment Service. Mercado Pago PIX 결제 생성.
잔액은 여기서 변경하지 않는다. 승인 후 잔액 반영(webhook)은 별도 구현 대상.
"""

import logging
import math
import re
import uuid
from typing import Any

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.payment import DepositResponse, MercadoPagoPaymentResponse

logger = logging.getLogger(__name__)

MERCADO_PAGO_PAYMENTS_URL = "https://api.mercadopago.com/v1/payments"
# 10진 표기만 허용(부호·소수점·지수). "1_000"·"0x10" 같은 Python 전용 표기는 거부.
AMOUNT_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
MIN_DEPOSIT_AMOUNT = 1
MAX_DEPOSIT_AMOUNT = 50000
# Discord identify scope에는 이메일이 없어 고정값 사용.
PLACEHOLDER_PAYER_EMAIL = "cliente@example.com"


class InvalidAmountError(Exception):
    """입금 금액 검증 실패. Router에서 400."""

    pass


class PaymentError(Exception):
    """결제 제공자 호출 실패 또는 응답 형식 위반. Router에서 500."""

    pass


def parse_amount(raw: Any) -> float:
    """
    숫자 또는 숫자 문자열만 허용. 유한수이며 [1, 50000] 범위여야 함.
    bool·None·빈 문자열·NaN·Infinity는 거부.
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidAmountError("amount must be a number")
    if isinstance(raw, int):
        # float 변환 전에 범위 검사. 아주 큰 정수는 float 변환 시 OverflowError.
        if raw < MIN_DEPOSIT_AMOUNT or raw > MAX_DEPOSIT_AMOUNT:
            raise InvalidAmountError(
                f"amount must be between {MIN_DEPOSIT_AMOUNT} and {MAX_DEPOSIT_AMOUNT}"
            )
        return float(raw)
    if isinstance(raw, float):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not AMOUNT_PATTERN.fullmatch(text):
            raise InvalidAmountError("amount must be a number")
        try:
            value = float(text)
        except (ValueError, OverflowError) as e:
            raise InvalidAmountError("amount must be a number") from e
    else:
        raise InvalidAmountError("amount must be a number")

    if not math.isfinite(value):
        raise InvalidAmountError("amount must be finite")
    if value < MIN_DEPOSIT_AMOUNT or value > MAX_DEPOSIT_AMOUNT:
        raise InvalidAmountError(
            f"amount must be between {MIN_DEPOSIT_AMOUNT} and {MAX_DEPOSIT_AMOUNT}"
        )
    return value


def build_payment_body(amount: float, user_id: str) -> dict[str, Any]:
    return {
        "transaction_amount": amount,
        "description": f"Depósito de saldo - usuário {user_id}",
        "payment_method_id": "pix",
        "payer": {"email": PLACEHOLDER_PAYER_EMAIL},
    }


async def create_pix_deposit(
    amount: float,
    user_id: str,
    *,
    http_client: httpx.AsyncClient,
) -> DepositResponse:
    """
    PIX 결제 의도 생성. 요청마다 새 idempotency key(uuid4), 재시도 없음.
    응답에 qr_code·qr_code_base64 중 하나라도 없으면 PaymentError(부분 응답 노출 방지).
    """
    if not settings.payments_enabled:
        raise PaymentError("MERCADO_PAGO_ACCESS_TOKEN not configured")
    token = settings.mercado_pago_access_token.get_secret_value()
    idempotency_key = str(uuid.uuid4())

    try:
        resp = await http_client.post(
            MERCADO_PAGO_PAYMENTS_URL,
            json=build_payment_body(amount, user_id),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "X-Idempotency-Key": idempotency_key,
            },
        )
    except httpx.HTTPError as e:
        logger.error("Mercado Pago request error: %s", e, exc_info=True)
        raise PaymentError("Payment provider unavailable") from e
    if not resp.is_success:
        logger.error("Mercado Pago payment failed: %s %s", resp.status_code, resp.text)
        raise PaymentError("Payment provider rejected the request")

    try:
        payment = MercadoPagoPaymentResponse.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        logger.error("Invalid Mercado Pago response: %s", resp.text)
        raise PaymentError("Unexpected payment provider response") from e

    poi = payment.point_of_interaction
    tx_data = poi.transaction_data if poi else None
    if not tx_data or not tx_data.qr_code or not tx_data.qr_code_base64:
        logger.error("Mercado Pago response without QR payload: payment_id=%s", payment.id)
        raise PaymentError("Unexpected payment provider response")

    logger.info(
        "PIX deposit created: user_id=%s amount=%.2f payment_id=%s",
        user_id,
        amount,
        payment.id,
    )
    return DepositResponse(
        amount=amount,
        qr_code=tx_data.qr_code,
        qr_code_base64=tx_data.qr_code_base64,
    )
