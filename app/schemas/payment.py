"""PIX 입금(Mercado Pago) 관련 Pydantic 스키마."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DepositRequest(BaseModel):
    """입금 생성 요청. amount는 숫자 또는 숫자 문자열. 검증은 payment_service.parse_amount에서."""

    model_config = ConfigDict(extra="ignore")

    amount: Any = None


class DepositResponse(BaseModel):
    """입금 생성 응답. qrCode는 PIX 복사-붙여넣기 코드, qrCodeBase64는 PNG 이미지."""

    model_config = ConfigDict(populate_by_name=True)

    amount: float
    qr_code: str = Field(..., alias="qrCode")
    qr_code_base64: str = Field(..., alias="qrCodeBase64")


class MercadoPagoTransactionData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    qr_code: str | None = None
    qr_code_base64: str | None = None


class MercadoPagoPointOfInteraction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transaction_data: MercadoPagoTransactionData | None = None


class MercadoPagoPaymentResponse(BaseModel):
    """POST /v1/payments 응답 중 QR 페이로드 경로만."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    status: str | None = None
    point_of_interaction: MercadoPagoPointOfInteraction | None = None
