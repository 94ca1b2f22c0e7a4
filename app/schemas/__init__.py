# Pydantic schemas
from app.schemas.auth import DiscordTokenResponse, DiscordUser
from app.schemas.payment import DepositRequest, DepositResponse, MercadoPagoPaymentResponse
from app.schemas.security import SecurityInfoResponse
from app.schemas.user import LoginEntry, MeResponse, SessionUser

__all__ = [
    "DepositRequest",
    "DepositResponse",
    "DiscordTokenResponse",
    "DiscordUser",
    "LoginEntry",
    "MeResponse",
    "MercadoPagoPaymentResponse",
    "SecurityInfoResponse",
    "SessionUser",
]
