"""Discord OAuth 관련 Pydantic 스키마. 제공자 응답은 model_validate로 검증."""

from pydantic import BaseModel, ConfigDict


class DiscordTokenResponse(BaseModel):
    """Discord OAuth 토큰 교환 응답. 알 수 없는 필드는 무시."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None


class DiscordUser(BaseModel):
    """GET /users/@me 응답 중 사용하는 필드만."""

    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    discriminator: str | None = None
    avatar: str | None = None
