"""세션 유저·로그인 이력 스키마. JSON 키는 프론트엔드와 맞춰 camelCase alias 사용."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SessionUser(BaseModel):
    """세션에 저장되는 유저. id는 Discord가 발급한 값으로 모든 저장소의 유일한 키."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    avatar_url: str | None = Field(None, alias="avatarUrl")
    balance: float = 0


class LoginEntry(BaseModel):
    """로그인 이력 1건."""

    model_config = ConfigDict(populate_by_name=True)

    date: datetime
    user_agent: str = Field(..., alias="userAgent")


class MeResponse(BaseModel):
    """GET /api/me 응답."""

    model_config = ConfigDict(populate_by_name=True)

    logged_in: bool = Field(..., alias="loggedIn")
    user: SessionUser | None = None
