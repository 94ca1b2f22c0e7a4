"""계정 보안 정보 스키마."""

from pydantic import BaseModel

from app.schemas.user import LoginEntry


class SecurityInfoResponse(BaseModel):
    """보안 코드 + 최근 로그인(최신순, 최대 20건)."""

    code: str
    logins: list[LoginEntry]
