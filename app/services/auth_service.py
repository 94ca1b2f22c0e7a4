"""Auth Service. Discord OAuth state 발급/소비, code 교환, 프로필 조회, 로그인 기록."""

import logging
import secrets
from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.repositories.ledger_repository import LOGIN_HISTORY_LIMIT, LedgerRepository
from app.schemas.auth import DiscordTokenResponse, DiscordUser
from app.schemas.user import LoginEntry, SessionUser

logger = logging.getLogger(__name__)

DISCORD_AUTHORIZE_URL = "https://discord.com/oauth2/authorize"
DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_ME_URL = "https://discord.com/api/users/@me"
DISCORD_AVATAR_URL = "https://cdn.discordapp.com/avatars/{user_id}/{avatar}.{ext}?size=128"
DISCORD_SCOPE = "identify"

OAUTH_STATE_KEY = "oauth_state"
UNKNOWN_USER_AGENT = "unknown"


class AuthError(Exception):
    """Discord 교환/조회 실패. Router에서 500으로 변환."""

    pass


def issue_oauth_state(session: MutableMapping[str, Any]) -> str:
    """1회용 state nonce 생성 후 세션에 저장."""
    state = secrets.token_hex(16)
    session[OAUTH_STATE_KEY] = state
    return state


def consume_oauth_state(session: MutableMapping[str, Any], state: str | None) -> bool:
    """
    세션의 state를 꺼내(삭제) 요청 state와 비교. 결과와 무관하게 항상 삭제 → 재사용 불가.
    같은 콜백 URL을 다시 보내도 세션에 nonce가 없으므로 거부된다.
    """
    expected = session.pop(OAUTH_STATE_KEY, None)
    if not state or not isinstance(expected, str):
        return False
    return secrets.compare_digest(state.encode(), expected.encode())


def build_authorize_url(state: str) -> str:
    params = {
        "client_id": settings.discord_client_id,
        "redirect_uri": settings.discord_redirect_uri,
        "response_type": "code",
        "scope": DISCORD_SCOPE,
        "state": state,
    }
    return f"{DISCORD_AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_discord_code(
    code: str, client: httpx.AsyncClient
) -> DiscordTokenResponse:
    """
    Authorization Code를 액세스 토큰으로 교환 (authorization_code grant, form-encoded).
    네트워크 예외·비 200·스키마 불일치 모두 AuthError.
    """
    try:
        resp = await client.post(
            DISCORD_TOKEN_URL,
            data={
                "client_id": settings.discord_client_id,
                "client_secret": settings.discord_client_secret.get_secret_value(),
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": settings.discord_redirect_uri,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    except httpx.HTTPError as e:
        logger.warning("Discord token exchange network error: %s", e, exc_info=True)
        raise AuthError("Discord auth temporarily unavailable") from e
    if resp.status_code != 200:
        logger.warning("Discord token exchange failed: %s %s", resp.status_code, resp.text)
        raise AuthError("Invalid or expired authorization code")

    try:
        return DiscordTokenResponse.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        logger.warning("Invalid Discord token response: %s", resp.text)
        raise AuthError("Invalid Discord token response") from e


async def fetch_discord_user(access_token: str, client: httpx.AsyncClient) -> DiscordUser:
    """Bearer 토큰으로 /users/@me 조회."""
    try:
        resp = await client.get(
            DISCORD_ME_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
    except httpx.HTTPError as e:
        logger.warning("Discord profile fetch network error: %s", e, exc_info=True)
        raise AuthError("Discord auth temporarily unavailable") from e
    if resp.status_code != 200:
        logger.warning("Discord profile fetch failed: %s %s", resp.status_code, resp.text)
        raise AuthError("Failed to fetch Discord profile")

    try:
        return DiscordUser.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        logger.warning("Invalid Discord profile response: %s", resp.text)
        raise AuthError("Invalid Discord profile response") from e


def build_display_name(user: DiscordUser) -> str:
    """username#discriminator. 신규 유니크 username 계정(discriminator "0")은 username만."""
    if not user.discriminator or user.discriminator == "0":
        return user.username
    return f"{user.username}#{user.discriminator}"


def build_avatar_url(user: DiscordUser) -> str | None:
    """아바타 해시가 a_로 시작하면 애니메이션(gif), 아니면 png. 해시 없으면 None."""
    if not user.avatar:
        return None
    ext = "gif" if user.avatar.startswith("a_") else "png"
    return DISCORD_AVATAR_URL.format(user_id=user.id, avatar=user.avatar, ext=ext)


async def discord_login(
    code: str,
    user_agent: str | None,
    *,
    http_client: httpx.AsyncClient,
    ledger: LedgerRepository,
) -> SessionUser:
    """
    Discord code로 로그인.
    1. code → 토큰 교환
    2. 프로필 조회, 표시 이름·아바타 URL 계산
    3. 잔액 lazy 초기화(0), 로그인 이력 앞에 추가(최대 20건)
    교환/조회 실패 시 AuthError. 이 경우 저장소는 건드리지 않는다.
    """
    token = await exchange_discord_code(code, http_client)
    discord_user = await fetch_discord_user(token.access_token, http_client)

    balance = await ledger.get_or_create_balance(discord_user.id)
    entry = LoginEntry(
        date=datetime.now(UTC),
        user_agent=user_agent or UNKNOWN_USER_AGENT,
    )
    await ledger.prepend_login(discord_user.id, entry, limit=LOGIN_HISTORY_LIMIT)

    logger.info("Discord login: user_id=%s", discord_user.id)
    return SessionUser(
        id=discord_user.id,
        username=build_display_name(discord_user),
        avatar_url=build_avatar_url(discord_user),
        balance=balance,
    )
