"""Pytest fixtures. 외부(Discord·Mercado Pago) 호출은 httpx.MockTransport로 대체."""

import os
from collections.abc import Callable, Iterator
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient

# Settings Fail-fast 대비: 테스트 시 필수 env 설정. 결제 토큰은 테스트별로 monkeypatch.
os.environ.setdefault("DISCORD_CLIENT_ID", "test-discord-client-id")
os.environ.setdefault("DISCORD_CLIENT_SECRET", "test-discord-client-secret")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-for-pytest")
os.environ.pop("MERCADO_PAGO_ACCESS_TOKEN", None)
os.environ.pop("SENTRY_DSN", None)

from app.repositories.ledger_repository import InMemoryLedger  # noqa: E402

DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_ME_URL = "https://discord.com/api/users/@me"
MERCADO_PAGO_PAYMENTS_URL = "https://api.mercadopago.com/v1/payments"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """URL(쿼리 제외)별 응답 등록 + 받은 요청 기록."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Responder] = {}

    def on(self, method: str, url: str, responder: Responder) -> None:
        self._routes[(method, url)] = responder

    def json(self, method: str, url: str, status_code: int, body: dict) -> None:
        self.on(method, url, lambda request: httpx.Response(status_code, json=body))

    def calls_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if _base_url(r) == url]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._routes.get((request.method, _base_url(request)))
        if responder is None:
            return httpx.Response(404, json={"message": "not mocked"})
        return responder(request)

    def mock_discord_login(
        self,
        user_id: str = "123456789",
        username: str = "tester",
        discriminator: str = "0",
        avatar: str | None = None,
    ) -> None:
        self.json(
            "POST",
            DISCORD_TOKEN_URL,
            200,
            {"access_token": "discord-access-token", "token_type": "Bearer", "expires_in": 604800},
        )
        self.json(
            "GET",
            DISCORD_ME_URL,
            200,
            {
                "id": user_id,
                "username": username,
                "discriminator": discriminator,
                "avatar": avatar,
            },
        )


def _base_url(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def mock_http_client(upstream: FakeUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def client(
    ledger: InMemoryLedger, mock_http_client: httpx.AsyncClient
) -> Iterator[TestClient]:
    """FastAPI TestClient. lifespan 실행, HTTP 클라이언트·Ledger는 테스트용으로 교체."""
    from app.core.deps import get_httpx_client, get_ledger
    from app.main import app

    app.dependency_overrides[get_httpx_client] = lambda: mock_http_client
    app.dependency_overrides[get_ledger] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def payments_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    from pydantic import SecretStr

    from app.core.config import settings

    monkeypatch.setattr(settings, "mercado_pago_access_token", SecretStr("test-mp-token"))


def _start_login(client: TestClient) -> str:
    """GET /auth/discord 후 리다이렉트 URL에서 state 추출."""
    resp = client.get("/auth/discord", follow_redirects=False)
    assert resp.status_code == 302
    query = parse_qs(urlparse(resp.headers["location"]).query)
    return query["state"][0]


@pytest.fixture
def start_login(client: TestClient) -> Callable[[], str]:
    return lambda: _start_login(client)


@pytest.fixture
def login(client: TestClient, upstream: FakeUpstream) -> Callable[..., httpx.Response]:
    """Discord 로그인 전체 흐름(인가 → 콜백). 콜백 응답 반환."""

    def _login(
        user_id: str = "123456789",
        user_agent: str = "pytest-agent",
        **profile,
    ) -> httpx.Response:
        upstream.mock_discord_login(user_id=user_id, **profile)
        state = _start_login(client)
        return client.get(
            "/auth/discord/callback",
            params={"code": "auth-code", "state": state},
            headers={"User-Agent": user_agent},
            follow_redirects=False,
        )

    return _login
