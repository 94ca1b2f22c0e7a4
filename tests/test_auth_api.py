"""Discord OAuth 라우트 테스트. 인가 리다이렉트·콜백 state 검증·로그인 이력."""

from urllib.parse import parse_qs, urlparse

from app.repositories.ledger_repository import LOGIN_HISTORY_LIMIT
from app.services.auth_service import DISCORD_TOKEN_URL


def test_authorize_redirects_to_discord(client) -> None:
    """GET /auth/discord → 302 Discord 인가 URL(state 포함)."""
    resp = client.get("/auth/discord", follow_redirects=False)
    assert resp.status_code == 302
    location = urlparse(resp.headers["location"])
    assert location.netloc == "discord.com"
    assert location.path == "/oauth2/authorize"
    query = parse_qs(location.query)
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["identify"]
    assert len(query["state"][0]) == 32


def test_callback_success_sets_session_user(client, login) -> None:
    """콜백 성공 → / 로 302, /api/me 가 로그인 유저와 잔액 0 반환."""
    resp = login(user_id="555", username="alice", discriminator="0", avatar="hash")
    assert resp.status_code == 302
    assert resp.headers["location"] == "/"

    me = client.get("/api/me")
    assert me.status_code == 200
    assert me.json() == {
        "loggedIn": True,
        "user": {
            "id": "555",
            "username": "alice",
            "avatarUrl": "https://cdn.discordapp.com/avatars/555/hash.png?size=128",
            "balance": 0,
        },
    }


def test_callback_state_mismatch_returns_400(client, upstream, start_login) -> None:
    """state 불일치 → 400, 외부 호출·세션 유저 없음."""
    upstream.mock_discord_login()
    start_login()
    resp = client.get(
        "/auth/discord/callback",
        params={"code": "c", "state": "not-the-state"},
        follow_redirects=False,
    )
    assert resp.status_code == 400
    assert upstream.requests == []
    assert client.get("/api/me").status_code == 401


def test_callback_without_prior_authorize_returns_400(client, upstream) -> None:
    upstream.mock_discord_login()
    resp = client.get(
        "/auth/discord/callback",
        params={"code": "c", "state": "anything"},
        follow_redirects=False,
    )
    assert resp.status_code == 400
    assert resp.text == "Requisição inválida."
    assert upstream.requests == []


def test_callback_missing_code_returns_400(client, upstream, start_login) -> None:
    upstream.mock_discord_login()
    state = start_login()
    resp = client.get(
        "/auth/discord/callback", params={"state": state}, follow_redirects=False
    )
    assert resp.status_code == 400
    assert upstream.requests == []


def test_callback_replay_is_rejected(client, upstream, start_login) -> None:
    """같은 state로 콜백 재전송 → nonce 소비됨 → 400."""
    upstream.mock_discord_login()
    state = start_login()
    params = {"code": "c", "state": state}
    first = client.get("/auth/discord/callback", params=params, follow_redirects=False)
    assert first.status_code == 302
    second = client.get("/auth/discord/callback", params=params, follow_redirects=False)
    assert second.status_code == 400
    assert len(upstream.calls_to(DISCORD_TOKEN_URL)) == 1


def test_callback_upstream_failure_returns_500(client, upstream, start_login, ledger) -> None:
    """Discord 토큰 교환 실패 → 500, 세션·저장소 변경 없음."""
    upstream.json("POST", DISCORD_TOKEN_URL, 400, {"error": "invalid_grant"})
    state = start_login()
    resp = client.get(
        "/auth/discord/callback",
        params={"code": "expired", "state": state},
        follow_redirects=False,
    )
    assert resp.status_code == 500
    assert resp.text == "Erro ao autenticar com o Discord."
    assert "invalid_grant" not in resp.text
    assert client.get("/api/me").status_code == 401
    assert ledger._balances == {}
    assert ledger._login_history == {}


def test_login_history_keeps_20_most_recent(client, login, ledger) -> None:
    """25회 로그인 후 최근 20건만 최신순으로 유지."""
    for i in range(25):
        assert login(user_id="900", user_agent=f"agent-{i}").status_code == 302

    history = client.get("/api/security/info").json()["logins"]
    assert len(history) == LOGIN_HISTORY_LIMIT
    assert [entry["userAgent"] for entry in history] == [
        f"agent-{i}" for i in range(24, 4, -1)
    ]
