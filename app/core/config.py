"""환경 변수 기반 설정. pydantic-settings 사용."""

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DISCORD_REDIRECT_URI = "https://devhostings.online/auth/discord/callback"


class Settings(BaseSettings):
    """앱 설정. 환경변수에서 로드. 시크릿은 SecretStr로 마스킹, 필수 시크릿은 기본값 없음(Fail-fast)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # 선택: 에러 리포팅
    sentry_dsn: SecretStr | None = None
    environment: str = "development"  # Sentry 태그용. production, staging, development 등.

    # 서버
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    static_dir: str = "public"

    # Discord OAuth (필수: 기본값 없음 → 부팅 시점 Fail-fast)
    discord_client_id: str
    discord_client_secret: SecretStr
    discord_redirect_uri: str = DEFAULT_DISCORD_REDIRECT_URI

    # 세션 쿠키 서명 키 (필수)
    session_secret: SecretStr
    session_max_age_seconds: int = Field(14 * 24 * 60 * 60, ge=60)

    # Mercado Pago (선택: 없으면 PIX 입금만 비활성)
    mercado_pago_access_token: SecretStr | None = None

    @model_validator(mode="after")
    def fail_fast_required(self: "Settings") -> "Settings":
        """필수 변수가 빈 문자열이면 부팅 거부(Fail-Fast)."""
        missing: list[str] = []
        if not (self.discord_client_id or "").strip():
            missing.append("DISCORD_CLIENT_ID")
        if not self.discord_client_secret.get_secret_value().strip():
            missing.append("DISCORD_CLIENT_SECRET")
        if not self.session_secret.get_secret_value().strip():
            missing.append("SESSION_SECRET")
        if missing:
            raise ValueError(
                f"These variables must be set: {', '.join(missing)}. "
                "Define them in the environment or in .env before boot."
            )
        return self

    @property
    def payments_enabled(self) -> bool:
        token = self.mercado_pago_access_token
        return token is not None and bool(token.get_secret_value().strip())


settings = Settings()
