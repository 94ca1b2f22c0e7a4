"""Security Service. 계정 보안 코드(표시용, 암호학적 검증에는 쓰지 않음)와 로그인 이력."""

import secrets

from app.repositories.ledger_repository import LedgerRepository
from app.schemas.security import SecurityInfoResponse

SECURITY_CODE_PREFIX = "SEG-"


def generate_security_code() -> str:
    """SEG- + 대문자 hex 8자리 (4바이트 CSPRNG)."""
    return SECURITY_CODE_PREFIX + secrets.token_hex(4).upper()


async def get_security_info(user_id: str, ledger: LedgerRepository) -> SecurityInfoResponse:
    """최초 조회 시 코드 생성. 이후 같은 id에는 항상 같은 코드."""
    code = await ledger.get_or_create_security_code(user_id, generate_security_code)
    logins = await ledger.get_logins(user_id)
    return SecurityInfoResponse(code=code, logins=logins)
