"""
Ledger Repository. 잔액·보안 코드·로그인 이력 저장소 추상화.
키는 Discord user id. 세 저장소는 서로 독립이며 교차 일관성 보장 없음.
라우터/서비스는 LedgerRepository 인터페이스만 의존 → 영속 백엔드로 교체 가능.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from app.schemas.user import LoginEntry

LOGIN_HISTORY_LIMIT = 20


class LedgerRepository(ABC):
    """유저별 잔액·보안 코드·로그인 이력 접근 인터페이스."""

    @abstractmethod
    async def get_balance(self, user_id: str) -> float:
        """잔액 조회. 처음 보는 id면 0 (기록하지 않음)."""

    @abstractmethod
    async def get_or_create_balance(self, user_id: str) -> float:
        """잔액 조회. 없으면 0으로 초기화 후 반환."""

    @abstractmethod
    async def set_balance(self, user_id: str, amount: float) -> None:
        """외부(입금 확인 등)에서 잔액 반영용. 현재 어떤 라우트도 호출하지 않음."""

    @abstractmethod
    async def get_or_create_security_code(
        self, user_id: str, factory: Callable[[], str]
    ) -> str:
        """보안 코드 조회. 없으면 factory()로 생성 후 저장. 이후 불변."""

    @abstractmethod
    async def prepend_login(
        self, user_id: str, entry: LoginEntry, limit: int = LOGIN_HISTORY_LIMIT
    ) -> None:
        """로그인 이력 맨 앞에 추가하고 최근 limit건만 유지."""

    @abstractmethod
    async def get_logins(self, user_id: str) -> list[LoginEntry]:
        """로그인 이력(최신순). 없으면 빈 리스트."""


class InMemoryLedger(LedgerRepository):
    """
    프로세스 메모리 구현. 재시작 시 전부 소실.
    get-or-create는 잠금 없음: 동시 최초 접근 시 둘 다 초기값을 쓸 수 있으나
    값이 0이거나 어느 쪽 코드든 유효하므로 허용.
    """

    def __init__(self) -> None:
        self._balances: dict[str, float] = {}
        self._security_codes: dict[str, str] = {}
        self._login_history: dict[str, list[LoginEntry]] = {}

    async def get_balance(self, user_id: str) -> float:
        return self._balances.get(user_id, 0)

    async def get_or_create_balance(self, user_id: str) -> float:
        if user_id not in self._balances:
            self._balances[user_id] = 0
        return self._balances[user_id]

    async def set_balance(self, user_id: str, amount: float) -> None:
        self._balances[user_id] = amount

    async def get_or_create_security_code(
        self, user_id: str, factory: Callable[[], str]
    ) -> str:
        code = self._security_codes.get(user_id)
        if not code:
            code = factory()
            self._security_codes[user_id] = code
        return code

    async def prepend_login(
        self, user_id: str, entry: LoginEntry, limit: int = LOGIN_HISTORY_LIMIT
    ) -> None:
        history = self._login_history.get(user_id, [])
        self._login_history[user_id] = [entry, *history][:limit]

    async def get_logins(self, user_id: str) -> list[LoginEntry]:
        return list(self._login_history.get(user_id, []))
