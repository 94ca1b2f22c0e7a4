"""API 예외. main의 exception handler가 {"error": message} JSON으로 변환."""


class ApiError(Exception):
    """라우터/의존성에서 발생시키는 클라이언트 응답용 예외."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
