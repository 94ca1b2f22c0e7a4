"""로컬 실행 스크립트. HOST/PORT는 설정(환경 변수)에서 로드."""
import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
    )
