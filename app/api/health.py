"""Health check 엔드포인트. 외부 호출 없이 설정 상태만 보고."""

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def get_health() -> dict[str, str]:
    """헬스 체크. payments: MERCADO_PAGO_ACCESS_TOKEN 설정 여부(enabled | disabled)."""
    return {
        "status": "ok",
        "payments": "enabled" if settings.payments_enabled else "disabled",
    }
