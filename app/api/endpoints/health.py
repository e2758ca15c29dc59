from fastapi import APIRouter

from app.core.version import __version__
from app.services.profile_store import profile_store

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness probe")
async def health_check() -> dict[str, str]:
    redis_ok = await profile_store.ping()
    return {"status": "ok" if redis_ok else "degraded", "version": __version__}
