from fastapi import APIRouter

from .endpoints.health import router as health_router
from .endpoints.vcard import router as vcard_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Cardex vCard API is running"}


api_router.include_router(health_router)
api_router.include_router(vcard_router)
