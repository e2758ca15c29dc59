from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.main import api_router
from app.services.profile_store import profile_store
from app.services.vcard_service import vcard_service

from .config import settings
from .version import __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    yield
    try:
        await vcard_service.close()
        logger.info("Photo HTTP client closed")
    except Exception as exc:
        logger.warning(f"Failed to close photo HTTP client: {exc}")
    await profile_store.close()


app = FastAPI(
    title=settings.APP_NAME,
    description="vCard 3.0 export for Cardex digital business cards",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.APP_ENV != "development" else "/docs",
    redoc_url=None if settings.APP_ENV != "development" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    expose_headers=["Content-Disposition"],
)

app.include_router(api_router)
