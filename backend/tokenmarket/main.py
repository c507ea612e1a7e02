import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.api.routes.listings import router as listings_router
from tokenmarket.api.routes.volumes import router as volumes_router
from tokenmarket.core.config import settings
from tokenmarket.core.database import engine, get_session
from tokenmarket.services.cache import CacheService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await CacheService.close()
    await engine.dispose()


app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(volumes_router, prefix="/api/v1")
app.include_router(listings_router, prefix="/api/v1")


@app.get("/health")
async def health(session: AsyncSession = Depends(get_session)):
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "db": db_status,
        "cache": "connected" if await CacheService.health_check() else "unavailable",
    }
