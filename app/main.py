import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.api import api_router
from app.core.config import settings
from app.core.logging import log_requests, setup_logging
from app.db.database import init_db, close_db, AsyncSessionLocal
from app.db.repository import build_repository
from app.db.seed import seed_data

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup: create tables and seed data
    await init_db()
    logger.info(f"Using '{settings.STORAGE_BACKEND}' storage backend")
    if settings.SEED_ON_STARTUP:
        async with AsyncSessionLocal() as session:
            await seed_data(build_repository(session))
    yield
    # Shutdown: close database connections
    await close_db()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.middleware("http")(log_requests)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=600,
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {"message": "Emergency Home Services API Active!", "version": "1.0.0"}
