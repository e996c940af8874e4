from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carenav.api.middleware import AuditMiddleware
from carenav.api.v1.router import v1_router
from carenav.common.logging import get_logger, setup_logging
from carenav.config import settings
from carenav.integrations import AIClient, StorageClient

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Ensure local storage directory exists
    Path(settings.STORAGE_LOCAL_PATH).mkdir(parents=True, exist_ok=True)
    logger.info("CareNav starting (env=%s, ai=%s)", settings.APP_ENV, AIClient().mode)
    yield


app = FastAPI(
    title="CareNav API",
    description="Step-by-step help for healthcare insurance and billing problems",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuditMiddleware)

# API routes
app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    integrations = [await client.status() for client in (AIClient(), StorageClient())]
    return {
        "status": "healthy" if all(i["healthy"] for i in integrations) else "degraded",
        "service": "carenav",
        "version": "1.0.0",
        "env": settings.APP_ENV,
        "integrations": integrations,
    }
