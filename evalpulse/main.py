"""evalpulse FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from evalpulse.api.config import router as config_router
from evalpulse.api.evaluations import router as evaluations_router
from evalpulse.api.health import router as health_router
from evalpulse.api.ingest import router as ingest_router
from evalpulse.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="evalpulse - Agent Evaluation Log",
    description="Ingests and serves evaluation records from AI agents with per-user sampling and daily quotas",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_allow_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(ingest_router, prefix="/v1", tags=["Ingestion"])
app.include_router(evaluations_router, prefix="/v1", tags=["Evaluations"])
app.include_router(config_router, prefix="/v1", tags=["Config"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "evalpulse", "version": "0.1.0", "docs": "/docs"}
