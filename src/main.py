"""HAR Report — performance reports built from HAR traffic analyses."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import settings
from src.log_config import configure_logging
from src.middleware.api_key_auth import ApiKeyAuthMiddleware
from src.routes import reports


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(log_format=settings.log_format, debug=settings.debug)
    yield


app = FastAPI(
    title="HAR Report",
    description="Aggregates HAR traffic analyses into ranked performance reports",
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ApiKeyAuthMiddleware)

app.include_router(reports.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "har-report", "version": settings.api_version}
