# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""OtpAuth Server - Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from otpauth_server.database import init_db
from otpauth_server.routers import auth

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    from otpauth_server.config import settings
    raw = (settings.cors_origins or "*").strip()
    if raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await init_db()
    from otpauth_server.config import settings

    if settings.jwt_secret == "change-me-in-production":
        logger.warning("JWT_SECRET is the default value - set it in env before deploying")
    if not settings.smtp_host:
        logger.info("SMTP_HOST not set - verification codes will be logged instead of emailed")
    yield
    # shutdown


app = FastAPI(
    title="OtpAuth Server",
    description="Registration, email OTP verification and password login API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status, and duration for each request (no body or auth headers)."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies get the same envelope as other client errors."""
    logger.info("Invalid body for %s: %s", request.url.path, [e["loc"] for e in exc.errors()])
    content = {"success": False, "message": "Invalid request body."}
    if request.url.path.endswith("/auth/login"):
        content["token"] = None
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


# API v1
app.include_router(auth.router, prefix="/api/v1")


@app.get("/")
async def root():
    """Health check / API info."""
    return {
        "name": "OtpAuth Server",
        "version": "0.1.0",
        "api": "/api/v1",
        "docs": "/api/docs",
    }


@app.get("/api/v1/health")
async def health():
    """Health check for load balancers."""
    return {"status": "ok"}
