# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication API routes."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from otpauth_server.api.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    VerifyOtpRequest,
)
from otpauth_server.auth import TokenSigner, get_token_signer
from otpauth_server.config import settings
from otpauth_server.database import get_db
from otpauth_server.errors import AccountError, ServerError
from otpauth_server.services import accounts
from otpauth_server.services.email import EmailSender, get_email_sender

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _error_response(err: AccountError, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content={"success": False, "message": err.message, **extra},
    )


async def _server_error(db: AsyncSession, message: str, **extra) -> JSONResponse:
    """Roll back whatever the failed request left pending and answer 500."""
    try:
        await db.rollback()
    except Exception:
        logger.exception("Rollback after server error failed")
    return _error_response(ServerError(message), **extra)


@router.post("/register", response_model=MessageResponse)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    send_email: EmailSender = Depends(get_email_sender),
):
    """Create an unverified account and email a verification OTP."""
    logger.info("Register request for %s", data.email)
    try:
        await accounts.register_user(
            db,
            full_name=data.full_name,
            phone_number=data.phone_number,
            email=data.email,
            password=data.password,
            send_email=send_email,
        )
    except AccountError as e:
        return _error_response(e)
    except Exception:
        logger.exception("Server error during registration")
        return await _server_error(db, "Server error. Please try again later.")
    return MessageResponse(
        success=True,
        message="Registration successful. Please verify your email.",
    )


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    data: VerifyOtpRequest,
    db: AsyncSession = Depends(get_db),
):
    """Verify email with the one-time code."""
    try:
        await accounts.verify_otp(db, data.email, data.otp)
    except AccountError as e:
        return _error_response(e)
    except Exception:
        logger.exception("Server error during OTP verification")
        return await _server_error(db, "Server error")
    return MessageResponse(success=True, message="Email verified successfully.")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
):
    """Authenticate and return JWT."""
    try:
        token = await accounts.authenticate(
            db,
            data.email,
            data.password,
            signer,
            require_verified=settings.require_verified_login,
        )
    except AccountError as e:
        return _error_response(e, token=None)
    except Exception:
        logger.exception("Server error during login")
        return await _server_error(db, "Server error", token=None)
    return LoginResponse(success=True, message="Login successful", token=token)
