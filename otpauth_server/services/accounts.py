# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Account registration, OTP verification and password login."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from otpauth_server.auth import TokenSigner, hash_password, verify_password
from otpauth_server.errors import (
    AuthError,
    ConflictError,
    DeliveryError,
    ExpiredCodeError,
    InvalidCodeError,
    NotFoundError,
    ValidationError,
)
from otpauth_server.models import OneTimeCode, User
from otpauth_server.models.timestamp import as_utc, utcnow
from otpauth_server.services.email import EmailSender
from otpauth_server.services.otp import generate_otp_code, is_valid_email, otp_expiry

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def find_unused_code(db: AsyncSession, user_id: int, code: str) -> OneTimeCode | None:
    """Latest unused code for the user matching ``code``. Expiry is checked by the caller."""
    result = await db.execute(
        select(OneTimeCode)
        .where(
            OneTimeCode.user_id == user_id,
            OneTimeCode.code == code,
            OneTimeCode.is_used == False,  # noqa: E712
        )
        .order_by(OneTimeCode.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _discard(db: AsyncSession, email: str) -> None:
    """Roll back a pending registration. A failed rollback is logged, not hidden."""
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback of pending registration for %s failed", email)
        # Returning the connection to the pool discards the open transaction
        await db.close()


async def register_user(
    db: AsyncSession,
    *,
    full_name: str | None,
    phone_number: str | None,
    email: str,
    password: str,
    send_email: EmailSender,
) -> User:
    """
    Create an unverified user and email them a one-time code.

    User and code are written in one unit of work that is only committed after
    the email goes out; on delivery failure both are discarded.
    """
    if not is_valid_email(email):
        raise ValidationError("Invalid email format.")
    if await get_user_by_email(db, email):
        raise ConflictError("Email already registered.")

    user = User(
        full_name=full_name,
        phone_number=phone_number,
        email=email,
        password_hash=hash_password(password),
        is_email_verified=False,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration; the unique index decides
        await _discard(db, email)
        raise ConflictError("Email already registered.")

    issued_at = utcnow()
    code = generate_otp_code()
    db.add(
        OneTimeCode(
            user_id=user.id,
            code=code,
            created_at=issued_at,
            expires_at=otp_expiry(issued_at),
        )
    )
    await db.flush()

    try:
        await send_email(email, "Verify your email", f"Your verification OTP is: {code}")
    except Exception:
        logger.exception("Error sending verification email to %s", email)
        await _discard(db, email)
        raise DeliveryError("Failed to send verification email. Please try again later.")

    await db.commit()
    logger.info("Registered user %s (id=%s)", email, user.id)
    return user


async def verify_otp(db: AsyncSession, email: str, code: str) -> User:
    """Consume an unused, unexpired code and mark the user's email verified."""
    user = await get_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found.")
    otp = await find_unused_code(db, user.id, code)
    if not otp:
        raise InvalidCodeError("Invalid OTP.")
    if as_utc(otp.expires_at) < utcnow():
        raise ExpiredCodeError("OTP expired.")

    otp.is_used = True
    user.is_email_verified = True
    await db.commit()
    logger.info("Email verified for user id=%s", user.id)
    return user


async def authenticate(
    db: AsyncSession,
    email: str,
    password: str,
    signer: TokenSigner,
    require_verified: bool = False,
) -> str:
    """Check credentials and return a signed access token."""
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError(INVALID_CREDENTIALS)
    if require_verified and not user.is_email_verified:
        raise AuthError(INVALID_CREDENTIALS)
    return signer.sign({"sub": str(user.id)})
