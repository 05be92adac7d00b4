# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication: JWT signing and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from otpauth_server.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


class TokenSigner:
    """Issues and decodes signed access tokens with a fixed validity window."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(hours=1),
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def sign(self, claims: dict[str, Any]) -> str:
        """Create a JWT carrying ``claims`` plus an ``exp`` claim."""
        to_encode = claims.copy()
        to_encode.update({"exp": datetime.now(timezone.utc) + self.expires_delta})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. None if invalid or expired."""
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None


def get_token_signer() -> TokenSigner:
    """Dependency for FastAPI that builds the signer from settings."""
    return TokenSigner(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(minutes=settings.jwt_expire_minutes),
    )
