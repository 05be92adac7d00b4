# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""One-time code generation and email format checks."""

import re
import secrets
from datetime import datetime, timedelta

from otpauth_server.config import settings

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,6}$")


def is_valid_email(email: str) -> bool:
    """Basic syntactic check: local part, domain, 2-6 letter TLD."""
    return bool(EMAIL_RE.fullmatch(email or ""))


def generate_otp_code() -> str:
    """6-digit code, uniform over 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


def otp_expiry(issued_at: datetime) -> datetime:
    return issued_at + timedelta(minutes=settings.otp_expire_minutes)
