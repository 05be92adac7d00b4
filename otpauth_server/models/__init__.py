# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database models."""

from otpauth_server.models.base import Base
from otpauth_server.models.user import User
from otpauth_server.models.one_time_code import OneTimeCode

__all__ = [
    "Base",
    "User",
    "OneTimeCode",
]
