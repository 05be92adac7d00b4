# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User model."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otpauth_server.models.base import Base
from otpauth_server.models.one_time_code import OneTimeCode
from otpauth_server.models.timestamp import TimestampMixin


class User(Base, TimestampMixin):
    """Registered account. Unverified until an emailed OTP is confirmed."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Unique at the storage layer; concurrent registrations race on this index
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    one_time_codes: Mapped[list["OneTimeCode"]] = relationship(
        "OneTimeCode", back_populates="user", cascade="all, delete-orphan"
    )
