# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic schemas for API request/response."""

from pydantic import BaseModel, ConfigDict, Field


# Requests. Emails are plain strings: format is checked by the handler (400, not 422).
class RegisterRequest(BaseModel):
    full_name: str | None = Field(default=None, alias="fullName")
    phone_number: str | None = Field(default=None, alias="phoneNumber")
    email: str
    password: str

    model_config = ConfigDict(populate_by_name=True)


class VerifyOtpRequest(BaseModel):
    email: str
    # Clients may send the code as a JSON number
    otp: str

    model_config = ConfigDict(coerce_numbers_to_str=True)


class LoginRequest(BaseModel):
    email: str
    password: str


# Responses
class MessageResponse(BaseModel):
    success: bool
    message: str


class LoginResponse(MessageResponse):
    token: str | None = None
