# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Account errors. Each carries the HTTP status and a message safe to show callers."""

from fastapi import status


class AccountError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AccountError):
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(AccountError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidCodeError(AccountError):
    """No unused code matches. Wrong and already-used codes look the same."""

    status_code = status.HTTP_400_BAD_REQUEST


class ExpiredCodeError(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AccountError):
    """Unknown email and wrong password share this error and its message."""

    status_code = status.HTTP_401_UNAUTHORIZED


class DeliveryError(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServerError(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
