# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""OTP generation and email format checks."""

from datetime import datetime, timedelta, timezone

import pytest

from otpauth_server.services.otp import generate_otp_code, is_valid_email, otp_expiry


def test_generated_codes_are_six_digits_in_range():
    for _ in range(500):
        code = generate_otp_code()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_expiry_is_ten_minutes_after_issue():
    issued = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert otp_expiry(issued) == issued + timedelta(minutes=10)


@pytest.mark.parametrize(
    "email",
    ["a@b.co", "jane.doe@example.com", "x_y-z@mail.example.museum", "A1@sub.domain.org"],
)
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "not-an-email",
        "",
        "a@b.c",
        "a@b.abcdefg",
        "a b@example.com",
        "a+tag@example.com",
        "@example.com",
        "a@example",
        "a@b.co\n",
    ],
)
def test_invalid_emails(email):
    assert not is_valid_email(email)
