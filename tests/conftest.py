# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest fixtures. Tests run against an in-memory SQLite database."""

import os
import re

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("SMTP_HOST", None)
os.environ.pop("REQUIRE_VERIFIED_LOGIN", None)
os.environ.pop("JWT_EXPIRE_MINUTES", None)
os.environ.pop("OTP_EXPIRE_MINUTES", None)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from otpauth_server.database import drop_db, init_db  # noqa: E402
from otpauth_server.main import app  # noqa: E402
from otpauth_server.services.email import EmailDeliveryError, get_email_sender  # noqa: E402


class FakeMailer:
    """Records sent mail; set ``fail`` to simulate an SMTP outage."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    async def __call__(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise EmailDeliveryError("SMTP unavailable")
        self.sent.append((to, subject, body))

    def last_code(self, to: str) -> str:
        bodies = [body for addr, _, body in self.sent if addr == to]
        assert bodies, f"no mail sent to {to}"
        return re.search(r"\b(\d{6})\b", bodies[-1]).group(1)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def database():
    await init_db()
    yield
    await drop_db()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
async def client(database, mailer):
    app.dependency_overrides[get_email_sender] = lambda: mailer
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
