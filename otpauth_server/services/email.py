# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Email sending service. Logs to console when SMTP not configured."""

import asyncio
import logging
import smtplib
from collections.abc import Awaitable, Callable
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from otpauth_server.config import settings

logger = logging.getLogger(__name__)

EmailSender = Callable[[str, str, str], Awaitable[None]]


class EmailDeliveryError(Exception):
    """SMTP delivery failed."""


def wrap_body_html(plain_body: str) -> str:
    """Wrap plain text body in minimal HTML."""
    body_escaped = plain_body.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace("\n", "<br>\n")
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: system-ui, sans-serif; color: #333; max-width: 560px;">
<div style="white-space: pre-wrap;">{body_escaped}</div>
</body>
</html>"""


def build_message(to: str, subject: str, body: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to
    msg.attach(MIMEText(body, "plain"))
    msg.attach(MIMEText(wrap_body_html(body), "html"))
    return msg


def _deliver(to: str, msg: MIMEMultipart) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        if settings.smtp_user:
            server.login(settings.smtp_user, settings.smtp_password or "")
        server.sendmail(settings.smtp_from, [to], msg.as_string())


async def send_email(to: str, subject: str, body: str) -> None:
    """Send an email (plain and HTML). Raises EmailDeliveryError if SMTP fails."""
    if not settings.smtp_host:
        logger.info("Email (SMTP not configured): To=%s Subject=%s Body=%s", to, subject, body[:200])
        return
    msg = build_message(to, subject, body)
    try:
        await asyncio.to_thread(_deliver, to, msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.exception("Failed to send email to %s", to)
        raise EmailDeliveryError(str(e)) from e


def get_email_sender() -> EmailSender:
    """Dependency for FastAPI returning the email sender."""
    return send_email
