"""Simple SMTP email service for report delivery.

If SMTP_HOST is not configured, emails are silently skipped.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from process_mapper.config import settings

logger = logging.getLogger(__name__)


def _is_configured() -> bool:
    return bool(settings.SMTP_HOST)


def _build_message(to: str, subject: str, body_html: str, body_text: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to
    msg["Subject"] = subject
    msg.attach(MIMEText(body_text, "plain"))
    msg.attach(MIMEText(body_html, "html"))
    return msg


def _send_sync(to: str, subject: str, body_html: str, body_text: str) -> None:
    """Send an email synchronously (called from a thread)."""
    msg = _build_message(to, subject, body_html, body_text)
    try:
        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT)
        if settings.SMTP_TLS:
            server.starttls()
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.sendmail(settings.SMTP_FROM, [to], msg.as_string())
        server.quit()
        logger.info("Email sent to %s: %s", to, subject)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email to %s", to)


async def send_email(to: str, subject: str, body_html: str, body_text: str = "") -> bool:
    """Send an email asynchronously. Returns False (no-op) if SMTP is not configured."""
    if not _is_configured():
        return False

    if not body_text:
        body_text = body_html

    await asyncio.to_thread(_send_sync, to, subject, body_html, body_text)
    return True


async def send_report_email(to: str, industry: str, report_html: str, process_count: int) -> bool:
    """Deliver the finished HTML report to the address given at the report step."""
    label = industry or "your organisation"
    subject = f"Your ISO 9001 Process Map - {label}"
    body_text = (
        f"Your ISO 9001:2015 process map for {label} is ready.\n"
        f"It contains {process_count} processes. "
        "Open this email in an HTML-capable client to view the full report."
    )
    return await send_email(to, subject, report_html, body_text)
