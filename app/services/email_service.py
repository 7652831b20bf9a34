"""Send transactional email (welcome, password reset, script ready)."""

import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Any

from app.config import get_settings

logger = logging.getLogger(__name__)


def _dashboard_link() -> str:
    settings = get_settings()
    return f"{settings.frontend_url.rstrip('/')}/dashboard"


def send_email(to_email: str, subject: str, body: str) -> bool:
    """Send a plain-text email. Returns False when SMTP is not configured."""
    settings = get_settings()
    if not settings.smtp_host:
        logger.info("SMTP not configured; skipping email %r to %s", subject, to_email)
        return False
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    msg.attach(MIMEText(body, "plain"))

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as smtp:
        if settings.smtp_use_tls:
            smtp.starttls()
        if settings.smtp_user and settings.smtp_password:
            smtp.login(settings.smtp_user, settings.smtp_password)
        smtp.sendmail(settings.smtp_from, [to_email], msg.as_string())
    return True


def send_welcome_email(to_email: str, full_name: str) -> bool:
    body = f"""Welcome to ScriptGo, {full_name}!

We're thrilled to have you on board. ScriptGo helps you create social media scripts with AI.
Start generating your first script today:

{_dashboard_link()}

If you didn't create an account, you can safely ignore this email.
"""
    return send_email(to_email, "Welcome to ScriptGo!", body)


def send_password_reset_email(to_email: str, reset_token: str) -> bool:
    """
    Send email with reset link. Link is frontend_url + password_reset_link_path + ?token=...
    """
    settings = get_settings()
    link = f"{settings.frontend_url.rstrip('/')}{settings.password_reset_link_path}?token={reset_token}"
    body = f"""Hello,

We received a request to reset your ScriptGo password. Open the link below to choose a new one:

{link}

This link expires in {settings.password_reset_expire_minutes} minutes. If you didn't request this, you can ignore this email.
"""
    return send_email(to_email, "Reset Your ScriptGo Password", body)


def format_script_content(content: Any) -> str:
    """Plain-text rendering of rows, a single pair, or calendar entries."""

    def pair(row: Any) -> str:
        if not isinstance(row, dict):
            return str(row)
        return f"Visual: {row.get('visual', '')}\nAudio: {row.get('audio', '')}"

    if isinstance(content, dict):
        return pair(content)
    if not isinstance(content, list):
        return str(content or "")
    blocks = []
    for item in content:
        if isinstance(item, dict) and "day" in item:
            rows = item.get("script") or item.get("content") or []
            if isinstance(rows, dict):
                rows = [rows]
            lines = [f"Day {item.get('day')}: {item.get('title', '')}"]
            lines.extend(pair(r) for r in rows)
            blocks.append("\n".join(lines))
        else:
            blocks.append(pair(item))
    return "\n\n".join(blocks)


def send_script_ready_email(to_email: str, script_title: str, content: Any) -> bool:
    body = f"""Your script is ready!

Title: {script_title}

{format_script_content(content)}

View it in your dashboard: {_dashboard_link()}

Generated by ScriptGo AI.
"""
    return send_email(to_email, f"Your Script is Ready: {script_title}", body)
