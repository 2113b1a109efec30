"""Outgoing email transports.

`SMTPEmailSender` talks to a real server; `ConsoleEmailSender` only logs,
which is what development and test settings use.
"""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, *, to: str, subject: str, html: str) -> None:
        """Deliver one message; raises on failure."""

        raise NotImplementedError


def build_message(*, sender: str, to: str, subject: str, html: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML-capable mail client.")
    msg.add_alternative(html, subtype="html")
    return msg


class SMTPEmailSender:
    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
        sender: str = "seminex@example.com",
    ):
        self._host = host
        self._port = int(port)
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = float(timeout)
        self._sender = sender

    def send(self, *, to: str, subject: str, html: str) -> None:
        msg = build_message(sender=self._sender, to=to, subject=subject, html=html)
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls()
            if self._username:
                server.login(self._username, self._password or "")
            server.send_message(msg)
        logger.info("Email sent to %s: %s", to, subject)


class ConsoleEmailSender:
    def __init__(self, *, sender: str = "seminex@example.com"):
        self._sender = sender
        self.outbox: list[EmailMessage] = []

    def send(self, *, to: str, subject: str, html: str) -> None:
        msg = build_message(sender=self._sender, to=to, subject=subject, html=html)
        self.outbox.append(msg)
        logger.info("EMAIL (not sent) from=%s to=%s subject=%s\n%s", self._sender, to, subject, html)


def build_sender(settings: Any) -> EmailSender:
    """Pick the transport named by MAIL_BACKEND ('smtp' or 'console')."""

    backend = str(getattr(settings, "MAIL_BACKEND", "console")).lower()
    sender = getattr(settings, "MAIL_FROM", "seminex@example.com")
    if backend == "smtp":
        return SMTPEmailSender(
            host=getattr(settings, "SMTP_HOST", "localhost"),
            port=int(getattr(settings, "SMTP_PORT", 587)),
            username=getattr(settings, "SMTP_USER", None) or None,
            password=getattr(settings, "SMTP_PASSWORD", None) or None,
            use_tls=bool(getattr(settings, "SMTP_USE_TLS", True)),
            timeout=float(getattr(settings, "SMTP_TIMEOUT", 10)),
            sender=sender,
        )
    return ConsoleEmailSender(sender=sender)
