from __future__ import annotations

import os
import smtplib
import socket
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid

from services.api.app.services.mail_base import (
    MailMessage,
    MailTransportError,
    MailTransportTimeoutError,
)


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class _SmtpConfig:
    host: str
    port: int
    username: str
    password: str
    sender: str
    use_ssl: bool


class SmtpMailTransport:
    """Sends multipart text+HTML mail over SMTP.

    Opens one connection per message so concurrent checkouts never share client state.
    """

    name = "MAIL_SMTP"

    def __init__(self, cfg: _SmtpConfig) -> None:
        self._cfg = cfg

    @classmethod
    def from_env(cls) -> "SmtpMailTransport":
        host = os.getenv("BAZAAR_SMTP_HOST", "").strip()
        if not host:
            raise ValueError("BAZAAR_SMTP_HOST is required when BAZAAR_MAIL_TRANSPORT=smtp")

        username = os.getenv("BAZAAR_SMTP_USER", "").strip()
        sender = os.getenv("BAZAAR_MAIL_FROM", "").strip() or username
        if not sender:
            raise ValueError("BAZAAR_MAIL_FROM or BAZAAR_SMTP_USER must be set for SMTP mail")

        return cls(
            _SmtpConfig(
                host=host,
                port=int(os.getenv("BAZAAR_SMTP_PORT", "465")),
                username=username,
                password=os.getenv("BAZAAR_SMTP_PASSWORD", ""),
                sender=sender,
                use_ssl=_parse_bool(os.getenv("BAZAAR_SMTP_USE_SSL", "true")),
            )
        )

    def send(self, message: MailMessage, *, timeout: float) -> str:
        email = EmailMessage()
        email["From"] = self._cfg.sender
        email["To"] = message.to
        email["Subject"] = message.subject
        email["Message-ID"] = make_msgid()
        email.set_content(message.text_body or "This message requires an HTML capable client.")
        email.add_alternative(message.html_body, subtype="html")

        try:
            with self._connect(timeout) as client:
                if self._cfg.username:
                    client.login(self._cfg.username, self._cfg.password)
                client.send_message(email)
        except (socket.timeout, TimeoutError) as e:
            raise MailTransportTimeoutError(message.to, timeout) from e
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP delivery to {message.to} failed: {e}") from e

        return str(email["Message-ID"])

    def _connect(self, timeout: float) -> smtplib.SMTP:
        if self._cfg.use_ssl:
            return smtplib.SMTP_SSL(
                self._cfg.host,
                self._cfg.port,
                timeout=timeout,
                context=ssl.create_default_context(),
            )

        client = smtplib.SMTP(self._cfg.host, self._cfg.port, timeout=timeout)
        try:
            client.starttls(context=ssl.create_default_context())
        except Exception:
            client.close()
            raise
        return client
