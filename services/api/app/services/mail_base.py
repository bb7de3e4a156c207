from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class MailTransportError(Exception):
    """Base class for mail transport errors."""


class MailTransportTimeoutError(MailTransportError):
    def __init__(self, recipient: str, timeout_s: float) -> None:
        super().__init__(f"Mail to {recipient} timed out after {timeout_s:.1f}s")
        self.recipient = recipient
        self.timeout_s = timeout_s


@dataclass(frozen=True, slots=True)
class MailMessage:
    to: str
    subject: str
    html_body: str
    text_body: str = ""


class MailTransport(Protocol):
    name: str

    def send(self, message: MailMessage, *, timeout: float) -> str:
        """Deliver one message and return a transport message id."""
        ...
