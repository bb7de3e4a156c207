from __future__ import annotations

import threading
from collections import deque
from uuid import uuid4

from services.api.app.services.mail_base import MailMessage, MailTransportError


class InMemoryMailTransport:
    """Records send attempts; deliveries to ``failing_recipients`` raise.

    History keeps the most recent ``max_history`` messages so a long-running dev server
    does not grow without bound.
    """

    name = "MAIL_MOCK"

    def __init__(
        self, failing_recipients: set[str] | None = None, *, max_history: int = 1000
    ) -> None:
        self.failing_recipients: set[str] = set(failing_recipients or ())
        self.attempts: deque[MailMessage] = deque(maxlen=max_history)
        self.sent: deque[MailMessage] = deque(maxlen=max_history)
        self._lock = threading.Lock()

    def send(self, message: MailMessage, *, timeout: float) -> str:
        del timeout

        with self._lock:
            self.attempts.append(message)

        if message.to in self.failing_recipients:
            raise MailTransportError(f"Mailbox unavailable: {message.to}")

        with self._lock:
            self.sent.append(message)
        return f"mail_{uuid4().hex[:10]}"

    def reset(self) -> None:
        with self._lock:
            self.attempts.clear()
            self.sent.clear()
        self.failing_recipients.clear()
