from __future__ import annotations

import os

from services.api.app.services.mail_base import MailTransport
from services.api.app.services.mail_mock import InMemoryMailTransport

_mock_transport = InMemoryMailTransport(max_history=200)


def get_mail_transport() -> MailTransport:
    """Select the outbound mail transport based on env vars.

    Defaults to the in-memory transport so tests and local dev never send real mail unless
    explicitly configured otherwise.
    """

    mode = os.getenv("BAZAAR_MAIL_TRANSPORT", "mock").strip().lower()

    if mode == "mock":
        return _mock_transport

    if mode == "smtp":
        from services.api.app.services.mail_smtp import SmtpMailTransport

        return SmtpMailTransport.from_env()

    raise ValueError(f"Unknown BAZAAR_MAIL_TRANSPORT={mode!r}. Expected mock or smtp.")
