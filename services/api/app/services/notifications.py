"""Checkout notification fan-out.

The customer confirmation and one message per vendor group are sent as independent tasks
on a bounded thread pool. A failure or stall for one recipient never cancels the others,
and nothing raised here can fail a checkout whose order is already committed.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog
from services.api.app.services.checkout_base import VendorGroup
from services.api.app.services.mail_base import (
    MailMessage,
    MailTransport,
    MailTransportError,
    MailTransportTimeoutError,
)
from services.api.app.services.mail_templates import (
    CustomerConfirmationTemplate,
    VendorNewOrderTemplate,
)

logger = structlog.get_logger(__name__)


class RecipientKind(str, Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    TIMEOUT = "timeout"


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    recipient: str
    kind: RecipientKind
    status: DeliveryStatus
    attempts: int
    message_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.SENT


class NotificationDispatcher:
    def __init__(
        self,
        transport: MailTransport,
        *,
        max_workers: int = 8,
        message_timeout_s: float = 10.0,
        max_attempts: int = 2,
    ) -> None:
        self._transport = transport
        self._max_workers = max(1, max_workers)
        self._message_timeout_s = message_timeout_s
        self._max_attempts = max(1, max_attempts)

    def dispatch(
        self,
        *,
        order_id: str,
        total_cost: float,
        client_details: dict[str, Any],
        cart_items: list[dict[str, Any]],
        vendor_groups: list[VendorGroup],
        deadline: float | None = None,
    ) -> list[DeliveryResult]:
        """Send all checkout mail and return one result per recipient.

        Results are ordered customer first, then vendor groups in cart order. ``deadline`` is a
        ``time.monotonic()`` value; recipients still pending when it passes are reported as
        timed out and left to finish in the background.
        """

        jobs: list[tuple[RecipientKind, MailMessage]] = [
            (
                RecipientKind.CUSTOMER,
                CustomerConfirmationTemplate.render(
                    order_id=order_id,
                    total_cost=total_cost,
                    client_details=client_details,
                    cart_items=cart_items,
                ),
            )
        ]
        for group in vendor_groups:
            jobs.append(
                (
                    RecipientKind.VENDOR,
                    VendorNewOrderTemplate.render(
                        order_id=order_id,
                        group=group,
                        client_details=client_details,
                    ),
                )
            )

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(jobs)),
            thread_name_prefix=f"notify-{order_id}",
        )
        try:
            futures = [
                executor.submit(self._deliver, kind, message, deadline) for kind, message in jobs
            ]
            timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
            done, _pending = wait(futures, timeout=timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        results: list[DeliveryResult] = []
        for (kind, message), future in zip(jobs, futures):
            if future in done:
                results.append(future.result())
            else:
                results.append(
                    DeliveryResult(
                        recipient=message.to,
                        kind=kind,
                        status=DeliveryStatus.TIMEOUT,
                        attempts=0,
                        error="Checkout deadline exceeded before delivery finished",
                    )
                )

        for result in results:
            if not result.ok:
                logger.warning(
                    "notification_failed",
                    order_id=order_id,
                    recipient=result.recipient,
                    kind=result.kind.value,
                    status=result.status.value,
                    attempts=result.attempts,
                    error=result.error,
                )

        return results

    def _deliver(
        self,
        kind: RecipientKind,
        message: MailMessage,
        deadline: float | None,
    ) -> DeliveryResult:
        status = DeliveryStatus.FAILED
        error: str | None = None
        attempts = 0

        while attempts < self._max_attempts:
            timeout = self._message_timeout_s
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    status = DeliveryStatus.TIMEOUT
                    error = error or "Checkout deadline exceeded"
                    break
                timeout = min(timeout, remaining)

            attempts += 1
            try:
                message_id = self._transport.send(message, timeout=timeout)
            except MailTransportTimeoutError as e:
                status, error = DeliveryStatus.TIMEOUT, str(e)
            except MailTransportError as e:
                status, error = DeliveryStatus.FAILED, str(e)
            except Exception as e:
                logger.exception("mail_transport_crashed", recipient=message.to)
                status, error = DeliveryStatus.FAILED, f"{type(e).__name__}: {e}"
            else:
                return DeliveryResult(
                    recipient=message.to,
                    kind=kind,
                    status=DeliveryStatus.SENT,
                    attempts=attempts,
                    message_id=message_id,
                )

        return DeliveryResult(
            recipient=message.to,
            kind=kind,
            status=status,
            attempts=attempts,
            error=error,
        )
