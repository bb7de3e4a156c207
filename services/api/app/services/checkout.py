"""Checkout orchestration.

One ``CheckoutOrchestrator`` serves exactly one request and walks a fixed sequence of states:

    VALIDATING -> LOOKING_UP_CATALOG -> PARTITIONING -> PERSISTING -> NOTIFYING -> COMPLETED

Any state before NOTIFYING can end in ABORTED. Once the order row is committed the run always
completes; notification problems are recorded, never raised.
"""

from __future__ import annotations

import copy
import os
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

import structlog
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from pydantic import ValidationError
from services.api.app.db.models import EventLog
from services.api.app.models.checkout import CheckoutRequest
from services.api.app.services.catalog import lookup_products
from services.api.app.services.checkout_base import (
    CheckoutError,
    CheckoutValidationError,
    NewOrder,
    OrderIdConflictError,
    StorageError,
    VendorGroup,
)
from services.api.app.services.mail_base import MailTransport
from services.api.app.services.notifications import DeliveryResult, NotificationDispatcher
from services.api.app.services.order_id import generate_order_id
from services.api.app.services.order_store import OrderStore
from services.api.app.services.partition import partition_by_vendor
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)


class CheckoutState(str, Enum):
    VALIDATING = "VALIDATING"
    LOOKING_UP_CATALOG = "LOOKING_UP_CATALOG"
    PARTITIONING = "PARTITIONING"
    PERSISTING = "PERSISTING"
    NOTIFYING = "NOTIFYING"
    COMPLETED = "COMPLETED"
    ABORTED = "ABORTED"


@dataclass(frozen=True, slots=True)
class CheckoutSettings:
    deadline_s: float = 20.0
    notify_timeout_s: float = 10.0
    notify_max_workers: int = 8
    notify_max_attempts: int = 2
    order_id_max_attempts: int = 5

    @classmethod
    def from_env(cls) -> "CheckoutSettings":
        return cls(
            deadline_s=float(os.getenv("BAZAAR_CHECKOUT_DEADLINE_S", "20")),
            notify_timeout_s=float(os.getenv("BAZAAR_NOTIFY_TIMEOUT_S", "10")),
            notify_max_workers=int(os.getenv("BAZAAR_NOTIFY_MAX_WORKERS", "8")),
            notify_max_attempts=int(os.getenv("BAZAAR_NOTIFY_MAX_ATTEMPTS", "2")),
            order_id_max_attempts=int(os.getenv("BAZAAR_ORDER_ID_MAX_ATTEMPTS", "5")),
        )


@dataclass(frozen=True, slots=True)
class CheckoutOutcome:
    order_id: str
    order_date: datetime
    total_cost: float
    vendor_groups: list[VendorGroup]
    deliveries: list[DeliveryResult] = field(default_factory=list)


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """Render pydantic error details as "<loc>: <msg>" strings.

    FastAPI prefixes request-body locations with "body"; that element is dropped.
    """
    messages: list[str] = []
    for detail in errors:
        parts = [str(part) for part in detail.get("loc", ())]
        if parts and parts[0] == "body":
            parts = parts[1:]
        loc = ".".join(parts)
        messages.append(f"{loc}: {detail['msg']}" if loc else detail["msg"])
    return messages


class CheckoutOrchestrator:
    def __init__(
        self,
        db: Session,
        transport: MailTransport,
        *,
        settings: CheckoutSettings | None = None,
        order_id_factory: Callable[[], str] = generate_order_id,
    ) -> None:
        self._db = db
        self._store = OrderStore(db)
        self._settings = settings or CheckoutSettings()
        self._dispatcher = NotificationDispatcher(
            transport,
            max_workers=self._settings.notify_max_workers,
            message_timeout_s=self._settings.notify_timeout_s,
            max_attempts=self._settings.notify_max_attempts,
        )
        self._order_id_factory = order_id_factory
        self._started = False

        self.state = CheckoutState.VALIDATING
        self.abort_reason: CheckoutError | None = None

    def run(self, payload: Any) -> CheckoutOutcome:
        if self._started:
            raise RuntimeError("CheckoutOrchestrator instances serve a single checkout")
        self._started = True

        deadline = time.monotonic() + self._settings.deadline_s

        try:
            request = self._validate(payload)

            self._enter(CheckoutState.LOOKING_UP_CATALOG)
            catalog = lookup_products(self._db, (item.slug for item in request.cart_items))

            self._enter(CheckoutState.PARTITIONING)
            groups = partition_by_vendor(request.cart_items, catalog)

            self._enter(CheckoutState.PERSISTING)
            order = self._persist(request, payload, groups)
        except CheckoutError as e:
            self._abort(e)
            raise
        except Exception as e:
            err = StorageError("Failed to place order")
            self._abort(err)
            raise err from e

        self._enter(CheckoutState.NOTIFYING)
        deliveries = self._notify(order, deadline)

        self._enter(CheckoutState.COMPLETED)
        return CheckoutOutcome(
            order_id=order.order_id,
            order_date=order.order_date,
            total_cost=order.total_cost,
            vendor_groups=order.vendor_groups,
            deliveries=deliveries,
        )

    def _enter(self, state: CheckoutState) -> None:
        logger.debug("checkout_state", previous=self.state.value, state=state.value)
        self.state = state

    def _abort(self, reason: CheckoutError) -> None:
        logger.info(
            "checkout_aborted",
            state=self.state.value,
            reason=type(reason).__name__,
            detail=str(reason),
        )
        self.state = CheckoutState.ABORTED
        self.abort_reason = reason

    def _validate(self, payload: Any) -> CheckoutRequest:
        try:
            request = CheckoutRequest.model_validate(payload)
        except ValidationError as e:
            raise CheckoutValidationError(format_validation_errors(e.errors())) from e

        line_total = sum(
            (item.discounted_price if item.discounted_price is not None else item.product_price)
            * item.quantity
            for item in request.cart_items
        )
        if abs(line_total - request.total_cost) > 0.005:
            # totalCost is recorded as submitted; the mismatch is only surfaced.
            logger.warning(
                "checkout_total_mismatch",
                submitted_total=request.total_cost,
                line_total=round(line_total, 2),
            )

        return request

    def _persist(
        self, request: CheckoutRequest, payload: Mapping[str, Any], groups: list[VendorGroup]
    ) -> NewOrder:
        # Snapshots are the submitted JSON, not the coerced model values.
        client_details = copy.deepcopy(payload["clientDetails"])
        cart_items = copy.deepcopy(payload["cartItems"])

        for attempt in range(1, self._settings.order_id_max_attempts + 1):
            new_order = NewOrder(
                order_id=self._order_id_factory(),
                client_details=client_details,
                cart_items=cart_items,
                total_cost=request.total_cost,
                vendor_groups=groups,
            )
            try:
                self._store.create(new_order)
            except OrderIdConflictError:
                logger.warning("order_id_collision", order_id=new_order.order_id, attempt=attempt)
                continue

            logger.info(
                "order_placed",
                order_id=new_order.order_id,
                lines=len(cart_items),
                vendors=len({g.store_id for g in groups}),
            )
            return new_order

        raise StorageError("Could not allocate a unique order id")

    def _notify(self, order: NewOrder, deadline: float) -> list[DeliveryResult]:
        try:
            deliveries = self._dispatcher.dispatch(
                order_id=order.order_id,
                total_cost=order.total_cost,
                client_details=order.client_details,
                cart_items=order.cart_items,
                vendor_groups=order.vendor_groups,
                deadline=deadline,
            )
        except Exception:
            logger.exception("notification_dispatch_crashed", order_id=order.order_id)
            deliveries = []

        self._record_events(order, deliveries)
        return deliveries

    def _record_events(self, order: NewOrder, deliveries: list[DeliveryResult]) -> None:
        _log_event(
            self._db,
            entity_type=EntityTypeV1.ORDER.value,
            entity_id=order.order_id,
            event_type=EventTypeV1.ORDER_PLACED.value,
            event_payload={
                "total_cost": order.total_cost,
                "vendor_store_ids": [g.store_id for g in order.vendor_groups],
            },
        )
        for d in deliveries:
            _log_event(
                self._db,
                entity_type=EntityTypeV1.NOTIFICATION.value,
                entity_id=order.order_id,
                event_type=(
                    EventTypeV1.NOTIFICATION_SENT.value
                    if d.ok
                    else EventTypeV1.NOTIFICATION_FAILED.value
                ),
                event_payload={
                    "recipient": d.recipient,
                    "kind": d.kind.value,
                    "status": d.status.value,
                    "attempts": d.attempts,
                    "message_id": d.message_id,
                    "error": d.error,
                },
            )

        try:
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            logger.exception("event_log_write_failed", order_id=order.order_id)


def _log_event(
    db: Session,
    *,
    entity_type: str,
    entity_id: str,
    event_type: str,
    event_payload: dict,
) -> None:
    db.add(
        EventLog(
            id=uuid4().hex,
            entity_type=entity_type,
            entity_id=entity_id,
            event_type=event_type,
            event_payload_json=event_payload,
        )
    )
