from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from services.api.app.db.deps import get_db
from services.api.app.models.checkout import CheckoutResponse, NotificationOutcome, OrderResult
from services.api.app.services.checkout import CheckoutOrchestrator, CheckoutSettings
from services.api.app.services.checkout_base import (
    CheckoutError,
    CheckoutValidationError,
    MissingProductsError,
    StorageError,
)
from services.api.app.services.mail_factory import get_mail_transport
from sqlalchemy.orm import Session

router = APIRouter()


def _checkout_error_response(e: CheckoutError) -> JSONResponse:
    if isinstance(e, CheckoutValidationError):
        return JSONResponse(status_code=400, content={"message": e.messages})

    if isinstance(e, MissingProductsError):
        return JSONResponse(status_code=400, content={"message": str(e)})

    if isinstance(e, StorageError):
        return JSONResponse(status_code=500, content={"message": "Failed to place order"})

    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


@router.post("/checkout", status_code=201, response_model=CheckoutResponse)
def checkout(
    payload: Any = Body(...),
    db: Session = Depends(get_db),
) -> CheckoutResponse | JSONResponse:
    try:
        transport = get_mail_transport()
        settings = CheckoutSettings.from_env()
    except ValueError as e:
        return JSONResponse(status_code=500, content={"message": str(e)})

    orchestrator = CheckoutOrchestrator(db, transport, settings=settings)
    try:
        outcome = orchestrator.run(payload)
    except CheckoutError as e:
        return _checkout_error_response(e)

    return CheckoutResponse(
        message="Order placed successfully!",
        order_result=OrderResult(
            order_id=outcome.order_id,
            order_date=outcome.order_date.isoformat(),
            total_cost=outcome.total_cost,
            vendor_count=len({g.store_id for g in outcome.vendor_groups}),
            notifications=[
                NotificationOutcome(
                    recipient=d.recipient,
                    kind=d.kind.value,
                    status=d.status.value,
                    attempts=d.attempts,
                )
                for d in outcome.deliveries
            ],
        ),
    )
