from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from packages.shared.schemas.events import EventV1
from services.api.app.db.deps import get_db
from services.api.app.db.models import EventLog, Order
from services.api.app.models.order import OrderDetail, OrderOut
from sqlalchemy.orm import Session

router = APIRouter()

_MAX_ORDERS = 500


def _order_out(order: Order) -> OrderOut:
    return OrderOut(
        order_id=order.order_id,
        client_details=order.client_details_json,
        cart_items=order.cart_items_json,
        total_cost=order.total_cost,
        vendor_details=order.vendor_details_json,
        order_date=order.order_date.isoformat(),
    )


@router.get("/orders", response_model=list[OrderOut])
def list_orders(store_id: str | None = None, db: Session = Depends(get_db)) -> list[OrderOut]:
    """Newest first. With ``store_id`` only orders containing a line from that store.

    The store filter runs over the full ordered history; the cap applies to matches.
    """

    rows = db.query(Order).order_by(Order.order_date.desc()).yield_per(200)

    out: list[OrderOut] = []
    for order in rows:
        if store_id is not None and not any(
            v.get("store_id") == store_id for v in order.vendor_details_json
        ):
            continue
        out.append(_order_out(order))
        if len(out) >= _MAX_ORDERS:
            break

    return out


@router.get("/orders/{order_id}", response_model=OrderDetail)
def get_order(order_id: str, db: Session = Depends(get_db)) -> OrderDetail | JSONResponse:
    order = db.get(Order, order_id)
    if order is None:
        return JSONResponse(status_code=404, content={"message": "Order not found"})

    events = (
        db.query(EventLog)
        .filter(EventLog.entity_id == order_id)
        .order_by(EventLog.created_at.asc())
        .all()
    )

    return OrderDetail(
        **_order_out(order).model_dump(),
        events=[
            EventV1(
                id=e.id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                event_type=e.event_type,
                payload=e.event_payload_json,
                created_at=e.created_at.isoformat(),
            )
            for e in events
        ],
    )
