from __future__ import annotations

from services.api.app.db.models import Order
from services.api.app.services.checkout_base import NewOrder, OrderIdConflictError, StorageError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


class OrderStore:
    """Single-row inserts of immutable order snapshots. There is no update path."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, order: NewOrder) -> str:
        row = Order(
            order_id=order.order_id,
            client_details_json=order.client_details,
            cart_items_json=order.cart_items,
            total_cost=order.total_cost,
            vendor_details_json=[g.to_snapshot() for g in order.vendor_groups],
            order_date=order.order_date,
        )

        self._db.add(row)
        try:
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            if self._order_id_taken(order.order_id):
                raise OrderIdConflictError(order.order_id) from e
            raise StorageError("Failed to place order") from e

        return order.order_id

    def get(self, order_id: str) -> Order | None:
        return self._db.get(Order, order_id)

    def _order_id_taken(self, order_id: str) -> bool:
        try:
            return self._db.get(Order, order_id) is not None
        except SQLAlchemyError:
            return False
