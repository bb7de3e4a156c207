from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


class CheckoutError(Exception):
    """Base class for checkout pipeline errors."""


class CheckoutValidationError(CheckoutError):
    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages


class MissingProductsError(CheckoutError):
    def __init__(self, product_names: list[str]) -> None:
        super().__init__(
            f"The following products are not available: {', '.join(product_names)}"
        )
        self.product_names = product_names


class StorageError(CheckoutError):
    """Catalog or order store failed; nothing has been committed."""


class OrderIdConflictError(StorageError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order id already taken: {order_id}")
        self.order_id = order_id


class NotificationError(CheckoutError):
    """A notification could not be delivered. Never fails a committed checkout."""


@dataclass(frozen=True, slots=True)
class ProductRecord:
    slug: str
    product_name: str
    store_id: str
    store_name: str
    vendor_email: str


@dataclass(frozen=True, slots=True)
class VendorGroup:
    store_id: str
    store_name: str
    product_name: str
    vendor_email: str

    def to_snapshot(self) -> dict[str, str]:
        # Key names are part of the stored order format; vendor order listings match on store_id.
        return {
            "store_id": self.store_id,
            "store_name": self.store_name,
            "productName": self.product_name,
            "VendorEmail": self.vendor_email,
        }


@dataclass(frozen=True, slots=True)
class NewOrder:
    order_id: str
    client_details: dict[str, Any]
    cart_items: list[dict[str, Any]]
    total_cost: float
    vendor_groups: list[VendorGroup] = field(default_factory=list)
    order_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
