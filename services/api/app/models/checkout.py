from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClientDetails(BaseModel):
    """Contact and shipping fields; anything beyond the required ones is kept verbatim."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class CartItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slug: str = Field(..., min_length=1)
    product_name: str = Field(..., alias="productName", min_length=1)
    product_price: float = Field(..., alias="productPrice", ge=0)
    discounted_price: float | None = Field(default=None, alias="discountedPrice", ge=0)
    quantity: int = Field(..., ge=1)


class CheckoutRequest(BaseModel):
    """Accepts the camelCase wire names only, so the raw body can be stored as submitted."""

    client_details: ClientDetails = Field(..., alias="clientDetails")
    cart_items: list[CartItem] = Field(..., alias="cartItems", min_length=1)
    total_cost: float = Field(..., alias="totalCost", ge=0)


class NotificationOutcome(BaseModel):
    recipient: str
    kind: str
    status: str
    attempts: int


class OrderResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")
    order_date: str = Field(..., alias="orderDate")
    total_cost: float = Field(..., alias="totalCost")
    vendor_count: int = Field(..., alias="vendorCount")
    notifications: list[NotificationOutcome] = Field(default_factory=list)


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    order_result: OrderResult = Field(..., alias="orderResult")
