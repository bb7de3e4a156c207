from __future__ import annotations

from typing import Any

from packages.shared.schemas.events import EventV1
from pydantic import BaseModel, Field


class OrderOut(BaseModel):
    order_id: str
    client_details: dict[str, Any] = Field(default_factory=dict)
    cart_items: list[dict[str, Any]] = Field(default_factory=list)
    total_cost: float
    vendor_details: list[dict[str, Any]] = Field(default_factory=list)
    order_date: str


class OrderDetail(OrderOut):
    events: list[EventV1] = Field(default_factory=list)
