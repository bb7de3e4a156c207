"""Shared event schema (v1).

The backend stores an append-only event log per order. Vendor dashboards and support
tooling read these events to see what was placed and who was notified.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityTypeV1(str, Enum):
    ORDER = "Order"
    NOTIFICATION = "Notification"


class EventTypeV1(str, Enum):
    ORDER_PLACED = "ORDER_PLACED"
    NOTIFICATION_SENT = "NOTIFICATION_SENT"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


class EventV1(BaseModel):
    id: str

    entity_type: EntityTypeV1
    entity_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
