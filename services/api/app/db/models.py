from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Vendor(Base):
    __tablename__ = "vendors"

    store_id: Mapped[str] = mapped_column(String, primary_key=True)
    store_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)

    store_phone: Mapped[str | None] = mapped_column(String, nullable=True)
    brand_type: Mapped[str | None] = mapped_column(String, nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    country: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    products: Mapped[list[Product]] = relationship(back_populates="vendor")


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    product_name: Mapped[str] = mapped_column(String, nullable=False)
    product_price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    discounted_price: Mapped[float | None] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    store_id: Mapped[str] = mapped_column(ForeignKey("vendors.store_id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Also makes the unit of work insert vendors before their products.
    vendor: Mapped[Vendor] = relationship(back_populates="products")


class Order(Base):
    __tablename__ = "orders"

    # Primary key doubles as the unique constraint that order-id retries rely on.
    order_id: Mapped[str] = mapped_column(String, primary_key=True)

    client_details_json: Mapped[dict] = mapped_column(JSON, nullable=False)
    cart_items_json: Mapped[list] = mapped_column(JSON, nullable=False)
    total_cost: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    vendor_details_json: Mapped[list] = mapped_column(JSON, nullable=False)

    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class EventLog(Base):
    __tablename__ = "event_log"

    id: Mapped[str] = mapped_column(String, primary_key=True)

    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String, nullable=False)
    event_payload_json: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
