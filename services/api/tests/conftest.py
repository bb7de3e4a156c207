from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from services.api.app.services.mail_mock import InMemoryMailTransport
from sqlalchemy.orm import Session

CATALOG = {
    "vendors": [
        ("S1", "Acme", "a@x.com"),
        ("S2", "Northwind", "n@x.com"),
    ],
    "products": [
        ("lamp-1", "Lamp", 10.0, 8.0, "S1"),
        ("shade-1", "Lamp Shade", 5.0, None, "S1"),
        ("rug-1", "Wool Rug", 120.0, 99.0, "S2"),
    ],
}


@pytest.fixture()
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    db_url = f"sqlite+pysqlite:///{tmp_path / 'bazaar_test.db'}"
    monkeypatch.setenv("DATABASE_URL", db_url)
    monkeypatch.setenv("BAZAAR_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("BAZAAR_MAIL_TRANSPORT", "mock")

    from services.api.app.db.database import db_session
    from services.api.app.db.init_db import init_db
    from services.api.app.db.models import Product, Vendor

    init_db()

    db = db_session()
    try:
        for store_id, store_name, email in CATALOG["vendors"]:
            db.add(Vendor(store_id=store_id, store_name=store_name, email=email))
        db.flush()
        for slug, name, price, discounted, store_id in CATALOG["products"]:
            db.add(
                Product(
                    slug=slug,
                    product_name=name,
                    product_price=price,
                    discounted_price=discounted,
                    store_id=store_id,
                )
            )
        db.commit()
    finally:
        db.close()

    return db_url


@pytest.fixture()
def db(database: str) -> Generator[Session, None, None]:
    from services.api.app.db.database import db_session

    session = db_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def mail(monkeypatch: pytest.MonkeyPatch) -> InMemoryMailTransport:
    import services.api.app.routers.checkout as checkout_router

    transport = InMemoryMailTransport()
    monkeypatch.setattr(checkout_router, "get_mail_transport", lambda: transport)
    return transport


@pytest.fixture()
def client(database: str, mail: InMemoryMailTransport) -> Generator[TestClient, None, None]:
    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def checkout_payload(**overrides: object) -> dict:
    payload: dict = {
        "clientDetails": {
            "name": "Dana Reyes",
            "email": "dana@example.com",
            "address": "12 Harbor St",
            "city": "Lisbon",
            "country": "PT",
            "phone": "+351 555 0101",
        },
        "cartItems": [
            {
                "slug": "lamp-1",
                "productName": "Lamp",
                "productPrice": 10,
                "discountedPrice": 8,
                "quantity": 2,
            }
        ],
        "totalCost": 16,
    }
    payload.update(overrides)
    return payload
