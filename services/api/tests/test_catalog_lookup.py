import pytest
from services.api.app.services.catalog import lookup_products
from services.api.app.services.checkout_base import StorageError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session


def test_lookup_joins_vendor_contact(db: Session) -> None:
    found = lookup_products(db, ["lamp-1", "rug-1"])

    assert set(found) == {"lamp-1", "rug-1"}
    lamp = found["lamp-1"]
    assert lamp.product_name == "Lamp"
    assert lamp.store_id == "S1"
    assert lamp.store_name == "Acme"
    assert lamp.vendor_email == "a@x.com"


def test_lookup_omits_unknown_slugs_and_dedupes(db: Session) -> None:
    found = lookup_products(db, ["lamp-1", "nope", "lamp-1"])

    assert list(found) == ["lamp-1"]


def test_lookup_of_nothing_returns_empty(db: Session) -> None:
    assert lookup_products(db, []) == {}


class _BrokenSession:
    def execute(self, *args: object, **kwargs: object) -> object:
        raise OperationalError("SELECT", {}, Exception("database is locked"))


def test_lookup_wraps_data_access_failures() -> None:
    with pytest.raises(StorageError):
        lookup_products(_BrokenSession(), ["lamp-1"])  # type: ignore[arg-type]
