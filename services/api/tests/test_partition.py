import pytest
from services.api.app.models.checkout import CartItem
from services.api.app.services.checkout_base import MissingProductsError, ProductRecord
from services.api.app.services.partition import partition_by_vendor

CATALOG = {
    "lamp-1": ProductRecord("lamp-1", "Lamp", "S1", "Acme", "a@x.com"),
    "shade-1": ProductRecord("shade-1", "Lamp Shade", "S1", "Acme", "a@x.com"),
    "rug-1": ProductRecord("rug-1", "Wool Rug", "S2", "Northwind", "n@x.com"),
}


def _line(slug: str, name: str = "client name") -> CartItem:
    return CartItem(slug=slug, product_name=name, product_price=1, quantity=1)


def test_one_group_per_line_in_cart_order() -> None:
    lines = [_line("rug-1"), _line("lamp-1"), _line("shade-1"), _line("lamp-1")]

    groups = partition_by_vendor(lines, CATALOG)

    assert len(groups) == len(lines)
    assert [g.store_id for g in groups] == ["S2", "S1", "S1", "S1"]
    assert [g.product_name for g in groups] == ["Wool Rug", "Lamp", "Lamp Shade", "Lamp"]


def test_names_come_from_catalog_not_client() -> None:
    groups = partition_by_vendor([_line("lamp-1", name="Totally Different")], CATALOG)

    assert groups[0].product_name == "Lamp"
    assert groups[0].store_name == "Acme"
    assert groups[0].vendor_email == "a@x.com"


def test_missing_lines_fail_whole_cart_with_client_names() -> None:
    lines = [_line("lamp-1"), _line("gone-1", "Old Vase"), _line("gone-2", "Chair")]

    with pytest.raises(MissingProductsError) as excinfo:
        partition_by_vendor(lines, CATALOG)

    assert excinfo.value.product_names == ["Old Vase", "Chair"]
    assert str(excinfo.value) == "The following products are not available: Old Vase, Chair"


def test_vendor_group_snapshot_keys() -> None:
    group = partition_by_vendor([_line("lamp-1")], CATALOG)[0]

    assert group.to_snapshot() == {
        "store_id": "S1",
        "store_name": "Acme",
        "productName": "Lamp",
        "VendorEmail": "a@x.com",
    }
