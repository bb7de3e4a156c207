from __future__ import annotations

from collections.abc import Mapping

from services.api.app.models.checkout import CartItem
from services.api.app.services.checkout_base import (
    MissingProductsError,
    ProductRecord,
    VendorGroup,
)


def partition_by_vendor(
    cart_items: list[CartItem],
    catalog: Mapping[str, ProductRecord],
) -> list[VendorGroup]:
    """Return one vendor group per cart line, in cart order.

    Lines owned by the same vendor are not merged. Names come from the catalog, not the
    client. If any line is unknown the whole cart is rejected with the client-submitted
    names of every missing line.
    """

    missing: list[str] = []
    groups: list[VendorGroup] = []

    for item in cart_items:
        record = catalog.get(item.slug)
        if record is None:
            missing.append(item.product_name)
            continue

        groups.append(
            VendorGroup(
                store_id=record.store_id,
                store_name=record.store_name,
                product_name=record.product_name,
                vendor_email=record.vendor_email,
            )
        )

    if missing:
        raise MissingProductsError(missing)

    return groups
