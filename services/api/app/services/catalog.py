from __future__ import annotations

from collections.abc import Iterable

from services.api.app.db.models import Product, Vendor
from services.api.app.services.checkout_base import ProductRecord, StorageError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


def lookup_products(db: Session, slugs: Iterable[str]) -> dict[str, ProductRecord]:
    """Resolve slugs to their product and owning vendor.

    Unknown slugs are simply absent from the result. Data-access failures raise StorageError.
    """

    wanted = sorted(set(slugs))
    if not wanted:
        return {}

    stmt = (
        select(
            Product.slug,
            Product.product_name,
            Vendor.store_id,
            Vendor.store_name,
            Vendor.email,
        )
        .join(Vendor, Vendor.store_id == Product.store_id)
        .where(Product.slug.in_(wanted))
    )

    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        raise StorageError("Catalog lookup failed") from e

    return {
        slug: ProductRecord(
            slug=slug,
            product_name=product_name,
            store_id=store_id,
            store_name=store_name,
            vendor_email=email,
        )
        for slug, product_name, store_id, store_name, email in rows
    }
