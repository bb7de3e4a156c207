from __future__ import annotations

import argparse

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import Product, Vendor

_VENDORS = (
    ("S1", "Acme Lighting", "orders@acme.example", "Home"),
    ("S2", "Northwind Textiles", "sales@northwind.example", "Home"),
)

_PRODUCTS = (
    ("lamp-1", "Lamp", 10.0, 8.0, "S1"),
    ("desk-lamp", "Desk Lamp", 24.5, None, "S1"),
    ("wool-throw", "Wool Throw", 59.0, 49.0, "S2"),
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo Bazaar vendors and products")
    parser.add_argument("--vendor-email", default=None, help="Override every vendor's email")
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        for store_id, store_name, email, brand_type in _VENDORS:
            if db.get(Vendor, store_id) is None:
                db.add(
                    Vendor(
                        store_id=store_id,
                        store_name=store_name,
                        email=args.vendor_email or email,
                        brand_type=brand_type,
                    )
                )
        db.flush()

        for slug, name, price, discounted, store_id in _PRODUCTS:
            exists = db.query(Product).filter(Product.slug == slug).limit(1).count()
            if exists == 0:
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
        print(f"Seeded vendors={len(_VENDORS)} products={len(_PRODUCTS)}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
