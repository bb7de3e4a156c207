from pathlib import Path

from sqlalchemy import inspect


def test_init_db_creates_tables(tmp_path: Path, monkeypatch) -> None:
    db_path = tmp_path / "bazaar_init.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("BAZAAR_DB_AUTO_CREATE", "true")

    from services.api.app.db.database import get_engine
    from services.api.app.db.init_db import init_db

    expected = init_db()

    inspector = inspect(get_engine())
    tables = set(inspector.get_table_names())

    assert expected == ["event_log", "orders", "products", "vendors"]
    assert set(expected) <= tables


def test_vendor_and_product_commit_together(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'bazaar_fk.db'}")
    monkeypatch.setenv("BAZAAR_DB_AUTO_CREATE", "true")

    from services.api.app.db.database import db_session
    from services.api.app.db.init_db import init_db
    from services.api.app.db.models import Product, Vendor

    init_db()

    db = db_session()
    try:
        # Product added first; the relationship still orders the vendor insert ahead of it.
        db.add(Product(slug="p-1", product_name="P", product_price=1.0, store_id="S9"))
        db.add(Vendor(store_id="S9", store_name="Nine", email="nine@x.com"))
        db.commit()

        assert db.query(Product).one().vendor.store_name == "Nine"
    finally:
        db.close()


def test_seed_script_populates_catalog(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'bazaar_seed.db'}")
    monkeypatch.setenv("BAZAAR_DB_AUTO_CREATE", "true")
    monkeypatch.setattr("sys.argv", ["seed_data", "--vendor-email", "ops@example.com"])

    from scripts.seed_data import main
    from services.api.app.db.database import db_session
    from services.api.app.db.models import Product, Vendor

    assert main() == 0
    # Running twice must not duplicate rows.
    assert main() == 0

    db = db_session()
    try:
        assert {p.slug for p in db.query(Product).all()} == {"lamp-1", "desk-lamp", "wool-throw"}
        assert {v.email for v in db.query(Vendor).all()} == {"ops@example.com"}
    finally:
        db.close()
