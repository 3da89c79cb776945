"""
catalog/store.py -- SQLAlchemy-backed persistence layer for products.

Uses SQLAlchemy Core (not ORM) so the dataclasses in catalog/models.py remain
the authoritative domain representation. The table is used as a document
collection: one row per product, no joins.

Pattern: Repository + Data Mapper. ProductStore is the repository;
_row_to_product is the mapper. Route handlers never touch SQL directly.

Ownership rule: every statement that reads, changes, or removes a single
product is keyed on BOTH id and owner_id. There is no
get-by-id-only method. A product that exists but belongs to someone else is
indistinguishable from one that does not exist -- both come back as None /
False, and the route turns that into the same 404.

Atomicity: update_product() issues one conditional UPDATE (WHERE id AND
owner_id) and reads the row back in the same transaction, so there is no
separate ownership read that a concurrent writer could slip between.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ProductStore(get_engine())
    created = store.create_product(Product(owner_id=uid, name="Widget", price=9.5))
    store.list_products(uid)
    store.update_product(created.id, uid, price=12.0)
    store.delete_product(created.id, uid)
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Float, Index, MetaData, String, Table, Text, delete, select, update
from sqlalchemy.engine import Engine

from catalog.models import EDITABLE_FIELDS, Product

logger = logging.getLogger("catalog.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_products = Table(
    "products",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("owner_id", String(32), nullable=False),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("price", Float, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("ix_products_owner_id", "owner_id"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        description=row.description,
        price=row.price,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _owned(product_id: str, owner_id: str):
    """WHERE clause for the (id, owner_id) conjunction."""
    return (_products.c.id == product_id) & (_products.c.owner_id == owner_id)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductStore:
    """Repository for Product entities, always scoped to an owner."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    def list_products(self, owner_id: str) -> list[Product]:
        """Return every product owned by owner_id in storage-natural order."""
        with self.engine.connect() as conn:
            rows = conn.execute(select(_products).where(_products.c.owner_id == owner_id)).fetchall()
        return [_row_to_product(r) for r in rows]

    def create_product(self, product: Product) -> Product:
        """Insert a product and return it with id and timestamps assigned.

        The caller's id/created_at/updated_at values are ignored.
        """
        now = _now_iso()
        record = Product(
            id=uuid.uuid4().hex,
            owner_id=product.owner_id,
            name=product.name,
            description=product.description,
            price=product.price,
            created_at=now,
            updated_at=now,
        )
        with self.engine.begin() as conn:
            conn.execute(
                _products.insert().values(
                    id=record.id,
                    owner_id=record.owner_id,
                    name=record.name,
                    description=record.description,
                    price=record.price,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                )
            )
        logger.debug("Created product %s for owner %s", record.id, record.owner_id)
        return record

    def get_product(self, product_id: str, owner_id: str) -> Optional[Product]:
        """Return the product if it exists AND belongs to owner_id, else None."""
        with self.engine.connect() as conn:
            row = conn.execute(select(_products).where(_owned(product_id, owner_id))).first()
        return _row_to_product(row) if row else None

    def update_product(self, product_id: str, owner_id: str, **changes) -> Optional[Product]:
        """Apply changes to an owned product and return the updated record.

        Only name, description, and price are accepted; anything else raises
        ValueError. updated_at is always refreshed. Returns None when no
        product matches (id, owner_id).
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Non-editable product fields: {', '.join(sorted(unknown))}")

        values = dict(changes)
        values["updated_at"] = _now_iso()
        with self.engine.begin() as conn:
            result = conn.execute(update(_products).where(_owned(product_id, owner_id)).values(**values))
            if result.rowcount == 0:
                return None
            row = conn.execute(select(_products).where(_owned(product_id, owner_id))).first()
        return _row_to_product(row)

    def delete_product(self, product_id: str, owner_id: str) -> bool:
        """Delete an owned product. Returns False when no product matched."""
        with self.engine.begin() as conn:
            result = conn.execute(delete(_products).where(_owned(product_id, owner_id)))
        return result.rowcount > 0
