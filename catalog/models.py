"""
catalog/models.py -- Domain dataclasses for the product catalog.

These are pure data containers with zero logic. Ownership enforcement lives
in catalog/store.py; request validation lives in api/models.py.

id is None before the record is written to the store.
"""

from dataclasses import dataclass
from typing import Optional

# Fields an owner may change after creation. owner_id and the timestamps are
# server-controlled.
EDITABLE_FIELDS = ("name", "description", "price")


@dataclass
class Product:
    """A catalog entry owned by exactly one user.

    owner_id is set at creation from the authenticated caller and never
    changes. created_at / updated_at are ISO 8601 UTC strings set by the store.
    """

    owner_id: str
    name: str
    price: float
    description: Optional[str] = None
    id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
