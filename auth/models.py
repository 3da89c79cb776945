"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/, catalog/, or client/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is the unique login key and is compared exactly as stored (no case
    folding). id is an opaque hex string assigned by UserStore.create_user();
    it is None only before the record is written.

    Users are created on registration and never mutated afterwards.
    """

    email: str
    name: str
    hashed_password: str
    id: str | None = None
    created_at: str | None = None
