"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as catalog/store.py).
UserStore is the repository; _row_to_user is the mapper. Route and
dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  The unique index on email is the final word on duplicate registration.
  The route does a lookup first for a friendly 409, but two concurrent
  registrations can both pass that lookup; the second INSERT then raises
  IntegrityError, which the route also maps to 409.

The store does not own its Engine. It receives the process-wide handle from
core.database.get_engine() so users and products share one connection pool.

Layer rule: no imports from api/, catalog/, or client/.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, select
from sqlalchemy.engine import Engine

from auth.models import User

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(get_engine())
        user = store.create_user(User(email="a@b.com", name="A", hashed_password=hash_password("secret1")))
        store.get_by_email("a@b.com")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        _metadata.create_all(self.engine)

    def create_user(self, user: User) -> User:
        """Insert a new user and return it with id and created_at filled in.

        Raises sqlalchemy.exc.IntegrityError if the email is already taken.
        """
        record = User(
            id=uuid.uuid4().hex,
            email=user.email,
            name=user.name,
            hashed_password=user.hashed_password,
            created_at=_now_iso(),
        )
        with self.engine.begin() as conn:
            conn.execute(
                _users.insert().values(
                    id=record.id,
                    email=record.email,
                    name=record.name,
                    hashed_password=record.hashed_password,
                    created_at=record.created_at,
                )
            )
        return record

    def get_by_email(self, email: str) -> User | None:
        """Exact, case-sensitive match on the stored email."""
        with self.engine.connect() as conn:
            row = conn.execute(select(_users).where(_users.c.email == email)).first()
        return _row_to_user(row) if row else None
