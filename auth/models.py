"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class. Mirrors the approach in qa/models.py -- dataclasses own
domain shape; stores and services do the work. UserSession carries the one
piece of logic that belongs to the data itself: whether it is still active.

Layer rule: no imports from api/ or qa/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_NONADMIN = "nonadmin"


@dataclass
class User:
    """A registered identity together with its credential.

    id is the internal primary key and never leaves the persistence layer's
    callers. uuid is the public, stable identifier: it is what clients see,
    what questions and answers record as their owner, and what authorization
    rules compare.

    salt and password_hash are set once at signup. hash_password() produces
    both; they are never recomputed here.
    """

    uuid: str
    username: str
    email: str
    role: str  # "admin" | "nonadmin"
    password_hash: str = ""
    salt: str = ""
    first_name: str = ""
    last_name: str = ""
    country: str | None = None
    about_me: str | None = None
    dob: str | None = None
    contact_number: str | None = None
    id: int | None = None
    created_at: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass
class UserSession:
    """A server-side record binding an opaque token to a user for 8 hours.

    Append-only: created on sign-in, mutated exactly once to stamp
    logged_out_at on sign-out, never deleted. All datetimes are timezone-aware
    UTC.
    """

    token: str
    user_id: int
    issued_at: datetime
    expires_at: datetime
    logged_out_at: datetime | None = None
    id: int | None = None

    def is_active(self, now: datetime) -> bool:
        """Active iff not logged out AND not yet expired, judged at `now`."""
        return self.logged_out_at is None and self.expires_at > now
