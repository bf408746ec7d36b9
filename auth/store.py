"""
auth/store.py -- SQLAlchemy Core persistence layer for users and sessions.

Pattern: Repository + Data Mapper (same as qa/store.py).
UserStore and SessionStore are the repositories; _row_to_user /
_row_to_session are the mappers. Services never touch SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Atomicity relied on by auth/sessions.py:
  - UNIQUE(token) on user_sessions: two sessions can never share a token.
  - mark_logged_out() is a single conditional UPDATE (logged_out_at IS NULL),
    so the sign-out timestamp is written at most once even under concurrent
    sign-outs of the same token.
  - Sessions are never deleted; the table is an audit trail.

Timestamps are stored as ISO 8601 UTC strings (same convention as the rest of
QuoraLite) and parsed back into aware datetimes by the mappers.

Layer rule: no imports from api/ or qa/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Connection, Engine

from auth.models import ROLE_ADMIN, User, UserSession
from core.config import get_settings

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("uuid", String(36), nullable=False, unique=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("role", String(30), nullable=False, server_default="nonadmin"),
    Column("password_hash", String(255), nullable=False),
    Column("salt", String(255), nullable=False),
    Column("first_name", String(255), nullable=False, server_default=""),
    Column("last_name", String(255), nullable=False, server_default=""),
    Column("country", String(100)),
    Column("about_me", Text),
    Column("dob", String(30)),
    Column("contact_number", String(30)),
    Column("created_at", String(32), nullable=False),
)

_sessions = Table(
    "user_sessions",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("token", String(512), nullable=False, unique=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("issued_at", String(32), nullable=False),
    Column("expires_at", String(32), nullable=False),
    Column("logged_out_at", String(32)),  # NULL until sign-out
)


# ---------------------------------------------------------------------------
# Engine helpers
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an Engine with the SQLite tweaks every QuoraLite store needs."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_ts(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities (identity + credential).

    Usage:
        store = UserStore()
        salt, hashed = hash_password("secret")
        store.create_user(User(uuid=..., username="ann", email="ann@x.io", role="nonadmin",
                               salt=salt, password_hash=hashed))
        user = store.get_by_username("ann")
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the uuid, username or email
        already exists. auth/accounts.signup() checks username and email first
        so the common case produces a proper SGR-* error; the constraint only
        fires when two signups race.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.insert().values(
                    uuid=user.uuid,
                    username=user.username,
                    email=user.email,
                    role=user.role,
                    password_hash=user.password_hash,
                    salt=user.salt,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    country=user.country,
                    about_me=user.about_me,
                    dob=user.dob,
                    contact_number=user.contact_number,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_uuid(self, user_uuid: str) -> User | None:
        """Look up a user by public uuid. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.uuid == user_uuid)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive)."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def has_admin(self) -> bool:
        """Return True if at least one admin account exists. Used by the bootstrap CLI."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.role == ROLE_ADMIN).limit(1)).fetchone()
        return row is not None

    def delete_by_uuid(self, user_uuid: str, conn: Connection | None = None) -> int:
        """Permanently delete a user record. Returns the number of rows removed (0 or 1).

        Pass `conn` to run inside a caller's transaction (qa/admin.py removes
        the user's content in the same one); otherwise the delete commits on
        its own.

        Sessions owned by the user are left in place as audit records; they
        can no longer resolve to an identity.
        """
        stmt = _users.delete().where(_users.c.uuid == user_uuid)
        if conn is not None:
            return conn.execute(stmt).rowcount
        with self.engine.begin() as own:
            return own.execute(stmt).rowcount

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class SessionStore:
    """Repository for UserSession records.

    The only mutation after insert is mark_logged_out(). There is no delete.
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    def create_session(self, session: UserSession) -> UserSession:
        """Persist a new session and return it with its database ID filled in.

        Raises sqlalchemy.exc.IntegrityError on a duplicate token.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _sessions.insert().values(
                    token=session.token,
                    user_id=session.user_id,
                    issued_at=session.issued_at.isoformat(),
                    expires_at=session.expires_at.isoformat(),
                    logged_out_at=session.logged_out_at.isoformat() if session.logged_out_at else None,
                )
            )
            conn.commit()
            session.id = result.inserted_primary_key[0]
        return session

    def get_by_token(self, token: str) -> UserSession | None:
        """Look up a session by token. O(1) via the UNIQUE index."""
        with self.engine.connect() as conn:
            row = conn.execute(_sessions.select().where(_sessions.c.token == token)).fetchone()
        return _row_to_session(row) if row is not None else None

    def mark_logged_out(self, token: str, when: datetime) -> bool:
        """Stamp logged_out_at on a session that has not been signed out yet.

        Returns True if this call wrote the timestamp, False if the session was
        already signed out (or does not exist). The WHERE clause makes the
        write set-once at the database level.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _sessions.update()
                .where((_sessions.c.token == token) & (_sessions.c.logged_out_at.is_(None)))
                .values(logged_out_at=when.isoformat())
            )
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        uuid=row.uuid,
        username=row.username,
        email=row.email,
        role=row.role,
        password_hash=row.password_hash,
        salt=row.salt,
        first_name=row.first_name,
        last_name=row.last_name,
        country=row.country,
        about_me=row.about_me,
        dob=row.dob,
        contact_number=row.contact_number,
        created_at=row.created_at,
    )


def _row_to_session(row) -> UserSession:
    return UserSession(
        id=row.id,
        token=row.token,
        user_id=row.user_id,
        issued_at=_parse_ts(row.issued_at),
        expires_at=_parse_ts(row.expires_at),
        logged_out_at=_parse_ts(row.logged_out_at),
    )
