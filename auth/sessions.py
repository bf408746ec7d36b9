"""
auth/sessions.py -- Session issuance, authentication and sign-out.

This is the single place where QuoraLite decides whether a bearer token
belongs to a signed-in user. Every access-controlled use case calls
SessionService.authenticate() and nothing else; no route or service inspects
expires_at / logged_out_at on its own.

Token classification (evaluated at authentication time, never at issuance):
  unknown token                          -> NotSignedIn (ATHR-001)
  known, expired OR logged out           -> SignedOut   (ATHR-002)
  known, not expired AND not logged out  -> the owning User

Expiry and explicit sign-out are reported the same way. A
session that has become inactive never becomes active again: there is no
renewal and no sliding expiry.

Sessions are not exclusive per user. Two sign-ins produce two independent
sessions; invalidating one leaves the other untouched.

The service holds no per-request state. The clock is injectable so tests can
step past the 8-hour TTL without sleeping.

Layer rule: no imports from api/ or qa/.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from auth.models import User, UserSession
from auth.store import SessionStore, UserStore
from auth.tokens import generate_session_token
from core.errors import NotSignedIn, SignedOut

logger = logging.getLogger("quoralite.sessions")

# Fixed lifetime of every session. Not configurable, not renewable.
SESSION_TTL = timedelta(hours=8)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    """Issue, resolve and invalidate sessions.

    Usage:
        service = SessionService(session_store, user_store)
        session = service.issue_session(user)
        user = service.authenticate(session.token, "User is signed out.Sign in first to post a question")
        service.invalidate(session.token)
    """

    def __init__(
        self,
        sessions: SessionStore,
        users: UserStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sessions = sessions
        self._users = users
        self._clock = clock

    def issue_session(self, user: User) -> UserSession:
        """Create and persist a new 8-hour session for an authenticated user.

        Store failures propagate unchanged; the caller's use case fails.
        """
        now = self._clock()
        expires_at = now + SESSION_TTL
        session = UserSession(
            token=generate_session_token(user.uuid, now, expires_at),
            user_id=user.id,
            issued_at=now,
            expires_at=expires_at,
        )
        session = self._sessions.create_session(session)
        logger.info("Session issued for user %s (expires %s)", user.uuid, expires_at.isoformat())
        return session

    def authenticate(self, token: str | None, signed_out_message: str | None = None) -> User:
        """Resolve a bearer token to the signed-in User.

        Args:
            token:              Opaque token from the request. None or "" is
                                treated as an unknown token.
            signed_out_message: Use-case specific text for the SignedOut error,
                                e.g. "User is signed out.Sign in first to edit
                                the question". Falls back to a generic message.

        Raises:
            NotSignedIn: no session exists for the token, or its user has been
                         deleted since the session was issued.
            SignedOut:   the session expired or was explicitly signed out.

        Never mutates the session.
        """
        session = self._sessions.get_by_token(token) if token else None
        if session is None:
            raise NotSignedIn()

        if not session.is_active(self._clock()):
            raise SignedOut(signed_out_message)

        user = self._users.get_by_id(session.user_id)
        if user is None:
            # Account deleted by an admin; its sessions remain as audit records.
            raise NotSignedIn()
        return user

    def invalidate(self, token: str | None) -> User:
        """Sign a session out and return the user it belonged to.

        Idempotent: signing out an already inactive session (expired or already
        signed out) succeeds and leaves the original logged_out_at untouched.

        Raises:
            NotSignedIn: no session exists for the token, or its user is gone.
        """
        session = self._sessions.get_by_token(token) if token else None
        if session is None:
            raise NotSignedIn()

        user = self._users.get_by_id(session.user_id)
        if user is None:
            raise NotSignedIn()

        if self._sessions.mark_logged_out(session.token, self._clock()):
            logger.info("Session signed out for user %s", user.uuid)
        else:
            logger.info("Repeated sign-out for user %s ignored", user.uuid)
        return user
