"""
auth/accounts.py -- Signup, signin, signout and profile use cases.

These are the account-facing flows around the session core. Each one follows
the same shape as the question/answer use cases in qa/: validate against the
store, raise a coded QuoraError on failure, touch the store only once every
check has passed.

Error contract:
  signup   SGR-001 username taken, SGR-002 email taken
  signin   ATH-001 unknown username, ATH-002 wrong password
  signout  ATHR-001 unknown token
  profile  ATHR-001 / ATHR-002 via SessionService, USR-001 unknown uuid

Timing: signin runs a full bcrypt verification even when the username does not
exist (burn_password_check), so response time does not reveal whether an
account exists. The distinct ATH-001 / ATH-002 codes are kept because clients
depend on them.

Layer rule: no imports from api/ or qa/.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from auth.models import ROLE_NONADMIN, User, UserSession
from auth.sessions import SessionService
from auth.store import UserStore
from auth.tokens import burn_password_check, hash_password, verify_password
from core.errors import AuthenticationFailed, SignupRestricted, UserNotFound

logger = logging.getLogger("quoralite.auth")

_PROFILE_SIGNED_OUT = "User is signed out.Sign in first to get user details"


class AccountService:
    """Account lifecycle on top of UserStore and SessionService."""

    def __init__(self, users: UserStore, sessions: SessionService) -> None:
        self._users = users
        self._sessions = sessions

    def signup(self, user: User, password: str, role: str = ROLE_NONADMIN) -> User:
        """Register a new account and return the stored User.

        The caller supplies profile fields on `user`; uuid, role, salt and
        password_hash are always assigned here, whatever `user` carried.
        """
        if self._users.get_by_username(user.username) is not None:
            raise SignupRestricted("Try any other Username, this Username has already been taken", code="SGR-001")
        if self._users.get_by_email(user.email) is not None:
            raise SignupRestricted("This user has already been registered, try with any other emailId", code="SGR-002")

        user.uuid = str(uuid.uuid4())
        user.role = role
        user.salt, user.password_hash = hash_password(password)
        try:
            user_id = self._users.create_user(user)
        except IntegrityError as exc:
            # A concurrent signup claimed the username or email first.
            raise SignupRestricted(
                "Try any other Username, this Username has already been taken", code="SGR-001"
            ) from exc

        logger.info("User %s registered (role=%s)", user.uuid, role)
        return self._users.get_by_id(user_id)

    def signin(self, username: str, password: str) -> tuple[User, UserSession]:
        """Verify credentials and open a new session.

        Every successful call creates a new, independent session; earlier
        sessions of the same user stay active.
        """
        user = self._users.get_by_username(username)
        if user is None:
            burn_password_check(password)
            logger.warning("Signin rejected: unknown username")
            raise AuthenticationFailed("This username does not exist", code="ATH-001")
        if not verify_password(password, user.salt, user.password_hash):
            logger.warning("Signin rejected: bad password for user %s", user.uuid)
            raise AuthenticationFailed("Password Failed", code="ATH-002")

        session = self._sessions.issue_session(user)
        return user, session

    def signout(self, token: str | None) -> User:
        """Sign out the session behind `token`. Idempotent for inactive sessions."""
        return self._sessions.invalidate(token)

    def user_profile(self, token: str | None, user_uuid: str) -> User:
        """Return any user's profile to a signed-in caller."""
        self._sessions.authenticate(token, _PROFILE_SIGNED_OUT)
        user = self._users.get_by_uuid(user_uuid)
        if user is None:
            raise UserNotFound("User with entered uuid does not exist")
        return user
