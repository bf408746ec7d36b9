"""
qa/admin.py -- Administrative account deletion.

Lives in qa/ rather than auth/ because removing an account also removes the
questions and answers that account posted, and auth/ may not import qa/.

Order of checks: the admin rule is applied before the target is looked up.
The admin-only rule does not depend on the target, and checking it first keeps
non-admins from learning which user uuids exist.
"""

import logging

from auth import policy
from auth.models import User
from auth.sessions import SessionService
from auth.store import UserStore
from core.errors import Forbidden, UserNotFound
from qa.store import QAStore

logger = logging.getLogger("quoralite.qa")

_DELETE_USER_SIGNED_OUT = "User is signed out"


class UserAdminService:
    def __init__(self, sessions: SessionService, users: UserStore, store: QAStore) -> None:
        self._sessions = sessions
        self._users = users
        self._store = store

    def delete_user(self, token: str, user_uuid: str) -> User:
        """Delete an account and everything it posted. Admin only.

        Returns the deleted User. The account's sessions stay in the session
        store as audit records and stop authenticating immediately.
        """
        caller = self._sessions.authenticate(token, _DELETE_USER_SIGNED_OUT)
        if not policy.is_admin(caller):
            logger.warning("Denied user deletion to non-admin %s", caller.uuid)
            raise Forbidden("Unauthorized Access, Entered user is not an admin")

        target = self._users.get_by_uuid(user_uuid)
        if target is None:
            raise UserNotFound("User with entered uuid to be deleted does not exist")

        # Content and account go together or not at all. Both stores sit on
        # the same database (core/config.py), so one connection covers both.
        with self._users.engine.begin() as conn:
            questions, answers = self._store.delete_content_by_owner(target.uuid, conn=conn)
            self._users.delete_by_uuid(target.uuid, conn=conn)
        logger.info(
            "User %s deleted by admin %s (%d questions, %d answers removed)",
            target.uuid,
            caller.uuid,
            questions,
            answers,
        )
        return target
