"""
qa/questions.py -- Question use cases.

Every method follows the same template:
  1. SessionService.authenticate(token, <use-case message>)   ATHR-001 / ATHR-002
  2. resolve the target by public uuid                          QUES-001 / USR-001
  3. apply the auth/policy rule for the action, if any          ATHR-003
  4. read or mutate through QAStore

Steps 1-3 always complete before step 4, so a failing check never leaves a
partial write behind.

Permissions:
  create, list, list-by-user   any signed-in user
  edit                         owner only (admins cannot edit others' questions)
  delete                       owner or admin
"""

import logging
import uuid
from dataclasses import replace

from auth import policy
from auth.models import User
from auth.sessions import SessionService
from auth.store import UserStore
from core.errors import Forbidden, QuestionNotFound, UserNotFound
from qa.models import Question
from qa.store import QAStore

logger = logging.getLogger("quoralite.qa")

_CREATE_SIGNED_OUT = "User is signed out.Sign in first to post a question"
_LIST_SIGNED_OUT = "User is signed out.Sign in first to get all questions"
_LIST_BY_USER_SIGNED_OUT = "User is signed out.Sign in first to get all questions posted by a specific user"
_EDIT_SIGNED_OUT = "User is signed out.Sign in first to edit the question"
# Clients match on this exact text, which is shared with create.
_DELETE_SIGNED_OUT = "User is signed out.Sign in first to post a question"


class QuestionService:
    def __init__(self, sessions: SessionService, store: QAStore, users: UserStore) -> None:
        self._sessions = sessions
        self._store = store
        self._users = users

    def create_question(self, token: str, content: str) -> Question:
        """Post a new question owned by the caller."""
        user = self._sessions.authenticate(token, _CREATE_SIGNED_OUT)
        question = Question(uuid=str(uuid.uuid4()), content=content, owner_uuid=user.uuid)
        self._store.create_question(question)
        logger.info("Question %s created by %s", question.uuid, user.uuid)
        return self._store.get_question(question.uuid)

    def list_questions(self, token: str) -> list[Question]:
        self._sessions.authenticate(token, _LIST_SIGNED_OUT)
        return self._store.list_questions()

    def list_questions_by_user(self, token: str, user_uuid: str) -> list[Question]:
        """Questions posted by `user_uuid`. Any signed-in user may look."""
        self._sessions.authenticate(token, _LIST_BY_USER_SIGNED_OUT)
        if self._users.get_by_uuid(user_uuid) is None:
            raise UserNotFound("User with entered uuid whose question details are to be seen does not exist")
        return self._store.list_questions_by_owner(user_uuid)

    def edit_question(self, token: str, question_uuid: str, content: str) -> Question:
        """Replace a question's content. Only the owner may do this.

        The returned Question is the stored record with the new content;
        uuid, owner and created_at come from the store, never from the caller.
        """
        user = self._sessions.authenticate(token, _EDIT_SIGNED_OUT)
        existing = self._require_question(question_uuid)
        if not policy.is_owner(user, existing.owner_uuid):
            self._deny(user, "edit", existing)
            raise Forbidden("Only the question owner can edit the question")

        self._store.update_question_content(existing.uuid, content)
        return replace(existing, content=content)

    def delete_question(self, token: str, question_uuid: str) -> Question:
        """Delete a question (and its answers). Owner or admin only.

        Returns the question as it was before deletion.
        """
        user = self._sessions.authenticate(token, _DELETE_SIGNED_OUT)
        existing = self._require_question(question_uuid)
        if not policy.is_owner_or_admin(user, existing.owner_uuid):
            self._deny(user, "delete", existing)
            raise Forbidden("Only the question owner or admin can delete the question")

        self._store.delete_question(existing.uuid)
        logger.info("Question %s deleted by %s", existing.uuid, user.uuid)
        return existing

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_question(self, question_uuid: str) -> Question:
        question = self._store.get_question(question_uuid)
        if question is None:
            raise QuestionNotFound("Entered question uuid does not exist")
        return question

    @staticmethod
    def _deny(user: User, action: str, question: Question) -> None:
        logger.warning("Denied %s of question %s to user %s", action, question.uuid, user.uuid)
