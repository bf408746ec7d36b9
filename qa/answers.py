"""
qa/answers.py -- Answer use cases.

Same template as qa/questions.py: authenticate, resolve, authorize, then
touch the store.

Permissions:
  create, list   any signed-in user (the question must exist)
  edit           owner only
  delete         owner or admin
"""

import logging
import uuid
from dataclasses import replace

from auth import policy
from auth.sessions import SessionService
from core.errors import AnswerNotFound, Forbidden, QuestionNotFound
from qa.models import Answer
from qa.store import QAStore

logger = logging.getLogger("quoralite.qa")

# Every answer use case reports the same signed-out and forbidden texts;
# clients match on them verbatim.
_SIGNED_OUT = "User is signed out.Sign in first to post a question"
_FORBIDDEN = "Only the question owner or admin can delete the question"


class AnswerService:
    def __init__(self, sessions: SessionService, store: QAStore) -> None:
        self._sessions = sessions
        self._store = store

    def create_answer(self, token: str, question_uuid: str, content: str) -> Answer:
        user = self._sessions.authenticate(token, _SIGNED_OUT)
        question = self._store.get_question(question_uuid)
        if question is None:
            raise QuestionNotFound("The question entered is invalid")

        answer = Answer(
            uuid=str(uuid.uuid4()),
            content=content,
            question_uuid=question.uuid,
            owner_uuid=user.uuid,
        )
        self._store.create_answer(answer)
        logger.info("Answer %s posted to question %s by %s", answer.uuid, question.uuid, user.uuid)
        return self._store.get_answer(answer.uuid)

    def edit_answer(self, token: str, answer_uuid: str, content: str) -> Answer:
        """Replace an answer's content. Owner only; admins get no override."""
        user = self._sessions.authenticate(token, _SIGNED_OUT)
        existing = self._require_answer(answer_uuid)
        if not policy.is_owner(user, existing.owner_uuid):
            logger.warning("Denied edit of answer %s to user %s", existing.uuid, user.uuid)
            raise Forbidden(_FORBIDDEN)

        self._store.update_answer_content(existing.uuid, content)
        return replace(existing, content=content)

    def delete_answer(self, token: str, answer_uuid: str) -> Answer:
        user = self._sessions.authenticate(token, _SIGNED_OUT)
        existing = self._require_answer(answer_uuid)
        if not policy.is_owner_or_admin(user, existing.owner_uuid):
            logger.warning("Denied delete of answer %s to user %s", existing.uuid, user.uuid)
            raise Forbidden(_FORBIDDEN)

        self._store.delete_answer(existing.uuid)
        logger.info("Answer %s deleted by %s", existing.uuid, user.uuid)
        return existing

    def list_answers(self, token: str, question_uuid: str) -> list[Answer]:
        self._sessions.authenticate(token, _SIGNED_OUT)
        if self._store.get_question(question_uuid) is None:
            raise QuestionNotFound("The question with entered uuid whose details are to be seen does not exist")
        return self._store.list_answers(question_uuid)

    def _require_answer(self, answer_uuid: str) -> Answer:
        answer = self._store.get_answer(answer_uuid)
        if answer is None:
            raise AnswerNotFound("Entered answer uuid does not exist")
        return answer
