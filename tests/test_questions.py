"""Unit tests for qa/questions.py -- question use cases and their permission checks.

Covers:
- Every operation rejects unknown (ATHR-001) and signed-out (ATHR-002) tokens
- Edit is owner-only; an admin who does not own the question is refused
- Delete is owner-or-admin; a refused delete leaves the question in place
- Unknown question / user uuids -> QUES-001 / USR-001
- Delete removes the question's answers too
"""

import pytest

from core.errors import Forbidden, NotSignedIn, QuestionNotFound, SignedOut, UserNotFound


@pytest.fixture
def signin(services):
    def _signin(username: str, password: str = "password123") -> str:
        _, session = services.accounts.signin(username, password)
        return session.token

    return _signin


class TestCreateAndList:
    def test_create_sets_owner_from_session(self, services, make_user, signin) -> None:
        ann = make_user("ann")
        question = services.questions.create_question(signin("ann"), "What is a monad?")
        assert question.owner_uuid == ann.uuid
        assert question.content == "What is a monad?"
        assert question.uuid
        assert question.created_at

    def test_create_requires_sign_in(self, services) -> None:
        with pytest.raises(NotSignedIn):
            services.questions.create_question("nope", "content")

    def test_create_after_sign_out_uses_create_message(self, services, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        services.accounts.signout(token)
        with pytest.raises(SignedOut) as exc_info:
            services.questions.create_question(token, "content")
        assert exc_info.value.message == "User is signed out.Sign in first to post a question"

    def test_list_returns_everyones_questions(self, services, make_user, signin) -> None:
        make_user("ann")
        make_user("bob")
        services.questions.create_question(signin("ann"), "from ann")
        services.questions.create_question(signin("bob"), "from bob")
        contents = [q.content for q in services.questions.list_questions(signin("ann"))]
        assert contents == ["from ann", "from bob"]

    def test_list_after_sign_out(self, services, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        services.accounts.signout(token)
        with pytest.raises(SignedOut) as exc_info:
            services.questions.list_questions(token)
        assert exc_info.value.message == "User is signed out.Sign in first to get all questions"

    def test_list_by_user_is_open_to_any_signed_in_user(self, services, make_user, signin) -> None:
        ann = make_user("ann")
        make_user("bob")
        services.questions.create_question(signin("ann"), "from ann")
        services.questions.create_question(signin("bob"), "from bob")
        listed = services.questions.list_questions_by_user(signin("bob"), ann.uuid)
        assert [q.content for q in listed] == ["from ann"]

    def test_list_by_unknown_user(self, services, make_user, signin) -> None:
        make_user("ann")
        with pytest.raises(UserNotFound) as exc_info:
            services.questions.list_questions_by_user(signin("ann"), "no-such-user")
        assert exc_info.value.code == "USR-001"
        assert exc_info.value.message == "User with entered uuid whose question details are to be seen does not exist"


class TestEdit:
    def test_owner_can_edit(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        original = services.questions.create_question(token, "old")

        edited = services.questions.edit_question(token, original.uuid, "new")

        assert edited.content == "new"
        assert edited.uuid == original.uuid
        assert edited.owner_uuid == original.owner_uuid
        assert edited.created_at == original.created_at
        assert stores.qa.get_question(original.uuid).content == "new"

    def test_non_owner_is_forbidden(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        make_user("bob")
        question = services.questions.create_question(signin("ann"), "ann's")
        with pytest.raises(Forbidden) as exc_info:
            services.questions.edit_question(signin("bob"), question.uuid, "hijacked")
        assert exc_info.value.code == "ATHR-003"
        assert exc_info.value.message == "Only the question owner can edit the question"
        assert stores.qa.get_question(question.uuid).content == "ann's"

    def test_admin_cannot_edit_others_question(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        make_user("root", admin=True)
        question = services.questions.create_question(signin("ann"), "ann's")
        with pytest.raises(Forbidden):
            services.questions.edit_question(signin("root"), question.uuid, "admin edit")
        assert stores.qa.get_question(question.uuid).content == "ann's"

    def test_unknown_question(self, services, make_user, signin) -> None:
        make_user("ann")
        with pytest.raises(QuestionNotFound) as exc_info:
            services.questions.edit_question(signin("ann"), "missing", "x")
        assert exc_info.value.code == "QUES-001"
        assert exc_info.value.message == "Entered question uuid does not exist"

    def test_signed_out_check_precedes_lookup(self, services, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        services.accounts.signout(token)
        with pytest.raises(SignedOut) as exc_info:
            services.questions.edit_question(token, "missing", "x")
        assert exc_info.value.message == "User is signed out.Sign in first to edit the question"


class TestDelete:
    def test_owner_can_delete(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        question = services.questions.create_question(token, "bye")
        deleted = services.questions.delete_question(token, question.uuid)
        assert deleted.uuid == question.uuid
        assert deleted.content == "bye"
        assert stores.qa.get_question(question.uuid) is None

    def test_admin_can_delete_any_question(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        make_user("root", admin=True)
        question = services.questions.create_question(signin("ann"), "spam")
        services.questions.delete_question(signin("root"), question.uuid)
        assert stores.qa.get_question(question.uuid) is None

    def test_non_owner_non_admin_is_forbidden(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        make_user("bob")
        question = services.questions.create_question(signin("ann"), "keep me")
        with pytest.raises(Forbidden) as exc_info:
            services.questions.delete_question(signin("bob"), question.uuid)
        assert exc_info.value.message == "Only the question owner or admin can delete the question"
        assert stores.qa.get_question(question.uuid) is not None

    def test_delete_removes_answers(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        make_user("bob")
        question = services.questions.create_question(signin("ann"), "q")
        answer = services.answers.create_answer(signin("bob"), question.uuid, "a")
        services.questions.delete_question(signin("ann"), question.uuid)
        assert stores.qa.get_answer(answer.uuid) is None

    def test_delete_twice_is_not_found(self, services, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        question = services.questions.create_question(token, "once")
        services.questions.delete_question(token, question.uuid)
        with pytest.raises(QuestionNotFound):
            services.questions.delete_question(token, question.uuid)

    def test_delete_after_sign_out(self, services, stores, make_user, signin) -> None:
        make_user("ann")
        token = signin("ann")
        question = services.questions.create_question(token, "still here")
        services.accounts.signout(token)
        with pytest.raises(SignedOut) as exc_info:
            services.questions.delete_question(token, question.uuid)
        assert exc_info.value.message == "User is signed out.Sign in first to post a question"
        assert stores.qa.get_question(question.uuid) is not None


def test_question_lifecycle_across_users(services, stores, make_user, signin) -> None:
    """Non-owner refused, owner's sign-out ends their access, admin still deletes."""
    make_user("ann")
    make_user("bob")
    make_user("root", admin=True)
    ann_token = signin("ann")

    question = services.questions.create_question(ann_token, "Is this thing on?")

    with pytest.raises(Forbidden):
        services.questions.delete_question(signin("bob"), question.uuid)

    services.accounts.signout(ann_token)
    with pytest.raises(SignedOut):
        services.questions.delete_question(ann_token, question.uuid)

    services.questions.delete_question(signin("root"), question.uuid)
    assert stores.qa.get_question(question.uuid) is None
