"""Unit tests for qa/admin.py -- admin-only account deletion."""

import pytest

from core.errors import Forbidden, NotSignedIn, SignedOut, UserNotFound


def _token(services, username: str) -> str:
    return services.accounts.signin(username, "password123")[1].token


def test_admin_deletes_user_and_their_content(services, stores, make_user) -> None:
    make_user("root", admin=True)
    ann = make_user("ann")
    make_user("bob")
    ann_token = _token(services, "ann")
    bob_token = _token(services, "bob")

    ann_question = services.questions.create_question(ann_token, "ann asks")
    bob_question = services.questions.create_question(bob_token, "bob asks")
    answer_on_ann = services.answers.create_answer(bob_token, ann_question.uuid, "bob on ann")
    ann_answer = services.answers.create_answer(ann_token, bob_question.uuid, "ann on bob")
    bob_answer = services.answers.create_answer(bob_token, bob_question.uuid, "bob on bob")

    deleted = services.admin.delete_user(_token(services, "root"), ann.uuid)

    assert deleted.uuid == ann.uuid
    assert stores.users.get_by_uuid(ann.uuid) is None
    assert stores.qa.get_question(ann_question.uuid) is None
    assert stores.qa.get_answer(answer_on_ann.uuid) is None
    assert stores.qa.get_answer(ann_answer.uuid) is None
    # Other users' content on other questions survives.
    assert stores.qa.get_question(bob_question.uuid) is not None
    assert stores.qa.get_answer(bob_answer.uuid) is not None


def test_deleted_users_sessions_stop_working(services, stores, make_user) -> None:
    make_user("root", admin=True)
    ann = make_user("ann")
    ann_token = _token(services, "ann")

    services.admin.delete_user(_token(services, "root"), ann.uuid)

    with pytest.raises(NotSignedIn):
        services.questions.list_questions(ann_token)
    assert stores.sessions.get_by_token(ann_token) is not None


def test_non_admin_is_forbidden(services, stores, make_user) -> None:
    make_user("ann")
    bob = make_user("bob")
    with pytest.raises(Forbidden) as exc_info:
        services.admin.delete_user(_token(services, "ann"), bob.uuid)
    assert exc_info.value.code == "ATHR-003"
    assert exc_info.value.message == "Unauthorized Access, Entered user is not an admin"
    assert stores.users.get_by_uuid(bob.uuid) is not None


def test_non_admin_is_forbidden_even_for_unknown_target(services, make_user) -> None:
    make_user("ann")
    with pytest.raises(Forbidden):
        services.admin.delete_user(_token(services, "ann"), "no-such-user")


def test_unknown_target(services, make_user) -> None:
    make_user("root", admin=True)
    with pytest.raises(UserNotFound) as exc_info:
        services.admin.delete_user(_token(services, "root"), "no-such-user")
    assert exc_info.value.message == "User with entered uuid to be deleted does not exist"


def test_signed_out_admin(services, make_user) -> None:
    make_user("root", admin=True)
    ann = make_user("ann")
    token = _token(services, "root")
    services.accounts.signout(token)
    with pytest.raises(SignedOut) as exc_info:
        services.admin.delete_user(token, ann.uuid)
    assert exc_info.value.message == "User is signed out"


def test_failed_account_delete_keeps_content(services, stores, make_user, monkeypatch) -> None:
    make_user("root", admin=True)
    ann = make_user("ann")
    make_user("bob")
    ann_token = _token(services, "ann")
    question = services.questions.create_question(ann_token, "ann asks")
    answer = services.answers.create_answer(_token(services, "bob"), question.uuid, "bob answers")

    def _fail(user_uuid, conn=None):
        raise RuntimeError("user delete failed")

    monkeypatch.setattr(stores.users, "delete_by_uuid", _fail)
    with pytest.raises(RuntimeError):
        services.admin.delete_user(_token(services, "root"), ann.uuid)

    assert stores.users.get_by_uuid(ann.uuid) is not None
    assert stores.qa.get_question(question.uuid) is not None
    assert stores.qa.get_answer(answer.uuid) is not None
