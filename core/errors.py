"""
core/errors.py -- Error taxonomy shared by every QuoraLite use case.

Every error carries a stable machine-readable code and a human-readable
message. Both are part of the observable contract: API clients match on the
code, and the message text is returned verbatim.

Hierarchy:
  QuoraError
    AuthorizationFailed        ATHR-*  (session and permission checks)
      NotSignedIn              ATHR-001  token unknown to the session store
      SignedOut                ATHR-002  session expired or logged out
      Forbidden                ATHR-003  signed in, but not allowed
    ResourceNotFound
      QuestionNotFound         QUES-001
      AnswerNotFound           ANS-001
      UserNotFound             USR-001
    CredentialRejected
      SignupRestricted         SGR-001 / SGR-002  username or email taken
      AuthenticationFailed     ATH-001 / ATH-002  unknown user or bad password

status_code is the HTTP status the API layer answers with. Every ATHR-* error
is 403, including "not signed in"; only signin failures (ATH-*) are 401.
It lives on the error so api/main.py needs exactly one exception handler for
the whole tree.

Layer rule: core/ is the kernel. No imports from api/, auth/, or qa/.
"""

from __future__ import annotations


class QuoraError(Exception):
    """Base class for every domain error raised by a use case."""

    status_code: int = 400
    default_code: str = ""
    default_message: str = ""

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.code = code or self.default_code
        self.message = message or self.default_message
        super().__init__(f"{self.code}: {self.message}")

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


# ---------------------------------------------------------------------------
# Session and permission failures
# ---------------------------------------------------------------------------


class AuthorizationFailed(QuoraError):
    status_code = 403


class NotSignedIn(AuthorizationFailed):
    default_code = "ATHR-001"
    default_message = "User has not signed in"


class SignedOut(AuthorizationFailed):
    """The session exists but is no longer active.

    Expiry and explicit sign-out are reported identically. The message is
    supplied by the calling use case (e.g. "Sign in first to post a question").
    """

    default_code = "ATHR-002"
    default_message = "User is signed out"


class Forbidden(AuthorizationFailed):
    default_code = "ATHR-003"
    default_message = "Unauthorized Access"


# ---------------------------------------------------------------------------
# Missing resources
# ---------------------------------------------------------------------------


class ResourceNotFound(QuoraError):
    status_code = 404


class QuestionNotFound(ResourceNotFound):
    default_code = "QUES-001"
    default_message = "Entered question uuid does not exist"


class AnswerNotFound(ResourceNotFound):
    default_code = "ANS-001"
    default_message = "Entered answer uuid does not exist"


class UserNotFound(ResourceNotFound):
    default_code = "USR-001"
    default_message = "User with entered uuid does not exist"


# ---------------------------------------------------------------------------
# Signup and signin
# ---------------------------------------------------------------------------


class CredentialRejected(QuoraError):
    pass


class SignupRestricted(CredentialRejected):
    status_code = 409


class AuthenticationFailed(CredentialRejected):
    status_code = 401
