"""
API request and response models for QuoraLite REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
qa/models.py, which own the internal domain representation. Route handlers
map between the two.

Separation of concerns: domain models = domain truth; api/ models = API contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from auth.tokens import MAX_PASSWORD_BYTES, password_fits
from qa.models import Answer, Question

# ---------------------------------------------------------------------------
# Users -- requests
# ---------------------------------------------------------------------------


class SignupUserRequest(BaseModel):
    """Request body for POST /user/signup."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    user_name: str = Field(min_length=1, max_length=255)
    email_address: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)
    country: Optional[str] = Field(default=None, max_length=100)
    about_me: Optional[str] = Field(default=None, max_length=1000)
    dob: Optional[str] = Field(default=None, max_length=30)
    contact_number: Optional[str] = Field(default=None, max_length=30)

    @field_validator("password")
    @classmethod
    def password_within_bcrypt_limit(cls, v: str) -> str:
        """max_length counts characters; bcrypt's limit is in UTF-8 bytes."""
        if not password_fits(v):
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return v


# ---------------------------------------------------------------------------
# Users -- responses
# ---------------------------------------------------------------------------


class SignupUserResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str = "USER SUCCESSFULLY REGISTERED"


class SigninResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    message: str = "SIGNED IN SUCCESSFULLY"


class SignoutResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    message: str = "SIGNED OUT SUCCESSFULLY"


class UserDetailsResponse(BaseModel):
    """Public profile returned by GET /userprofile/{userId}. Never includes credentials."""

    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str
    last_name: str
    user_name: str
    email_address: str
    country: Optional[str]
    about_me: Optional[str]
    dob: Optional[str]
    contact_number: Optional[str]

    @classmethod
    def from_user(cls, user: User) -> "UserDetailsResponse":
        return cls(
            id=user.uuid,
            first_name=user.first_name,
            last_name=user.last_name,
            user_name=user.username,
            email_address=user.email,
            country=user.country,
            about_me=user.about_me,
            dob=user.dob,
            contact_number=user.contact_number,
        )


class UserDeleteResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str = "USER SUCCESSFULLY DELETED"


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


class QuestionRequest(BaseModel):
    """Request body for POST /question/create and PUT /question/edit/{id}.

    Only content is accepted. Owner and timestamps are never read from the
    request; extra fields are ignored.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(min_length=1, max_length=5000)


class QuestionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str


class QuestionDetailsResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    content: str

    @classmethod
    def from_question(cls, question: Question) -> "QuestionDetailsResponse":
        return cls(id=question.uuid, content=question.content)


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


class AnswerRequest(BaseModel):
    """Request body for POST /question/{id}/answer/create and PUT /answer/edit/{id}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    answer: str = Field(min_length=1, max_length=5000)


class AnswerResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: str


class AnswerDetailsResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question_id: str
    answer_content: str

    @classmethod
    def from_answer(cls, answer: Answer) -> "AnswerDetailsResponse":
        return cls(id=answer.uuid, question_id=answer.question_uuid, answer_content=answer.content)


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
