"""
api/routes/v1/users.py -- Account endpoints: signup, signin, signout, profile.

Routes:
  POST /user/signup             -- register; 201
  POST /user/signin             -- HTTP Basic credentials; token in `access-token` header
  POST /user/signout            -- token in `authorization` header; `user-uuid` header echoed
  GET  /userprofile/{user_id}   -- any user's profile (requires a signed-in caller)

Security:
  POST /user/signin is rate-limited per IP (Settings.signin_rate_limit).
  POST /user/signup is rate-limited per IP (Settings.signup_rate_limit).
  Cache-Control: no-store on signin responses -- they carry a credential.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from api.limiter import limiter
from api.models import (
    SigninResponse,
    SignoutResponse,
    SignupUserRequest,
    SignupUserResponse,
    UserDetailsResponse,
)
from auth.accounts import AccountService
from auth.dependencies import get_access_token
from auth.models import User
from core.config import get_settings

_settings = get_settings()

router = APIRouter()

_basic = HTTPBasic()


@limiter.limit(_settings.signup_rate_limit)
@router.post("/user/signup", response_model=SignupUserResponse, status_code=201)
def signup(request: Request, body: SignupUserRequest) -> SignupUserResponse:
    """Register a new non-admin account."""
    accounts: AccountService = request.app.state.accounts
    new_user = User(
        uuid="",
        username=body.user_name,
        email=body.email_address,
        role="",
        first_name=body.first_name,
        last_name=body.last_name,
        country=body.country,
        about_me=body.about_me,
        dob=body.dob,
        contact_number=body.contact_number,
    )
    created = accounts.signup(new_user, body.password)
    return SignupUserResponse(id=created.uuid)


@limiter.limit(_settings.signin_rate_limit)
@router.post("/user/signin", response_model=SigninResponse)
def signin(request: Request, credentials: HTTPBasicCredentials = Depends(_basic)) -> JSONResponse:
    """Open a new session. Each call yields a fresh token; older sessions stay valid."""
    accounts: AccountService = request.app.state.accounts
    user, session = accounts.signin(credentials.username, credentials.password)
    resp = JSONResponse(status_code=200, content=SigninResponse(id=user.uuid).model_dump())
    resp.headers["access-token"] = session.token
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/user/signout", response_model=SignoutResponse)
def signout(request: Request) -> JSONResponse:
    """End the session named by the authorization header."""
    accounts: AccountService = request.app.state.accounts
    user = accounts.signout(get_access_token(request))
    resp = JSONResponse(status_code=200, content=SignoutResponse(id=user.uuid).model_dump())
    resp.headers["user-uuid"] = user.uuid
    return resp


@router.get("/userprofile/{user_id}", response_model=UserDetailsResponse)
def user_profile(request: Request, user_id: str) -> UserDetailsResponse:
    accounts: AccountService = request.app.state.accounts
    user = accounts.user_profile(get_access_token(request), user_id)
    return UserDetailsResponse.from_user(user)
