"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The access token travels in the `authorization` request header, either raw
(as returned in the `access-token` header at signin) or as
`Bearer <token>`. get_access_token() normalizes both forms.

Route handlers pass the token straight into a use case; the use case calls
SessionService.authenticate() with its own signed-out message. This module
never decides on its own whether a token is valid.

get_current_user() is for routes with no use-case layer of their own (the
API docs). It raises NotSignedIn / SignedOut, which api/main.py renders like
every other QuoraError.

Layer rule: no imports from qa/.
  auth/dependencies.py may import from fastapi because it is part of the
  FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import User
from auth.sessions import SessionService


def get_access_token(request: Request) -> str | None:
    """Return the token from the authorization header, or None if absent."""
    header = request.headers.get("authorization", "").strip()
    if not header:
        return None
    if header[:7].lower() == "bearer ":
        return header[7:].strip() or None
    return header


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service


def get_current_user(request: Request) -> User:
    """Require a signed-in caller.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)): ...
    """
    return get_session_service(request).authenticate(get_access_token(request))
