"""
api/routes/v1/admin.py -- Administrative endpoints.

Routes:
  DELETE /admin/user/{user_id}  -- delete an account and its content (admin only)

The admin check happens inside UserAdminService, not as a router dependency,
so the signed-out / forbidden messages stay part of the use case contract.
"""

from fastapi import APIRouter, Request

from api.models import UserDeleteResponse
from auth.dependencies import get_access_token
from qa.admin import UserAdminService

router = APIRouter()


@router.delete("/admin/user/{user_id}", response_model=UserDeleteResponse)
def delete_user(request: Request, user_id: str) -> UserDeleteResponse:
    service: UserAdminService = request.app.state.user_admin
    deleted = service.delete_user(get_access_token(request), user_id)
    return UserDeleteResponse(id=deleted.uuid)
