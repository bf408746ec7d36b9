"""
auth/policy.py -- Stateless authorization rules.

Pure decisions over data the caller has already resolved. Each rule returns a
bool; the calling use case turns False into Forbidden (ATHR-003) with the
message that fits the resource and action.

Ownership is compared by the public uuid, never the internal numeric id, so
the internal key type stays inside the persistence layer.

Rules in use:
  is_owner_or_admin -- delete a question or an answer
  is_owner          -- edit a question or an answer. Admins do NOT get this
                       right: edit permission is narrower than
                       delete permission.
  is_admin          -- delete another user's account

Layer rule: no imports from api/ or qa/.
"""

from __future__ import annotations

from auth.models import User


def is_owner(user: User, owner_uuid: str) -> bool:
    return user.uuid == owner_uuid


def is_admin(user: User) -> bool:
    return user.is_admin


def is_owner_or_admin(user: User, owner_uuid: str) -> bool:
    return is_owner(user, owner_uuid) or is_admin(user)
