"""
auth/tokens.py -- Password hashing and session token generation.

Security design decisions:
  Passwords: bcrypt, used directly (no passlib wrapper). The salt is generated
       once per user at signup and stored next to the hash, so verification
       recomputes bcrypt(plain, salt) and compares with hmac.compare_digest --
       a constant-time comparison that does not leak how many bytes matched.
       The _DUMMY_SALT / _DUMMY_HASH pair enables timing equalization in
       auth/accounts.signin() so response time does not reveal whether a
       username exists.

  Session tokens: python-jose HS256 JWTs carrying the user's public uuid, iat,
       exp and a random jti. The jti (secrets.token_urlsafe, 256 bits) is what
       makes every token unique, including two tokens issued for the same user
       in the same second. Nothing in QuoraLite decodes these tokens to make a
       decision: a token is only a lookup key into the session store, and the
       store's expires_at / logged_out_at are authoritative.

  SECRET_KEY: sourced from core.config.get_settings().

Layer rule: no imports from api/ or qa/. Import from core/ is allowed.
"""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime

import bcrypt
from jose import jwt

from core.config import get_settings

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Credential verifier
# ---------------------------------------------------------------------------


# bcrypt only reads the first 72 bytes of a password, and bcrypt>=5 raises
# instead of truncating. Callers that accept new passwords reject anything
# longer (see password_fits); hashing and verification cut at the same limit
# so neither can raise on a stored or attempted credential.
MAX_PASSWORD_BYTES = 72


def password_fits(plain: str) -> bool:
    """Return True if `plain` is within bcrypt's input limit once UTF-8 encoded."""
    return len(plain.encode("utf-8")) <= MAX_PASSWORD_BYTES


def _password_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(plain: str) -> tuple[str, str]:
    """Return (salt, hash) for a new credential.

    A fresh random salt is generated on every call, so two users with the same
    password never share a hash.
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_password_bytes(plain), salt)
    return salt.decode("utf-8"), hashed.decode("utf-8")


def verify_password(plain: str, salt: str, stored_hash: str) -> bool:
    """Return True if `plain` hashed with `salt` equals `stored_hash`.

    Pure function. A malformed salt (e.g. a corrupted record) counts as a
    mismatch rather than an error.
    """
    try:
        candidate = bcrypt.hashpw(_password_bytes(plain), salt.encode("utf-8"))
    except ValueError:
        return False
    return hmac.compare_digest(candidate, stored_hash.encode("utf-8"))


# Computed once at module load so the first signin attempt is not measurably
# slower than later ones.
_DUMMY_SALT, _DUMMY_HASH = hash_password("quoralite_timing_dummy")


def burn_password_check(plain: str) -> None:
    """Run one full password verification against a throwaway credential.

    Called when the username is unknown so that path costs the same bcrypt
    work as a real password mismatch.
    """
    verify_password(plain, _DUMMY_SALT, _DUMMY_HASH)


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


def generate_session_token(user_uuid: str, issued_at: datetime, expires_at: datetime) -> str:
    """Return a new signed, globally unique session token.

    The token's contents are informational only. Callers must treat the
    returned string as opaque and resolve it through the session store.
    """
    payload = {
        "sub": user_uuid,
        "iat": issued_at,
        "exp": expires_at,
        "jti": secrets.token_urlsafe(32),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)
