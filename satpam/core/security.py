"""
Credentials for satpam accounts.

Passwords are stored as salted PBKDF2-SHA256 hashes. Logins receive an
HS256 bearer token whose claims carry the person id, login name and one
of the three satpam roles; a token with any other role is rejected when
it is read back.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .config import get_app_env, settings

ROLE_ADMIN = "ADMIN"
ROLE_SUPERVISOR = "SUPERVISOR"
ROLE_GUARD = "GUARD"
ROLES = {ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_GUARD}

HASH_SCHEME = "pbkdf2_sha256"
TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}
DEV_JWT_SECRET = "dev-jwt-secret-change-me"


class InvalidTokenError(ValueError):
    pass


@dataclass(frozen=True)
class AccessClaims:
    user_id: str
    username: str
    role: str
    expires_at: datetime


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _unb64(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _pbkdf2(password: str, salt: str, rounds: int) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), rounds).hex()


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    rounds = settings.password_hash_rounds
    salt = secrets.token_hex(16)
    return f"{HASH_SCHEME}${rounds}${salt}${_pbkdf2(password, salt, rounds)}"


def verify_password(password: str, encoded: Optional[str]) -> bool:
    """Check a login password; malformed or foreign hashes never match."""
    scheme, _, rest = (encoded or "").partition("$")
    rounds_raw, _, rest = rest.partition("$")
    salt, _, expected = rest.partition("$")
    if scheme != HASH_SCHEME or not rounds_raw.isdigit() or not salt or not expected:
        return False
    return secrets.compare_digest(_pbkdf2(password, salt, int(rounds_raw)), expected)


def _signing_key() -> bytes:
    secret = (settings.jwt_secret or "").strip()
    if not secret:
        if get_app_env() == "prod":
            raise RuntimeError("SATPAM_JWT_SECRET is required when auth is enabled")
        secret = DEV_JWT_SECRET
    return secret.encode("utf-8")


def _sign(signing_input: str) -> bytes:
    return hmac.new(_signing_key(), signing_input.encode("ascii"), hashlib.sha256).digest()


def _encode(payload: dict) -> str:
    head = _b64(json.dumps(TOKEN_HEADER, separators=(",", ":")).encode("utf-8"))
    body = _b64(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{head}.{body}"
    return f"{signing_input}.{_b64(_sign(signing_input))}"


def issue_access_token(*, user_id: str, username: str, role: str, now: Optional[datetime] = None) -> str:
    role = (role or "").strip().upper()
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role or 'empty'}")
    if not user_id or not username:
        raise ValueError("user_id and username are required")
    issued = now or datetime.now(timezone.utc)
    expires = issued + timedelta(minutes=settings.jwt_exp_minutes)
    return _encode(
        {
            "sub": username,
            "user_id": user_id,
            "role": role,
            "iat": int(issued.timestamp()),
            "exp": int(expires.timestamp()),
        }
    )


def decode_access_token(token: str, *, now: Optional[datetime] = None) -> AccessClaims:
    try:
        head, body, signature = token.split(".")
        header = json.loads(_unb64(head))
        payload = json.loads(_unb64(body))
        provided = _unb64(signature)
    except ValueError as exc:
        raise InvalidTokenError("Malformed token") from exc
    if header != TOKEN_HEADER:
        raise InvalidTokenError("Unsupported token header")
    if not secrets.compare_digest(_sign(f"{head}.{body}"), provided):
        raise InvalidTokenError("Invalid signature")
    if not isinstance(payload, dict):
        raise InvalidTokenError("Invalid payload")

    exp = payload.get("exp")
    if not isinstance(exp, int) or exp <= 0:
        raise InvalidTokenError("Missing exp")
    current = now or datetime.now(timezone.utc)
    if int(current.timestamp()) >= exp:
        raise InvalidTokenError("Token expired")

    role = str(payload.get("role") or "").strip().upper()
    username = str(payload.get("sub") or "").strip()
    user_id = str(payload.get("user_id") or "").strip()
    if role not in ROLES:
        raise InvalidTokenError(f"Unknown role: {role or 'empty'}")
    if not username or not user_id:
        raise InvalidTokenError("Missing subject")
    return AccessClaims(
        user_id=user_id,
        username=username,
        role=role,
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
