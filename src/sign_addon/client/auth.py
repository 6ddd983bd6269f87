from __future__ import annotations

import time
import uuid

import jwt

JWT_ALGORITHM = "HS256"


def issue_token(key: str, secret: str, expires_in: int, now: float | None = None) -> str:
    """Issue a short-lived HS256 token identifying the API key holder.

    Args:
        key: API key, used as the JWT issuer
        secret: Shared API secret the token is signed with
        expires_in: Seconds until the token expires; must be positive
        now: Issue time as a UNIX timestamp (defaults to the current time)
    """
    if expires_in <= 0:
        raise ValueError(f"expires_in must be positive, got {expires_in}")

    issued_at = int(now if now is not None else time.time())
    claims = {
        "iss": key,
        "jti": str(uuid.uuid4()),
        "iat": issued_at,
        "exp": issued_at + int(expires_in),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)
