"""
Password hashing, token signing and the Access Gate dependency.

Tokens are stateless HS256 JWTs embedding the operator id, email and name.
The gate trusts the signature alone: it does not re-read the credential
store, so an operator removed after login keeps a valid token until expiry.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Request
from pydantic import BaseModel

from hr_service.core.config import Settings
from hr_service.core.exceptions import Unauthenticated
from hr_service.core.logging import get_logger

logger = get_logger(__name__)

NO_TOKEN_MESSAGE = "Access denied. No token provided."
INVALID_TOKEN_MESSAGE = "Invalid or expired token."

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


class TokenData(BaseModel):
    """Operator identity carried inside a session token."""

    id: int
    email: str
    name: str


def parse_duration(value: str) -> timedelta:
    """Parse ``"8h"``, ``"30m"``, ``"2d"``, ``"45s"`` or a bare number of seconds."""
    match = _DURATION_RE.match(str(value).lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Password hash in credential store is malformed")
        return False


def create_access_token(
    identity: TokenData, settings: Settings, now: Optional[datetime] = None
) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        **identity.model_dump(),
        "iat": issued_at,
        "exp": issued_at + parse_duration(settings.JWT_EXPIRES_IN),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> TokenData:
    """Verify a token's signature and expiry and return the embedded identity."""
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
        return TokenData.model_validate(payload)
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise Unauthenticated(INVALID_TOKEN_MESSAGE)
    except ValueError as e:
        logger.warning(f"Token claims malformed: {e}")
        raise Unauthenticated(INVALID_TOKEN_MESSAGE)


def get_current_operator(request: Request) -> TokenData:
    """
    Access Gate.

    Requires ``Authorization: Bearer <token>`` and attaches the decoded
    identity to ``request.state.operator``.
    """
    header = request.headers.get("Authorization")
    if not header or not header.startswith("Bearer "):
        raise Unauthenticated(NO_TOKEN_MESSAGE)

    token = header[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated(NO_TOKEN_MESSAGE)

    operator = decode_access_token(token, request.app.state.settings)
    request.state.operator = operator
    return operator
