# app/core/security.py
import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import jwt
from passlib.context import CryptContext
from app.core.config import settings

# 1. Configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGORITHM = "HS256"


def session_ttl() -> timedelta:
    return timedelta(hours=settings.SESSION_TTL_HOURS)


# 2. Password Handling
def _pre_hash_password(password: str) -> str:
    """
    Handle the 'bcrypt 72-byte limit' safely.
    Passwords longer than 72 bytes are SHA-256 hashed first so the
    entire password matters, regardless of length.
    """
    if len(password.encode('utf-8')) <= 72:
        return password

    # SHA-256 hexdigest is 64 chars, which fits inside 72 bytes.
    return hashlib.sha256(password.encode('utf-8')).hexdigest()

def hash_password(password: str) -> str:
    safe_password = _pre_hash_password(password)
    return pwd_context.hash(safe_password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    safe_password = _pre_hash_password(plain_password)
    return pwd_context.verify(safe_password, hashed_password)


# 3. Session Token Creation
def create_access_token(
    subject: Union[str, Any],
    issued_at: Optional[datetime] = None,
    data: Optional[dict] = None
) -> tuple[str, str, datetime]:
    """
    Returns (token, jti, expires_at). The jti is stored alongside the
    session row so a token can be revoked server side.
    """
    now = issued_at or datetime.now(timezone.utc)
    expire = now + session_ttl()
    jti = uuid.uuid4().hex

    to_encode = {
        "sub": str(subject),
        "jti": jti,
        "exp": expire,
        "iat": now,
        "nbf": now,
    }

    if data:
        to_encode.update(data)

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, jti, expire


# 4. Decoding
def decode_token(token: str) -> dict:
    """Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError for the caller to map."""
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        options={"verify_exp": True}
    )
