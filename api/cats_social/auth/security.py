from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from ..config import ACCESS_TOKEN_TTL_HOURS, BCRYPT_SALT, JWT_SECRET
from ..errors import InternalError, UnauthenticatedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_SALT)
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, email: str, name: str, ttl_hours: int | None = None) -> str:
    if not JWT_SECRET:
        raise InternalError("JWT secret not configured")
    now = datetime.now(timezone.utc)
    exp = now + timedelta(hours=ttl_hours or ACCESS_TOKEN_TTL_HOURS)
    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "name": name,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    if not JWT_SECRET:
        raise InternalError("JWT secret not configured")
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise UnauthenticatedError("token expired") from exc
    except jwt.PyJWTError as exc:
        raise UnauthenticatedError("invalid token") from exc
    if not isinstance(payload, dict):
        raise UnauthenticatedError("invalid token")
    return payload
