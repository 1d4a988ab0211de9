"""
Bearer-token authentication dependency.

Cat and match routes depend on ``get_current_user``; the returned dict is the
only source of the caller's identity for ownership and authorization checks.
"""

import logging
import uuid
from typing import Any

from fastapi import Header

from .. import repo
from ..config import DEV_MODE
from ..errors import UnauthenticatedError
from .security import decode_access_token

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when authentication fails with detailed reason."""

    def __init__(self, reason: str, detail: str = "invalid token", payload: dict[str, Any] | None = None):
        self.reason = reason
        self.detail = detail
        self.payload = payload
        self.trace_id = str(uuid.uuid4())
        super().__init__(detail)


def _log_auth_failure(
    reason: str,
    trace_id: str,
    payload: dict[str, Any] | None = None,
) -> None:
    log_data = {
        "trace_id": trace_id,
        "reason": reason,
        "token_user_id": payload.get("sub") if payload else None,
        "token_email": payload.get("email") if payload else None,
    }
    logger.warning(f"[AUTH_FAILURE] {log_data}")


def _extract_bearer(authorization: str | None) -> str:
    if not authorization:
        raise AuthError(reason="missing_token", detail="missing Authorization header")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthError(reason="malformed_token", detail="token should be Bearer")
    return parts[1].strip()


def _validate_token_and_get_user(token: str) -> dict[str, Any]:
    try:
        payload = decode_access_token(token)
    except UnauthenticatedError as exc:
        raise AuthError(reason="signature_invalid", detail=exc.message) from exc

    user_id = str(payload.get("sub") or "")
    if not user_id:
        raise AuthError(reason="token_missing_subject", payload=payload)

    user = repo.get_user_by_id(user_id)
    if not user:
        raise AuthError(reason="token_user_not_found", payload=payload)

    logger.debug(f"[auth] token valid, sub={user_id} email={user.get('email')}")
    return {"id": str(user["id"]), "email": user["email"], "name": user["name"]}


def get_current_user(authorization: str | None = Header(default=None, alias="Authorization")) -> dict[str, Any]:
    try:
        token = _extract_bearer(authorization)
        return _validate_token_and_get_user(token)
    except AuthError as e:
        _log_auth_failure(e.reason, e.trace_id, payload=e.payload)
        message = f"{e.detail} ({e.reason})" if DEV_MODE else e.detail
        raise UnauthenticatedError(message) from e
