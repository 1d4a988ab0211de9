import logging
from typing import Any

from fastapi import APIRouter

from .. import repo as auth_repo
from ..auth.security import create_access_token, hash_password, verify_password
from ..config import RL_AUTH_LOGIN_LIMIT, RL_AUTH_REGISTER_LIMIT, RL_WINDOW_SECONDS
from ..errors import BadRequestError, ConflictError, NotFoundError
from ..schemas import AuthData, LoginRequest, RegisterRequest
from ..services.rate_limit import limit_per_client

logger = logging.getLogger(__name__)

router = APIRouter()

RL_AUTH_REGISTER = limit_per_client("auth_register", RL_AUTH_REGISTER_LIMIT, RL_WINDOW_SECONDS)
RL_AUTH_LOGIN = limit_per_client("auth_login", RL_AUTH_LOGIN_LIMIT, RL_WINDOW_SECONDS)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _auth_data(user: dict[str, Any]) -> dict[str, Any]:
    token = create_access_token(user_id=str(user["id"]), email=user["email"], name=user["name"])
    return AuthData(email=user["email"], name=user["name"], access_token=token).model_dump(by_alias=True)


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, _: None = RL_AUTH_REGISTER) -> dict[str, Any]:
    email = normalize_email(payload.email)
    user = auth_repo.create_user(email=email, name=payload.name, password_hash=hash_password(payload.password))
    if not user:
        raise ConflictError("email already exists")
    logger.info("user registered id=%s", user["id"])
    return {"message": "User registered successfully", "data": _auth_data(user)}


@router.post("/login")
def login(payload: LoginRequest, _: None = RL_AUTH_LOGIN) -> dict[str, Any]:
    user = auth_repo.get_user_by_email(normalize_email(payload.email))
    if not user:
        raise NotFoundError("user not found")
    if not verify_password(payload.password, user["password_hash"]):
        raise BadRequestError("invalid password")
    return {"message": "User logged successfully", "data": _auth_data(user)}
