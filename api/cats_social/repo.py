import uuid
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from .database import SessionLocal


def create_user(email: str, name: str, password_hash: str) -> dict[str, Any] | None:
    user_id = str(uuid.uuid4())
    try:
        with SessionLocal() as db:
            db.execute(
                text(
                    """
                    INSERT INTO users (id, email, name, password_hash)
                    VALUES (:id, :email, :name, :password_hash)
                    """
                ),
                {"id": user_id, "email": email, "name": name, "password_hash": password_hash},
            )
            db.commit()
    except IntegrityError:
        return None
    return get_user_by_id(user_id)


def get_user_by_email(email: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text("SELECT id, email, name, password_hash, created_at FROM users WHERE email=:email"),
            {"email": email},
        ).mappings().first()
    return dict(row) if row else None


def get_user_by_id(user_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text("SELECT id, email, name, password_hash, created_at FROM users WHERE id=:id"),
            {"id": user_id},
        ).mappings().first()
    return dict(row) if row else None
