import os
import uuid

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_SALT", "4")

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cats_social import cat_repo, models, repo  # noqa: F401
from cats_social.database import Base
from cats_social.services import cat_match, cats as cat_service
from cats_social.services.rate_limit import budget


@pytest.fixture
def session_factory(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    for module in (repo, cat_service, cat_match):
        monkeypatch.setattr(module, "SessionLocal", factory)
    budget.reset()
    yield factory
    engine.dispose()


class Seed:
    def __init__(self, factory):
        self.factory = factory

    def user(self, name: str = "Test Owner", email: str | None = None) -> str:
        row = repo.create_user(email or f"{uuid.uuid4().hex[:10]}@example.com", name, "not-a-real-hash")
        return str(row["id"])

    def cat(self, owner_id: str, sex: str = "male", name: str = "Tom", has_matched: bool = False) -> str:
        with self.factory() as db:
            created = cat_repo.create_cat(
                db,
                owner_id=owner_id,
                name=name,
                race="Persian",
                sex=sex,
                age_in_month=12,
                description="friendly cat",
                image_urls=["https://img.example.com/cat.png"],
            )
            if has_matched:
                db.execute(text("UPDATE cats SET has_matched = true WHERE id=:id"), {"id": created["id"]})
            db.commit()
        return str(created["id"])

    def count(self, sql: str, **params) -> int:
        with self.factory() as db:
            return int(db.execute(text(sql), params).scalar())

    def match_status(self, match_id: str) -> str | None:
        with self.factory() as db:
            row = db.execute(text("SELECT status FROM cat_matches WHERE id=:id"), {"id": match_id}).first()
        return row[0] if row else None

    def has_matched(self, cat_id: str) -> bool:
        with self.factory() as db:
            return bool(db.execute(text("SELECT has_matched FROM cats WHERE id=:id"), {"id": cat_id}).scalar())


@pytest.fixture
def seed(session_factory):
    return Seed(session_factory)
