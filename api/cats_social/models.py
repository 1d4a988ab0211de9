import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, false, func

from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(254), nullable=False, unique=True)
    name = Column(String(50), nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Cat(Base):
    __tablename__ = "cats"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(30), nullable=False)
    race = Column(String, nullable=False)
    sex = Column(String, nullable=False)
    age_in_month = Column(Integer, nullable=False)
    description = Column(String(200), nullable=False)
    # JSON-encoded list of URLs
    image_urls = Column(Text, nullable=False)
    has_matched = Column(Boolean, nullable=False, default=False, server_default=false())
    owned_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    deleted = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("sex IN ('male', 'female')", name="ck_cats_sex"),
        Index("idx_cats_owned_by_id", "owned_by_id"),
        Index("idx_cats_created_at", "created_at"),
    )


class CatMatch(Base):
    __tablename__ = "cat_matches"

    id = Column(String(36), primary_key=True, default=_new_id)
    issued_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    issuer_cat_id = Column(String(36), ForeignKey("cats.id"), nullable=False)
    receiver_cat_id = Column(String(36), ForeignKey("cats.id"), nullable=False)
    message = Column(String(120), nullable=False)
    status = Column(String, nullable=False, default="waiting", server_default="waiting")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("issuer_cat_id <> receiver_cat_id", name="ck_cat_matches_distinct_cats"),
        CheckConstraint("status IN ('waiting', 'accepted', 'rejected')", name="ck_cat_matches_status"),
        Index("idx_cat_matches_issuer_cat_id", "issuer_cat_id"),
        Index("idx_cat_matches_receiver_cat_id", "receiver_cat_id"),
        Index("idx_cat_matches_issued_by_id", "issued_by_id"),
    )
